from pathlib import Path

import pytest

from scripts.seed_db import clean_sql, execute_seed, split_statements


def test_clean_sql_drops_meta_commands_and_comments() -> None:
    raw = "-- demo data\n\\set ON_ERROR_STOP on\nINSERT INTO priorities VALUES (1);\n"

    assert clean_sql(raw) == "INSERT INTO priorities VALUES (1);"


def test_split_statements_respects_quoted_semicolons() -> None:
    sql_text = (
        "INSERT INTO queues (name) VALUES ('Review; urgent');\n"
        "INSERT INTO queues (name) VALUES ('Patient''s queue');\n"
        "SELECT 1"
    )

    assert split_statements(sql_text) == [
        "INSERT INTO queues (name) VALUES ('Review; urgent');",
        "INSERT INTO queues (name) VALUES ('Patient''s queue');",
        "SELECT 1",
    ]


def test_bundled_seed_file_parses() -> None:
    seed_path = Path(__file__).resolve().parents[1] / "seed.sql"

    statements = split_statements(clean_sql(seed_path.read_text(encoding="utf-8")))

    assert len(statements) == 10
    assert statements[0].startswith("INSERT INTO users")


def test_execute_seed_requires_existing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        execute_seed("postgresql://unused", tmp_path / "missing.sql")


def test_execute_seed_rejects_empty_file(tmp_path: Path) -> None:
    seed_path = tmp_path / "empty.sql"
    seed_path.write_text("-- nothing here\n", encoding="utf-8")

    with pytest.raises(RuntimeError):
        execute_seed("postgresql://unused", seed_path)
