"""Load demo priorities, roles, queues and a queue set into the configured database."""

from __future__ import annotations

from pathlib import Path

import psycopg
import structlog

from patient_ticketing.core.config import PROJECT_ROOT, get_settings
from patient_ticketing.core.logging import configure_logging

log = structlog.get_logger(__name__)


def clean_sql(raw_sql: str) -> str:
    cleaned_lines: list[str] = []
    for line in raw_sql.splitlines():
        stripped = line.lstrip()
        # psql meta commands and full-line comments.
        if stripped.startswith("\\") or stripped.startswith("--"):
            continue
        cleaned_lines.append(line)
    return "\n".join(cleaned_lines)


def split_statements(sql_text: str) -> list[str]:
    statements: list[str] = []
    current: list[str] = []
    in_string = False
    idx = 0

    while idx < len(sql_text):
        ch = sql_text[idx]
        current.append(ch)

        if ch == "'":
            next_char = sql_text[idx + 1] if idx + 1 < len(sql_text) else ""
            if in_string and next_char == "'":
                current.append(next_char)
                idx += 1
            else:
                in_string = not in_string
        elif ch == ";" and not in_string:
            statement = "".join(current).strip()
            if statement != ";":
                statements.append(statement)
            current = []

        idx += 1

    tail = "".join(current).strip()
    if tail:
        statements.append(tail)

    return statements


def execute_seed(database_url: str, seed_path: Path) -> int:
    if not seed_path.exists():
        raise FileNotFoundError(f"Seed file not found: {seed_path}")

    statements = split_statements(clean_sql(seed_path.read_text(encoding="utf-8")))
    if not statements:
        raise RuntimeError(f"No SQL statements found in {seed_path}")

    with psycopg.connect(database_url) as connection:
        with connection.cursor() as cursor:
            for statement in statements:
                cursor.execute(statement)
        connection.commit()
    return len(statements)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.app_env, settings.log_level)
    seed_path = PROJECT_ROOT / "seed.sql"
    executed = execute_seed(settings.database_url, seed_path)
    log.info("seed_completed", statements=executed, seed_path=str(seed_path))


if __name__ == "__main__":
    main()
