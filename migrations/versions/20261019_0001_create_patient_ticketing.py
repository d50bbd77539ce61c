"""create patient ticketing tables

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "20261019_0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(length=40), nullable=False, unique=True),
        sa.Column("first_name", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("last_name", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "priorities",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="1"),
    )

    op.create_table(
        "auth_items",
        sa.Column("name", sa.String(length=64), primary_key=True),
        sa.Column("type", sa.SmallInteger(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("bizrule", sa.String(length=64), nullable=True),
        sa.CheckConstraint("type IN (0, 1, 2)", name="ck_auth_items_type_valid"),
    )

    op.create_table(
        "auth_item_children",
        sa.Column("parent", sa.String(length=64), nullable=False),
        sa.Column("child", sa.String(length=64), nullable=False),
        sa.ForeignKeyConstraint(["parent"], ["auth_items.name"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["child"], ["auth_items.name"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("parent", "child", name="pk_auth_item_children"),
    )

    op.create_table(
        "auth_assignments",
        sa.Column("item_name", sa.String(length=64), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["item_name"], ["auth_items.name"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("item_name", "user_id", name="pk_auth_assignments"),
    )

    op.create_table(
        "queues",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_initial", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column(
            "assignment_fields",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        *_timestamps(),
    )

    op.create_table(
        "queue_outcomes",
        sa.Column("queue_id", sa.BigInteger(), nullable=False),
        sa.Column("outcome_queue_id", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["queue_id"], ["queues.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["outcome_queue_id"], ["queues.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("queue_id", "outcome_queue_id", name="pk_queue_outcomes"),
    )

    op.create_table(
        "queue_set_categories",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("display_order", sa.Integer(), nullable=False, server_default="1"),
    )

    op.create_table(
        "queue_sets",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(length=64), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("category_id", sa.BigInteger(), nullable=True),
        sa.Column("initial_queue_id", sa.BigInteger(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["category_id"], ["queue_set_categories.id"], ondelete="SET NULL"),
        sa.ForeignKeyConstraint(["initial_queue_id"], ["queues.id"], ondelete="SET NULL"),
        sa.UniqueConstraint("initial_queue_id", name="uk_queue_sets_initial_queue"),
    )

    op.create_table(
        "queue_set_users",
        sa.Column("queue_set_id", sa.BigInteger(), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=False),
        sa.ForeignKeyConstraint(["queue_set_id"], ["queue_sets.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("queue_set_id", "user_id", name="pk_queue_set_users"),
    )

    op.create_table(
        "tickets",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("patient_id", sa.BigInteger(), nullable=False),
        sa.Column("priority_id", sa.BigInteger(), nullable=True),
        sa.Column("event_id", sa.BigInteger(), nullable=True),
        sa.Column("created_user_id", sa.BigInteger(), nullable=False),
        sa.Column("last_modified_user_id", sa.BigInteger(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["priority_id"], ["priorities.id"]),
        sa.ForeignKeyConstraint(["created_user_id"], ["users.id"]),
        sa.ForeignKeyConstraint(["last_modified_user_id"], ["users.id"]),
    )

    op.create_table(
        "ticket_queue_assignments",
        sa.Column("id", sa.BigInteger(), primary_key=True, autoincrement=True),
        sa.Column("ticket_id", sa.BigInteger(), nullable=False),
        sa.Column("queue_id", sa.BigInteger(), nullable=False),
        sa.Column("assignment_user_id", sa.BigInteger(), nullable=False),
        sa.Column("assignment_firm_id", sa.BigInteger(), nullable=True),
        sa.Column(
            "assignment_date",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "details",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'[]'::jsonb"),
        ),
        sa.ForeignKeyConstraint(["ticket_id"], ["tickets.id"]),
        sa.ForeignKeyConstraint(["queue_id"], ["queues.id"]),
        sa.ForeignKeyConstraint(["assignment_user_id"], ["users.id"]),
    )

    op.create_index("idx_queues_initial_active", "queues", ["is_initial", "active"])
    op.create_index("idx_queue_outcomes_outcome", "queue_outcomes", ["outcome_queue_id"])
    op.create_index("idx_queue_sets_category", "queue_sets", ["category_id"])
    op.create_index("idx_tickets_patient", "tickets", ["patient_id"])
    op.create_index("idx_tickets_event", "tickets", ["event_id"])
    op.create_index(
        "idx_ticket_queue_assignments_ticket",
        "ticket_queue_assignments",
        ["ticket_id", "assignment_date"],
    )


def downgrade() -> None:
    op.drop_index("idx_ticket_queue_assignments_ticket", table_name="ticket_queue_assignments")
    op.drop_index("idx_tickets_event", table_name="tickets")
    op.drop_index("idx_tickets_patient", table_name="tickets")
    op.drop_index("idx_queue_sets_category", table_name="queue_sets")
    op.drop_index("idx_queue_outcomes_outcome", table_name="queue_outcomes")
    op.drop_index("idx_queues_initial_active", table_name="queues")

    op.drop_table("ticket_queue_assignments")
    op.drop_table("tickets")
    op.drop_table("queue_set_users")
    op.drop_table("queue_sets")
    op.drop_table("queue_set_categories")
    op.drop_table("queue_outcomes")
    op.drop_table("queues")
    op.drop_table("auth_assignments")
    op.drop_table("auth_item_children")
    op.drop_table("auth_items")
    op.drop_table("priorities")
    op.drop_table("users")
