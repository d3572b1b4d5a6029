# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""create_currency_tables

Revision ID: 3f1c2a9d7b4e
Revises:
Create Date: 2026-10-19 09:12:41.518230

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1c2a9d7b4e"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "currencies",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("code", sa.String(length=3), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_currencies_code"),
        "currencies",
        ["code"],
        unique=True,
    )

    op.create_table(
        "exchange_rates",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("base_currency_id", sa.Uuid(), nullable=False),
        sa.Column("target_currency_id", sa.Uuid(), nullable=False),
        sa.Column("rate", sa.String(length=64), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(
            ["base_currency_id"], ["currencies.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["target_currency_id"], ["currencies.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_exchange_rates_pair_timestamp",
        "exchange_rates",
        ["base_currency_id", "target_currency_id", "timestamp"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_exchange_rates_pair_timestamp", table_name="exchange_rates")
    op.drop_table("exchange_rates")
    op.drop_index(op.f("ix_currencies_code"), table_name="currencies")
    op.drop_table("currencies")
