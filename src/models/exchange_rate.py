# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Exchange rate history model."""

import uuid as uuid_lib
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from src.models.base import Base, ExactDecimal, utcnow
from src.models.currency import Currency


class ExchangeRate(Base):
    """One observed base -> target rate.

    Rows are append-only. Several rows may exist for the same pair; the
    latest one is picked by timestamp.
    """

    __tablename__ = "exchange_rates"
    __table_args__ = (
        Index(
            "ix_exchange_rates_pair_timestamp",
            "base_currency_id",
            "target_currency_id",
            "timestamp",
        ),
    )

    id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid_lib.uuid4,
    )
    base_currency_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("currencies.id", ondelete="CASCADE"),
        nullable=False,
    )
    target_currency_id: Mapped[uuid_lib.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("currencies.id", ondelete="CASCADE"),
        nullable=False,
    )
    rate: Mapped[Decimal] = mapped_column(ExactDecimal(64), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    # Relationships
    base_currency: Mapped[Currency] = relationship(
        "Currency", foreign_keys=[base_currency_id]
    )
    target_currency: Mapped[Currency] = relationship(
        "Currency", foreign_keys=[target_currency_id]
    )
