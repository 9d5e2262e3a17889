"""
TipMate Backend — TipCalculation SQLAlchemy Model
===================================================

What:  ORM model representing the `tip_calculations` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads it for
       migrations, the connector creates it on first connect.
Who:   Used by TipCalculationService for inserts and the recent-list query.

Table Design:
    - UUID primary key assigned on insert
    - Amounts stored as floats (JSON numbers on the wire)
    - date: UTC timestamp, defaults to insertion time
    - Every column NOT NULL: presence and type are enforced here, value
      ranges are not (a negative tip is accepted by this layer)

    Index on date DESC backs "10 most recent" listing.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from tipmate.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TipCalculation(Base):
    """
    A persisted tip calculation.

    Lifecycle:
        Created by POST /api/tip-calculations. Never updated or deleted.
    """

    __tablename__ = "tip_calculations"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, assigned on insert",
    )

    customer_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Name of the customer the tip was calculated for",
    )

    mobile_number: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        comment="Customer mobile number as entered",
    )

    # ── Amounts ───────────────────────────────────────────────────────────
    bill_amount: Mapped[float] = mapped_column(Float, nullable=False)
    tip_amount: Mapped[float] = mapped_column(Float, nullable=False)
    total_amount: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Expected to equal bill_amount + tip_amount",
    )
    tip_percentage: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        comment="round(tip_amount / bill_amount * 100)",
    )

    # ── Timestamp ─────────────────────────────────────────────────────────
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="When the calculation was made (UTC)",
    )

    __table_args__ = (
        Index("idx_tip_calculations_date", date.desc()),
    )

    def __repr__(self) -> str:
        return (
            f"<TipCalculation(id={self.id}, customer='{self.customer_name}', "
            f"total={self.total_amount}, date='{self.date}')>"
        )
