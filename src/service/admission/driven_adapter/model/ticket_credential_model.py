from datetime import datetime
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.platform.database.db_setting import Base


class TicketCredentialModel(Base):
    """
    Both credential shapes in one table.

    A unit credential is a row with total_units = 1, so "consumed" is
    consumed_count = 1 and both shapes share the same conditional increment.
    """

    __tablename__ = 'ticket_credential'
    __table_args__ = (
        CheckConstraint(
            'consumed_count >= 0 AND consumed_count <= total_units',
            name='ck_ticket_credential_consumed_range',
        ),
        CheckConstraint("kind IN ('counter', 'unit')", name='ck_ticket_credential_kind'),
    )

    identifier: Mapped[str] = mapped_column(String(128), primary_key=True)
    purchase_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    kind: Mapped[str] = mapped_column(String(10), nullable=False)
    consumed_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    total_units: Mapped[int] = mapped_column(Integer, nullable=False)
    last_admitted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_admitted_by: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
