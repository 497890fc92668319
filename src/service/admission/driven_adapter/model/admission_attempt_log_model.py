from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class AdmissionAttemptLogModel(Base):
    __tablename__ = 'admission_attempt_log'
    __table_args__ = (
        Index('ix_admission_attempt_log_event_attempted_at', 'event_id', 'attempted_at'),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # UUID7
    identifier: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    verifier_id: Mapped[str] = mapped_column(String(128), nullable=False)
    attempted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    outcome: Mapped[str] = mapped_column(String(10), nullable=False)
    error_code: Mapped[Optional[str]] = mapped_column(String(40), nullable=True)
    customer_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    event_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    event_title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
