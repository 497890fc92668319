from typing import Optional

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from src.platform.database.db_setting import Base


class EventModel(Base):
    __tablename__ = 'event'

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    date_text: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    time_text: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    venue_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
