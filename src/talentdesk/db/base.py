from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from talentdesk.core.dates import utcnow
from talentdesk.core.ids import new_object_id


class Base(DeclarativeBase):
    pass


class DocumentIdMixin:
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=new_object_id)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False
    )
