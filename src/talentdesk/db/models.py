from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from talentdesk.core.dates import utcnow
from talentdesk.db.base import Base, DocumentIdMixin, TimestampMixin


class User(DocumentIdMixin, TimestampMixin, Base):
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(20), default="user", nullable=False)
    google_id: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    is_google_user: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    picture: Mapped[str] = mapped_column(String(500), default="", nullable=False)
    profile_json: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)


class Job(DocumentIdMixin, TimestampMixin, Base):
    __tablename__ = "jobs"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(20), default="Full-time", nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    requirements: Mapped[str] = mapped_column(Text, nullable=False)
    salary_min: Mapped[float] = mapped_column(Float, nullable=False)
    salary_max: Mapped[float] = mapped_column(Float, nullable=False)
    salary_currency: Mapped[str] = mapped_column(String(10), default="USD", nullable=False)
    skills_json: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="open", index=True, nullable=False)
    posted_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    closing_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_by: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )


class Applicant(DocumentIdMixin, TimestampMixin, Base):
    __tablename__ = "applicants"
    __table_args__ = (UniqueConstraint("email", "job_id", name="uq_applicant_email_job"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), index=True, nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    # no FK: removing a job leaves its applicants pointing at it
    job_id: Mapped[str] = mapped_column(String(24), index=True, nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="pending", index=True, nullable=False)
    source: Mapped[str] = mapped_column(String(20), nullable=False)
    resume_url: Mapped[str] = mapped_column(String(500), nullable=False)
    applied_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)


class Interview(DocumentIdMixin, TimestampMixin, Base):
    __tablename__ = "interviews"

    applicant_id: Mapped[str] = mapped_column(String(24), index=True, nullable=False)
    job_id: Mapped[str] = mapped_column(String(24), index=True, nullable=False)
    interviewers_json: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    time: Mapped[str] = mapped_column(String(40), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, default=60, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    location: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="scheduled", index=True, nullable=False)
    feedback_json: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)
