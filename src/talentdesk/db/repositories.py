from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any, TypeVar

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from talentdesk.db.base import Base
from talentdesk.db.models import Applicant, Interview, Job, User

ModelT = TypeVar("ModelT", bound=Base)


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size else 0


class Repository:
    def __init__(self, session: Session):
        self.session = session

    def add(self, obj: ModelT) -> ModelT:
        self.session.add(obj)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def apply_changes(self, obj: ModelT, values: dict[str, Any]) -> ModelT:
        for key, value in values.items():
            setattr(obj, key, value)
        self.session.commit()
        self.session.refresh(obj)
        return obj

    def delete(self, obj: Base) -> None:
        self.session.delete(obj)
        self.session.commit()

    # users

    def get_user(self, user_id: str) -> User | None:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return self.session.scalar(select(User).where(func.lower(User.email) == email.strip().lower()))

    def list_users(self) -> list[User]:
        return list(self.session.scalars(select(User).order_by(User.created_at.asc())).all())

    # jobs

    def get_job(self, job_id: str) -> Job | None:
        return self.session.get(Job, job_id)

    def list_jobs(self, status: str | None = None) -> list[Job]:
        statement = select(Job).order_by(Job.created_at.desc())
        if status:
            statement = statement.where(Job.status == status)
        return list(self.session.scalars(statement).all())

    def job_titles(self, job_ids: Iterable[str]) -> dict[str, str]:
        ids = {job_id for job_id in job_ids if job_id}
        if not ids:
            return {}
        rows = self.session.execute(select(Job.id, Job.title).where(Job.id.in_(ids))).all()
        return {row.id: row.title for row in rows}

    # applicants

    def get_applicant(self, applicant_id: str) -> Applicant | None:
        return self.session.get(Applicant, applicant_id)

    def find_applicant(self, *, email: str, job_id: str) -> Applicant | None:
        return self.session.scalar(
            select(Applicant).where(
                func.lower(Applicant.email) == email.strip().lower(),
                Applicant.job_id == job_id,
            )
        )

    def list_applicants(
        self,
        *,
        page: int = 1,
        page_size: int = 10,
        status: str | None = None,
        job_id: str | None = None,
        source: str | None = None,
        search: str | None = None,
    ) -> tuple[list[Applicant], int]:
        conditions = []
        if status:
            conditions.append(Applicant.status == status)
        if job_id:
            conditions.append(Applicant.job_id == job_id)
        if source:
            conditions.append(Applicant.source == source)
        if search:
            conditions.append(
                or_(
                    Applicant.name.icontains(search, autoescape=True),
                    Applicant.email.icontains(search, autoescape=True),
                )
            )

        total = self.session.scalar(select(func.count()).select_from(Applicant).where(*conditions)) or 0
        statement = (
            select(Applicant)
            .where(*conditions)
            .order_by(Applicant.created_at.desc(), Applicant.id.desc())
            .limit(page_size)
            .offset(page_size * (page - 1))
        )
        return list(self.session.scalars(statement).all()), total

    def list_applicants_for_job(self, job_id: str) -> list[Applicant]:
        statement = (
            select(Applicant)
            .where(Applicant.job_id == job_id)
            .order_by(Applicant.created_at.desc(), Applicant.id.desc())
        )
        return list(self.session.scalars(statement).all())

    def applicant_names(self, applicant_ids: Iterable[str]) -> dict[str, str]:
        ids = {applicant_id for applicant_id in applicant_ids if applicant_id}
        if not ids:
            return {}
        rows = self.session.execute(
            select(Applicant.id, Applicant.name).where(Applicant.id.in_(ids))
        ).all()
        return {row.id: row.name for row in rows}

    # interviews

    def get_interview(self, interview_id: str) -> Interview | None:
        return self.session.get(Interview, interview_id)

    def list_interviews(self, *, applicant_id: str | None = None) -> list[Interview]:
        statement = select(Interview).order_by(Interview.date.asc(), Interview.id.asc())
        if applicant_id:
            statement = statement.where(Interview.applicant_id == applicant_id)
        return list(self.session.scalars(statement).all())
