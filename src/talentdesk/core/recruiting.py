from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from talentdesk.api.schemas import (
    ApplicantCreate,
    ApplicantDetailResponse,
    ApplicantPageResponse,
    ApplicantResponse,
    ApplicantSummary,
    InterviewResponse,
    JobCreateRequest,
    JobDetailResponse,
    JobResponse,
)
from talentdesk.config import Settings, get_settings
from talentdesk.core.dates import parse_timestamp
from talentdesk.core.errors import ResourceNotFound, ValidationFailed
from talentdesk.core.ids import is_object_id
from talentdesk.core.uploads import ResumeStorage
from talentdesk.db.models import Applicant, Job
from talentdesk.db.repositories import Repository, page_count

logger = logging.getLogger(__name__)


def _require_object_id(value: str, label: str) -> str:
    if not is_object_id(value):
        raise ValidationFailed(f"Invalid {label} format")
    return value.lower()


def _job_columns(values: dict[str, Any]) -> dict[str, Any]:
    """Map request field names onto Job columns."""
    columns: dict[str, Any] = {}
    for key, value in values.items():
        if key == "salary":
            salary = value if isinstance(value, dict) else value.model_dump()
            columns["salary_min"] = salary["min"]
            columns["salary_max"] = salary["max"]
            columns["salary_currency"] = salary.get("currency") or "USD"
        elif key == "skills":
            columns["skills_json"] = [skill.strip() for skill in value if skill.strip()]
        elif key == "closing_date":
            columns["closing_date"] = parse_timestamp(value)
        else:
            columns[key] = value
    return columns


class JobService:
    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def _get(self, job_id: str) -> Job:
        job = self.repo.get_job(job_id) if is_object_id(job_id) else None
        if job is None:
            raise ResourceNotFound("Job not found")
        return job

    def list_jobs(self, status: str | None = None) -> list[JobResponse]:
        return [JobResponse.from_model(job) for job in self.repo.list_jobs(status)]

    def get_job(self, job_id: str) -> JobDetailResponse:
        job = self._get(job_id)
        applicants = [
            ApplicantSummary(
                id=row.id,
                name=row.name,
                email=row.email,
                status=row.status,
                source=row.source,
                applied_date=ApplicantResponse.from_model(row).applied_date,
            )
            for row in self.repo.list_applicants_for_job(job.id)
        ]
        return JobDetailResponse(**JobResponse.from_model(job).model_dump(), applicants=applicants)

    def create_job(self, payload: JobCreateRequest, *, created_by: str | None) -> JobResponse:
        columns = _job_columns(payload.model_dump())
        job = self.repo.add(Job(**columns, created_by=created_by))
        logger.info("Created job id=%s title=%r", job.id, job.title)
        return JobResponse.from_model(job)

    def update_job(self, job_id: str, changes: dict[str, Any]) -> JobResponse:
        job = self._get(job_id)
        if changes:
            job = self.repo.apply_changes(job, _job_columns(changes))
        return JobResponse.from_model(job)

    def delete_job(self, job_id: str) -> None:
        job = self._get(job_id)
        self.repo.delete(job)
        logger.info("Deleted job id=%s", job_id)


class ApplicantService:
    def __init__(
        self,
        session: Session,
        *,
        settings: Settings | None = None,
        resumes: ResumeStorage | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)
        self.resumes = resumes or ResumeStorage(self.settings)

    def _get(self, applicant_id: str) -> Applicant:
        applicant = self.repo.get_applicant(applicant_id) if is_object_id(applicant_id) else None
        if applicant is None:
            raise ResourceNotFound("Applicant not found")
        return applicant

    def _response(self, applicant: Applicant) -> ApplicantResponse:
        titles = self.repo.job_titles([applicant.job_id])
        return ApplicantResponse.from_model(applicant, titles.get(applicant.job_id, ""))

    def list_applicants(
        self,
        *,
        page: int = 1,
        status: str | None = None,
        job_id: str | None = None,
        source: str | None = None,
        search: str | None = None,
    ) -> ApplicantPageResponse:
        page = max(page, 1)
        page_size = self.settings.page_size
        rows, total = self.repo.list_applicants(
            page=page,
            page_size=page_size,
            status=status or None,
            job_id=job_id or None,
            source=source or None,
            search=(search or "").strip() or None,
        )
        titles = self.repo.job_titles(row.job_id for row in rows)
        return ApplicantPageResponse(
            applicants=[ApplicantResponse.from_model(row, titles.get(row.job_id, "")) for row in rows],
            page=page,
            pages=page_count(total, page_size),
            total=total,
        )

    def get_applicant(self, applicant_id: str) -> ApplicantDetailResponse:
        applicant = self._get(applicant_id)
        interviews = self.repo.list_interviews(applicant_id=applicant.id)
        titles = self.repo.job_titles([applicant.job_id, *(row.job_id for row in interviews)])
        return ApplicantDetailResponse(
            **ApplicantResponse.from_model(applicant, titles.get(applicant.job_id, "")).model_dump(),
            interviews=[
                InterviewResponse.from_model(
                    row, applicant_name=applicant.name, job_title=titles.get(row.job_id, "")
                )
                for row in interviews
            ],
        )

    def list_for_job(self, job_id: str) -> list[ApplicantResponse]:
        job_id = _require_object_id(job_id, "job ID")
        job = self.repo.get_job(job_id)
        title = job.title if job else ""
        return [ApplicantResponse.from_model(row, title) for row in self.repo.list_applicants_for_job(job_id)]

    def create_applicant(
        self,
        payload: ApplicantCreate,
        *,
        resume_filename: str | None,
        resume_content: bytes | None,
    ) -> ApplicantResponse:
        job_id = _require_object_id(payload.job_id.strip(), "job ID")
        if self.repo.get_job(job_id) is None:
            raise ResourceNotFound("Job not found")
        if self.repo.find_applicant(email=payload.email, job_id=job_id):
            raise ValidationFailed("You have already applied for this job")
        if not resume_filename:
            raise ValidationFailed("Resume is required")

        resume_url = self.resumes.save(resume_filename, resume_content or b"")
        applicant = self.repo.add(
            Applicant(
                name=payload.name,
                email=payload.email.lower(),
                phone=payload.phone.strip(),
                job_id=job_id,
                source=payload.source,
                notes=payload.notes,
                resume_url=resume_url,
            )
        )
        logger.info("Applicant id=%s applied for job id=%s", applicant.id, job_id)
        return self._response(applicant)

    def update_status(self, applicant_id: str, status: str, notes: str | None = None) -> ApplicantResponse:
        applicant = self._get(applicant_id)
        values: dict[str, Any] = {"status": status}
        if notes is not None:
            values["notes"] = notes
        return self._response(self.repo.apply_changes(applicant, values))

    def add_note(self, applicant_id: str, note: str) -> ApplicantResponse:
        applicant = self._get(applicant_id)
        notes = f"{applicant.notes}\n{note}" if applicant.notes else note
        return self._response(self.repo.apply_changes(applicant, {"notes": notes}))

    def delete_applicant(self, applicant_id: str) -> None:
        applicant = self._get(applicant_id)
        resume_url = applicant.resume_url
        self.repo.delete(applicant)
        if resume_url:
            self.resumes.delete(resume_url)
        logger.info("Deleted applicant id=%s", applicant_id)
