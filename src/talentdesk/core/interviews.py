from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from talentdesk.api.schemas import InterviewCreateRequest, InterviewResponse
from talentdesk.config import Settings, get_settings
from talentdesk.core.dates import parse_timestamp
from talentdesk.core.errors import ResourceNotFound, ValidationFailed
from talentdesk.core.ids import is_object_id
from talentdesk.db.models import Applicant, Interview
from talentdesk.db.repositories import Repository
from talentdesk.types import INTERVIEW_STATUSES, INTERVIEW_TYPES, RECOMMENDATION_STATUS, Feedback

logger = logging.getLogger(__name__)

# applicant statuses that scheduling an interview leaves untouched
SCHEDULING_KEEPS = frozenset({"interview", "hired"})

REQUIRED_FIELDS = (
    ("applicant_id", "Applicant ID is required"),
    ("job_id", "Job ID is required"),
    ("date", "Interview date is required"),
    ("time", "Interview time is required"),
    ("duration", "Interview duration is required"),
    ("type", "Interview type is required"),
)


class InterviewService:
    def __init__(self, session: Session, *, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)

    def _get(self, interview_id: str) -> Interview:
        interview = self.repo.get_interview(interview_id) if is_object_id(interview_id) else None
        if interview is None:
            raise ResourceNotFound("Interview not found")
        return interview

    def _serialize(self, interviews: list[Interview]) -> list[InterviewResponse]:
        names = self.repo.applicant_names(row.applicant_id for row in interviews)
        titles = self.repo.job_titles(row.job_id for row in interviews)
        return [
            InterviewResponse.from_model(
                row,
                applicant_name=names.get(row.applicant_id, ""),
                job_title=titles.get(row.job_id, ""),
            )
            for row in interviews
        ]

    def _response(self, interview: Interview) -> InterviewResponse:
        return self._serialize([interview])[0]

    def list_interviews(self) -> list[InterviewResponse]:
        return self._serialize(self.repo.list_interviews())

    def get_interview(self, interview_id: str) -> InterviewResponse:
        return self._response(self._get(interview_id))

    def list_for_applicant(self, applicant_id: str) -> list[InterviewResponse]:
        if not is_object_id(applicant_id):
            raise ValidationFailed("Invalid applicant ID format")
        return self._serialize(self.repo.list_interviews(applicant_id=applicant_id.lower()))

    def schedule(self, payload: InterviewCreateRequest) -> InterviewResponse:
        data = payload.model_dump()
        for field, message in REQUIRED_FIELDS:
            value = data.get(field)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise ValidationFailed(message)

        applicant_id = str(data["applicant_id"]).strip()
        job_id = str(data["job_id"]).strip()
        if not is_object_id(applicant_id):
            raise ValidationFailed("Invalid applicant ID format")
        if not is_object_id(job_id):
            raise ValidationFailed("Invalid job ID format")

        applicant = self.repo.get_applicant(applicant_id.lower())
        if applicant is None:
            raise ResourceNotFound("Applicant not found")
        job = self.repo.get_job(job_id.lower())
        if job is None:
            raise ResourceNotFound("Job not found")

        scheduled_at = parse_timestamp(data["date"])
        if scheduled_at is None:
            raise ValidationFailed("Invalid date format. Please use a valid date format (YYYY-MM-DD)")
        if data["type"] not in INTERVIEW_TYPES:
            raise ValidationFailed(f"Interview type must be one of {list(INTERVIEW_TYPES)}")
        if data["duration"] <= 0:
            raise ValidationFailed("Interview duration must be a positive number of minutes")

        interview = self.repo.add(
            Interview(
                applicant_id=applicant.id,
                job_id=job.id,
                interviewers_json=[item for item in data["interviewers"] if item],
                date=scheduled_at,
                time=data["time"].strip(),
                duration=data["duration"],
                type=data["type"],
                location=data["location"] or "",
                notes=data["notes"] or "",
            )
        )
        self._advance_applicant_on_schedule(applicant)
        logger.info("Scheduled interview id=%s applicant_id=%s", interview.id, applicant.id)
        return InterviewResponse.from_model(interview, applicant_name=applicant.name, job_title=job.title)

    def _advance_applicant_on_schedule(self, applicant: Applicant) -> None:
        if applicant.status in SCHEDULING_KEEPS:
            return
        self.repo.apply_changes(applicant, {"status": "interview"})
        logger.info("Applicant id=%s moved to interview", applicant.id)

    def update(self, interview_id: str, changes: dict[str, Any]) -> InterviewResponse:
        interview = self._get(interview_id)
        values: dict[str, Any] = {}
        for key, value in changes.items():
            if key == "date":
                values["date"] = parse_timestamp(value)
            elif key == "interviewers":
                values["interviewers_json"] = [item for item in value if item]
            else:
                values[key] = value
        if values:
            interview = self.repo.apply_changes(interview, values)
        return self._response(interview)

    def update_status(self, interview_id: str, status: str | None) -> InterviewResponse:
        if not status:
            raise ValidationFailed("Status is required")
        if status not in INTERVIEW_STATUSES:
            raise ValidationFailed(f"Status must be one of {list(INTERVIEW_STATUSES)}")
        interview = self._get(interview_id)
        return self._response(self.repo.apply_changes(interview, {"status": status}))

    def submit_feedback(self, interview_id: str, feedback: Feedback) -> InterviewResponse:
        interview = self._get(interview_id)
        submitted = feedback.model_dump(exclude_unset=True)
        merged = {**(interview.feedback_json or {}), **submitted}
        interview = self.repo.apply_changes(interview, {"feedback_json": merged})

        target = RECOMMENDATION_STATUS.get(submitted.get("recommendation") or "")
        if target:
            applicant = self.repo.get_applicant(interview.applicant_id)
            if applicant is not None and applicant.status != target:
                self.repo.apply_changes(applicant, {"status": target})
                logger.info("Applicant id=%s moved to %s from feedback", applicant.id, target)
        return self._response(interview)

    def delete(self, interview_id: str) -> None:
        interview = self._get(interview_id)
        self.repo.delete(interview)
        logger.info("Deleted interview id=%s", interview_id)
