import pytest
from pydantic import ValidationError

from talentdesk.api.schemas import (
    ApplicantCreate,
    InterviewUpdateRequest,
    JobCreateRequest,
    JobUpdateRequest,
    RegisterRequest,
)
from talentdesk.core.errors import ValidationFailed
from talentdesk.types import Feedback


def _job(**overrides) -> dict:
    payload = {
        "title": "Data Engineer",
        "department": "Data",
        "location": "Remote",
        "type": "full-time",
        "description": "Pipelines",
        "requirements": "SQL",
        "salary": {"min": 1, "max": 2, "currency": "usd"},
        "skills": ["SQL"],
        "closing_date": "2030-01-31",
    }
    payload.update(overrides)
    return payload


def test_job_type_is_canonicalised_case_insensitively() -> None:
    job = JobCreateRequest(**_job())
    assert job.type == "Full-time"
    assert job.salary.currency == "USD"
    assert job.closing_date == "2030-01-31T00:00:00.000Z"


def test_job_rejects_unknown_type_and_bad_closing_date() -> None:
    with pytest.raises(ValidationError):
        JobCreateRequest(**_job(type="gig"))
    with pytest.raises(ValidationError):
        JobCreateRequest(**_job(closing_date="someday"))


def test_job_requires_closing_date_and_skills() -> None:
    payload = _job()
    payload.pop("closing_date")
    with pytest.raises(ValidationError):
        JobCreateRequest(**payload)
    with pytest.raises(ValidationError):
        JobCreateRequest(**_job(skills=[]))


def test_email_format_follows_the_account_pattern() -> None:
    assert RegisterRequest(name="A", email="a.b@example.co", password="secret1").email == "a.b@example.co"
    with pytest.raises(ValidationError):
        RegisterRequest(name="A", email="not-an-email", password="secret1")


def test_applicant_source_must_be_known() -> None:
    with pytest.raises(ValidationError):
        ApplicantCreate(name="A", email="a@example.com", phone="1", job_id="x", source="twitter")


def test_patch_only_reports_fields_that_were_sent() -> None:
    patch = JobUpdateRequest(title="Renamed", requirements="")
    assert patch.changes() == {"title": "Renamed", "requirements": ""}


def test_patch_rejects_explicit_null_for_required_field() -> None:
    patch = JobUpdateRequest(title=None)
    with pytest.raises(ValidationFailed, match="title cannot be null"):
        patch.changes()


def test_interview_patch_normalises_date() -> None:
    patch = InterviewUpdateRequest(date="2031-03-04T09:30:00Z", location="Room 1")
    assert patch.changes() == {"date": "2031-03-04T09:30:00.000Z", "location": "Room 1"}


def test_feedback_validates_only_present_fields() -> None:
    feedback = Feedback(recommendation="hire")
    assert feedback.model_dump(exclude_unset=True) == {"recommendation": "hire"}
    with pytest.raises(ValidationError):
        Feedback(rating=6)
    with pytest.raises(ValidationError):
        Feedback(recommendation="maybe")
