from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator

from talentdesk.core.dates import format_timestamp, parse_timestamp
from talentdesk.core.errors import ValidationFailed
from talentdesk.db.models import Applicant, Interview, Job, User
from talentdesk.types import (
    ApplicantSource,
    ApplicantStatus,
    Feedback,
    InterviewType,
    JobStatus,
    Salary,
    canonical_job_type,
    validate_email,
)


def _ts(value: Any) -> str | None:
    return format_timestamp(value) if value is not None else None


def _required_timestamp(value: str, label: str) -> str:
    parsed = parse_timestamp(value)
    if parsed is None:
        raise ValueError(f"Invalid {label} format. Please use a valid date format (YYYY-MM-DD)")
    return format_timestamp(parsed)


class PatchModel(BaseModel):
    """Request body where only the keys the caller sent are written."""

    non_nullable: ClassVar[frozenset[str]] = frozenset()

    def changes(self) -> dict[str, Any]:
        values = self.model_dump(exclude_unset=True)
        for key, value in values.items():
            if value is None and key in self.non_nullable:
                raise ValidationFailed(f"{key} cannot be null")
        return values


class MessageResponse(BaseModel):
    message: str


# users


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str
    password: str = Field(min_length=6)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return validate_email(value)


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class GoogleLoginRequest(BaseModel):
    token: str = ""


class ProfileUpdateRequest(PatchModel):
    non_nullable = frozenset({"name", "email", "password", "profile"})

    name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    password: str | None = Field(default=None, min_length=6)
    profile: dict[str, Any] | None = None

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str | None) -> str | None:
        return validate_email(value) if value is not None else None


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: str
    is_google_user: bool = False
    picture: str = ""
    profile: dict[str, Any] = Field(default_factory=dict)
    created_at: str | None = None

    @classmethod
    def from_model(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            is_google_user=user.is_google_user,
            picture=user.picture,
            profile=user.profile_json or {},
            created_at=_ts(user.created_at),
        )


class AuthResponse(UserResponse):
    token: str


# jobs


class JobCreateRequest(BaseModel):
    title: str = Field(min_length=1)
    department: str = Field(min_length=1)
    location: str = Field(min_length=1)
    type: str = "Full-time"
    description: str = Field(min_length=1)
    requirements: str = Field(min_length=1)
    salary: Salary
    skills: list[str] = Field(min_length=1)
    status: JobStatus = "open"
    closing_date: str

    @field_validator("type")
    @classmethod
    def check_type(cls, value: str) -> str:
        return canonical_job_type(value)

    @field_validator("title", "department", "location")
    @classmethod
    def strip_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("closing_date")
    @classmethod
    def check_closing_date(cls, value: str) -> str:
        return _required_timestamp(value, "closing date")


class JobUpdateRequest(PatchModel):
    non_nullable = frozenset(
        {"title", "department", "location", "type", "description", "requirements", "salary",
         "skills", "status", "closing_date"}
    )

    title: str | None = None
    department: str | None = None
    location: str | None = None
    type: str | None = None
    description: str | None = None
    requirements: str | None = None
    salary: Salary | None = None
    skills: list[str] | None = None
    status: JobStatus | None = None
    closing_date: str | None = None

    @field_validator("type")
    @classmethod
    def check_type(cls, value: str | None) -> str | None:
        return canonical_job_type(value) if value is not None else None

    @field_validator("closing_date")
    @classmethod
    def check_closing_date(cls, value: str | None) -> str | None:
        return _required_timestamp(value, "closing date") if value is not None else None


class JobResponse(BaseModel):
    id: str
    title: str
    department: str
    location: str
    type: str
    description: str
    requirements: str
    salary: Salary
    skills: list[str]
    status: str
    posted_date: str | None
    closing_date: str | None
    created_by: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_model(cls, job: Job) -> "JobResponse":
        return cls(
            id=job.id,
            title=job.title,
            department=job.department,
            location=job.location,
            type=job.type,
            description=job.description,
            requirements=job.requirements,
            salary=Salary(min=job.salary_min, max=job.salary_max, currency=job.salary_currency),
            skills=list(job.skills_json or []),
            status=job.status,
            posted_date=_ts(job.posted_date),
            closing_date=_ts(job.closing_date),
            created_by=job.created_by,
            created_at=_ts(job.created_at),
            updated_at=_ts(job.updated_at),
        )


class ApplicantSummary(BaseModel):
    id: str
    name: str
    email: str
    status: str
    source: str
    applied_date: str | None


class JobDetailResponse(JobResponse):
    applicants: list[ApplicantSummary] = Field(default_factory=list)


# applicants


class ApplicantCreate(BaseModel):
    name: str = Field(min_length=1)
    email: str
    phone: str = Field(min_length=1)
    job_id: str = Field(min_length=1)
    source: ApplicantSource
    notes: str = ""

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return validate_email(value)

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please add a name")
        return value


class ApplicantStatusRequest(BaseModel):
    status: ApplicantStatus
    notes: str | None = None


class ApplicantNoteRequest(BaseModel):
    note: str = Field(min_length=1)


class ApplicantResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    job_id: str
    job_title: str = ""
    status: str
    source: str
    resume_url: str
    applied_date: str | None
    notes: str
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_model(cls, applicant: Applicant, job_title: str = "") -> "ApplicantResponse":
        return cls(
            id=applicant.id,
            name=applicant.name,
            email=applicant.email,
            phone=applicant.phone,
            job_id=applicant.job_id,
            job_title=job_title,
            status=applicant.status,
            source=applicant.source,
            resume_url=applicant.resume_url,
            applied_date=_ts(applicant.applied_date),
            notes=applicant.notes,
            created_at=_ts(applicant.created_at),
            updated_at=_ts(applicant.updated_at),
        )


class ApplicantPageResponse(BaseModel):
    applicants: list[ApplicantResponse]
    page: int
    pages: int
    total: int


# interviews


class InterviewCreateRequest(BaseModel):
    """Loosely typed on purpose: the service reports missing fields one by one."""

    applicant_id: str | None = None
    job_id: str | None = None
    interviewers: list[str] = Field(default_factory=list)
    date: str | None = None
    time: str | None = None
    duration: int | None = None
    type: str | None = None
    location: str | None = None
    notes: str | None = None


class InterviewUpdateRequest(PatchModel):
    non_nullable = frozenset({"date", "time", "duration", "type", "location", "notes", "interviewers"})

    date: str | None = None
    time: str | None = None
    duration: int | None = Field(default=None, gt=0)
    type: InterviewType | None = None
    location: str | None = None
    notes: str | None = None
    interviewers: list[str] | None = None

    @field_validator("date")
    @classmethod
    def check_date(cls, value: str | None) -> str | None:
        return _required_timestamp(value, "date") if value is not None else None


class InterviewStatusRequest(BaseModel):
    status: str | None = None


class FeedbackRequest(Feedback):
    pass


class InterviewResponse(BaseModel):
    id: str
    applicant_id: str
    applicant_name: str = ""
    job_id: str
    job_title: str = ""
    interviewers: list[str] = Field(default_factory=list)
    date: str | None
    time: str
    duration: int
    type: str
    location: str
    status: str
    feedback: Feedback | None = None
    notes: str
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_model(
        cls, interview: Interview, *, applicant_name: str = "", job_title: str = ""
    ) -> "InterviewResponse":
        return cls(
            id=interview.id,
            applicant_id=interview.applicant_id,
            applicant_name=applicant_name,
            job_id=interview.job_id,
            job_title=job_title,
            interviewers=list(interview.interviewers_json or []),
            date=_ts(interview.date),
            time=interview.time,
            duration=interview.duration,
            type=interview.type,
            location=interview.location,
            status=interview.status,
            feedback=Feedback.model_validate(interview.feedback_json) if interview.feedback_json else None,
            notes=interview.notes,
            created_at=_ts(interview.created_at),
            updated_at=_ts(interview.updated_at),
        )


class ApplicantDetailResponse(ApplicantResponse):
    interviews: list[InterviewResponse] = Field(default_factory=list)
