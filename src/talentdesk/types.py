from __future__ import annotations

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

JobStatus = Literal["open", "closed", "draft"]
ApplicantStatus = Literal["pending", "shortlisted", "interview", "hired", "rejected"]
ApplicantSource = Literal["linkedin", "indeed", "company", "referral", "other"]
InterviewType = Literal["phone", "video", "in-person", "technical", "hr"]
Recommendation = Literal["hire", "reject", "consider"]

JOB_TYPES: tuple[str, ...] = ("Full-time", "Part-time", "Contract", "Internship", "Remote")
APPLICANT_STATUSES: tuple[str, ...] = ("pending", "shortlisted", "interview", "hired", "rejected")
APPLICANT_SOURCES: tuple[str, ...] = ("linkedin", "indeed", "company", "referral", "other")
INTERVIEW_TYPES: tuple[str, ...] = ("phone", "video", "in-person", "technical", "hr")
INTERVIEW_STATUSES: tuple[str, ...] = ("scheduled", "completed", "cancelled")

EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")

# applicant status a feedback recommendation moves the applicant to
RECOMMENDATION_STATUS: dict[str, str] = {"hire": "hired", "reject": "rejected"}


def validate_email(value: str) -> str:
    value = value.strip()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please add a valid email")
    return value


def canonical_job_type(value: str) -> str:
    lowered = value.strip().lower()
    for job_type in JOB_TYPES:
        if job_type.lower() == lowered:
            return job_type
    raise ValueError(f"type must be one of {list(JOB_TYPES)}")


class Salary(BaseModel):
    min: float = Field(ge=0)
    max: float = Field(ge=0)
    currency: str = "USD"

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("currency must not be empty")
        return value


class Feedback(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    strengths: str | None = None
    weaknesses: str | None = None
    notes: str | None = None
    recommendation: Recommendation | None = None


class Address(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""


class ExperienceEntry(BaseModel):
    company: str = ""
    position: str = ""
    start_date: str | None = None
    end_date: str | None = None
    description: str = ""


class EducationEntry(BaseModel):
    institution: str = ""
    degree: str = ""
    field_of_study: str = ""
    start_date: str | None = None
    end_date: str | None = None


class UserProfile(BaseModel):
    first_name: str = ""
    last_name: str = ""
    phone_number: str = ""
    address: Address = Field(default_factory=Address)
    bio: str = ""
    skills: list[str] = Field(default_factory=list)
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
