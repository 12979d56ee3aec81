from __future__ import annotations

from collections import Counter
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field

from talentdesk.core.dates import parse_timestamp
from talentdesk.core.ids import normalize_id
from talentdesk.types import APPLICANT_SOURCES, APPLICANT_STATUSES, INTERVIEW_STATUSES

Record = dict[str, Any]

TREND_MONTHS = 6
TITLE_LIMIT = 15


class JobCount(BaseModel):
    job_id: str
    name: str
    applicants: int


class MonthCount(BaseModel):
    name: str
    year: int
    month: int
    applicants: int


class Dashboard(BaseModel):
    total_jobs: int = 0
    total_applicants: int = 0
    total_interviews: int = 0
    active_jobs: int = 0
    shortlisted_applicants: int = 0
    scheduled_interviews: int = 0
    applicants_per_job: float = 0.0
    interviews_per_job: float = 0.0
    applicants_by_source: dict[str, int] = Field(default_factory=dict)
    applicants_by_status: dict[str, int] = Field(default_factory=dict)
    applicants_by_job: list[JobCount] = Field(default_factory=list)
    applicant_trend: list[MonthCount] = Field(default_factory=list)
    interviews_by_status: dict[str, int] = Field(default_factory=dict)


def short_title(title: str) -> str:
    return f"{title[:TITLE_LIMIT]}..." if len(title) > TITLE_LIMIT else title


def _counts(records: list[Record], field: str, keys: tuple[str, ...]) -> dict[str, int]:
    counter = Counter(str(record.get(field) or "") for record in records)
    return {key: counter.get(key, 0) for key in keys}


def _ratio(numerator: int, denominator: int) -> float:
    return round(numerator / denominator, 1) if denominator else 0.0


def _shift_month(year: int, month: int, back: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) - back
    return index // 12, index % 12 + 1


def applicant_trend(applicants: list[Record], now: datetime) -> list[MonthCount]:
    """Applicants per calendar month over the trailing six months, oldest first."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    months: list[MonthCount] = []
    for back in range(TREND_MONTHS - 1, -1, -1):
        year, month = _shift_month(now.year, now.month, back)
        label = datetime(year, month, 1).strftime("%b")
        months.append(MonthCount(name=label, year=year, month=month, applicants=0))

    slots = {(entry.year, entry.month): entry for entry in months}
    for applicant in applicants:
        applied = parse_timestamp(applicant.get("applied_date"))
        if applied is None:
            continue
        applied = applied.astimezone(now.tzinfo)
        entry = slots.get((applied.year, applied.month))
        if entry is not None and applied <= now:
            entry.applicants += 1
    return months


def build_dashboard(
    jobs: list[Record],
    applicants: list[Record],
    interviews: list[Record],
    now: datetime,
) -> Dashboard:
    applicants_per_job_id = Counter(normalize_id(applicant.get("job_id")) for applicant in applicants)
    return Dashboard(
        total_jobs=len(jobs),
        total_applicants=len(applicants),
        total_interviews=len(interviews),
        active_jobs=sum(1 for job in jobs if job.get("status") == "open"),
        shortlisted_applicants=sum(1 for applicant in applicants if applicant.get("status") == "shortlisted"),
        scheduled_interviews=sum(1 for interview in interviews if interview.get("status") == "scheduled"),
        applicants_per_job=_ratio(len(applicants), len(jobs)),
        interviews_per_job=_ratio(len(interviews), len(jobs)),
        applicants_by_source=_counts(applicants, "source", APPLICANT_SOURCES),
        applicants_by_status=_counts(applicants, "status", APPLICANT_STATUSES),
        applicants_by_job=[
            JobCount(
                job_id=normalize_id(job),
                name=short_title(str(job.get("title") or "")),
                applicants=applicants_per_job_id.get(normalize_id(job), 0),
            )
            for job in jobs
        ],
        applicant_trend=applicant_trend(applicants, now),
        interviews_by_status=_counts(interviews, "status", INTERVIEW_STATUSES),
    )
