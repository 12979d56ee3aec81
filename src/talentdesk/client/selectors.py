from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime, timedelta
from typing import Any

from talentdesk.core.dates import parse_timestamp
from talentdesk.core.ids import ids_equal, normalize_id

Record = dict[str, Any]

DATE_BUCKETS = ("today", "tomorrow", "thisWeek", "nextWeek", "thisMonth", "nextMonth")
ALL = "all"


def _active(value: str | None) -> bool:
    return bool(value) and value != ALL


def _local(value: Any, now: datetime) -> datetime | None:
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.astimezone(now.tzinfo)


def _aware(now: datetime) -> datetime:
    return now if now.tzinfo is not None else now.replace(tzinfo=UTC)


def _week_start(day: date) -> date:
    # weeks run Sunday to Saturday
    return day - timedelta(days=(day.weekday() + 1) % 7)


def in_date_bucket(value: Any, bucket: str, now: datetime) -> bool:
    """Whether ``value`` falls in ``bucket`` as seen from ``now``.

    ``bucket`` is one of ``DATE_BUCKETS`` or a ``YYYY-MM-DD`` day. Month buckets
    compare the calendar month only, so any year matches.
    """
    now = _aware(now)
    moment = _local(value, now)
    if moment is None:
        return False
    day = moment.date()
    today = now.date()

    if bucket == "today":
        return day == today
    if bucket == "tomorrow":
        return day == today + timedelta(days=1)
    if bucket == "thisWeek":
        start = _week_start(today)
        return start <= day <= start + timedelta(days=6)
    if bucket == "nextWeek":
        start = _week_start(today) + timedelta(days=7)
        return start <= day <= start + timedelta(days=6)
    if bucket == "thisMonth":
        return day.month == today.month
    if bucket == "nextMonth":
        return day.month == today.month % 12 + 1

    try:
        target = date.fromisoformat(bucket)
    except ValueError as exc:
        raise ValueError(f"unknown date filter '{bucket}'") from exc
    return day == target


def _matches_text(needle: str, *values: Any) -> bool:
    return any(needle in str(value).lower() for value in values if value)


def filter_interviews(
    records: Iterable[Record],
    *,
    now: datetime,
    status: str | None = None,
    type: str | None = None,
    date: str | None = None,
    search: str | None = None,
) -> list[Record]:
    needle = (search or "").strip().lower()
    result = []
    for record in records:
        if _active(status) and record.get("status") != status:
            continue
        if _active(type) and record.get("type") != type:
            continue
        if _active(date) and not in_date_bucket(record.get("date"), date, now):
            continue
        if needle and not _matches_text(
            needle,
            record.get("applicant_name"),
            record.get("job_title"),
            record.get("type"),
            record.get("location"),
        ):
            continue
        result.append(record)
    return result


def sort_by_date(records: Iterable[Record], field: str = "date", *, descending: bool = False) -> list[Record]:
    """Order by a timestamp field; records without a usable date always go last."""
    dated: list[tuple[datetime, Record]] = []
    undated: list[Record] = []
    for record in records:
        moment = parse_timestamp(record.get(field))
        if moment is None:
            undated.append(record)
        else:
            dated.append((moment, record))
    dated.sort(key=lambda pair: pair[0], reverse=descending)
    return [record for _, record in dated] + undated


def upcoming_interviews(records: Iterable[Record], now: datetime, limit: int | None = None) -> list[Record]:
    now = _aware(now)
    today = now.date()
    upcoming = []
    for record in records:
        if record.get("status") != "scheduled":
            continue
        moment = _local(record.get("date"), now)
        if moment is not None and moment.date() >= today:
            upcoming.append(record)
    ordered = sort_by_date(upcoming)
    return ordered[:limit] if limit is not None else ordered


def filter_applicants(
    applicants: Iterable[Record],
    *,
    status: str | None = None,
    job_id: str | None = None,
    source: str | None = None,
    search: str | None = None,
    jobs: Iterable[Record] = (),
) -> list[Record]:
    titles = {normalize_id(job): str(job.get("title") or "") for job in jobs}
    needle = (search or "").strip().lower()
    result = []
    for applicant in applicants:
        if _active(status) and applicant.get("status") != status:
            continue
        if _active(job_id) and not ids_equal(applicant.get("job_id"), job_id):
            continue
        if _active(source) and applicant.get("source") != source:
            continue
        job_title = applicant.get("job_title") or titles.get(normalize_id(applicant.get("job_id")), "")
        if needle and not _matches_text(needle, applicant.get("name"), applicant.get("email"), job_title):
            continue
        result.append(applicant)
    return result


def filter_jobs(
    jobs: Iterable[Record],
    *,
    status: str | None = None,
    type: str | None = None,
    search: str | None = None,
) -> list[Record]:
    needle = (search or "").strip().lower()
    result = []
    for job in jobs:
        if _active(status) and job.get("status") != status:
            continue
        if _active(type) and str(job.get("type") or "").lower() != type.lower():
            continue
        if needle and not _matches_text(needle, job.get("title"), job.get("department"), job.get("location")):
            continue
        result.append(job)
    return result
