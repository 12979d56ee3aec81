from datetime import UTC, datetime

import pytest

from talentdesk.client.selectors import (
    filter_applicants,
    filter_interviews,
    filter_jobs,
    in_date_bucket,
    sort_by_date,
    upcoming_interviews,
)

# Wednesday
NOW = datetime(2024, 5, 15, 12, 0, tzinfo=UTC)


def _interview(id: str, date: str, **fields) -> dict:
    return {
        "id": id,
        "date": date,
        "status": "scheduled",
        "type": "video",
        "applicant_name": "Grace Hopper",
        "job_title": "Compiler Engineer",
        "location": "Zoom",
        **fields,
    }


def test_today_and_tomorrow_buckets() -> None:
    assert in_date_bucket("2024-05-15T08:00:00Z", "today", NOW)
    assert not in_date_bucket("2024-05-16T08:00:00Z", "today", NOW)
    assert in_date_bucket("2024-05-16T08:00:00Z", "tomorrow", NOW)


def test_weeks_start_on_sunday() -> None:
    assert in_date_bucket("2024-05-12T00:00:00Z", "thisWeek", NOW)
    assert in_date_bucket("2024-05-18T23:00:00Z", "thisWeek", NOW)
    assert not in_date_bucket("2024-05-19T09:00:00Z", "thisWeek", NOW)
    assert in_date_bucket("2024-05-19T09:00:00Z", "nextWeek", NOW)
    assert in_date_bucket("2024-05-25T09:00:00Z", "nextWeek", NOW)
    assert not in_date_bucket("2024-05-26T09:00:00Z", "nextWeek", NOW)


def test_tomorrow_on_saturday_crosses_into_next_week() -> None:
    saturday = datetime(2024, 5, 18, 10, 0, tzinfo=UTC)
    tomorrow = "2024-05-19T10:00:00Z"
    assert in_date_bucket(tomorrow, "tomorrow", saturday)
    assert not in_date_bucket(tomorrow, "today", saturday)
    assert not in_date_bucket(tomorrow, "thisWeek", saturday)
    assert in_date_bucket(tomorrow, "nextWeek", saturday)


def test_month_buckets_ignore_year() -> None:
    assert in_date_bucket("2023-05-02T00:00:00Z", "thisMonth", NOW)
    assert in_date_bucket("2025-06-30T00:00:00Z", "nextMonth", NOW)
    december = datetime(2024, 12, 3, tzinfo=UTC)
    assert in_date_bucket("2025-01-10T00:00:00Z", "nextMonth", december)


def test_specific_day_bucket_and_unknown_bucket() -> None:
    assert in_date_bucket("2024-06-01T15:00:00Z", "2024-06-01", NOW)
    assert not in_date_bucket("2024-06-02T15:00:00Z", "2024-06-01", NOW)
    assert not in_date_bucket(None, "today", NOW)
    with pytest.raises(ValueError):
        in_date_bucket("2024-06-01", "someday", NOW)


def test_naive_now_is_treated_as_utc() -> None:
    assert in_date_bucket("2024-05-15T23:30:00Z", "today", datetime(2024, 5, 15, 1, 0))


def test_filter_interviews_combines_status_type_date_and_search() -> None:
    records = [
        _interview("1", "2024-05-15T09:00:00Z"),
        _interview("2", "2024-05-15T10:00:00Z", status="cancelled"),
        _interview("3", "2024-05-16T10:00:00Z", type="phone"),
        _interview("4", "2024-05-15T11:00:00Z", applicant_name="Alan Turing", location="Room 4"),
    ]
    assert [r["id"] for r in filter_interviews(records, now=NOW, status="scheduled", date="today")] == ["1", "4"]
    assert [r["id"] for r in filter_interviews(records, now=NOW, type="phone")] == ["3"]
    assert [r["id"] for r in filter_interviews(records, now=NOW, search="room 4")] == ["4"]
    assert [r["id"] for r in filter_interviews(records, now=NOW, search="PHONE")] == ["3"]
    assert len(filter_interviews(records, now=NOW, status="all", date="all")) == 4


def test_upcoming_interviews_are_scheduled_today_or_later_soonest_first() -> None:
    records = [
        _interview("late", "2024-06-01T09:00:00Z"),
        _interview("past", "2024-05-14T09:00:00Z"),
        _interview("earlier-today", "2024-05-15T08:00:00Z"),
        _interview("done", "2024-05-20T09:00:00Z", status="completed"),
        _interview("soon", "2024-05-16T09:00:00Z"),
    ]
    assert [r["id"] for r in upcoming_interviews(records, NOW)] == ["earlier-today", "soon", "late"]
    assert [r["id"] for r in upcoming_interviews(records, NOW, limit=1)] == ["earlier-today"]


def test_sort_by_date_puts_undated_records_last() -> None:
    records = [{"id": "b", "date": "2024-02-01"}, {"id": "x"}, {"id": "a", "date": "2024-01-01"}]
    assert [r["id"] for r in sort_by_date(records)] == ["a", "b", "x"]
    assert [r["id"] for r in sort_by_date(records, descending=True)] == ["b", "a", "x"]


def test_filter_applicants_searches_name_email_and_job_title() -> None:
    jobs = [{"id": 101, "title": "Data Scientist"}]
    applicants = [
        {"id": "1", "name": "Ada", "email": "ada@example.com", "job_id": "101", "status": "pending", "source": "linkedin"},
        {"id": "2", "name": "Bob", "email": "bob@example.com", "job_id": "202", "status": "hired", "source": "indeed"},
    ]
    assert [a["id"] for a in filter_applicants(applicants, jobs=jobs, search="scientist")] == ["1"]
    assert [a["id"] for a in filter_applicants(applicants, job_id=101)] == ["1"]
    assert [a["id"] for a in filter_applicants(applicants, status="hired")] == ["2"]
    assert [a["id"] for a in filter_applicants(applicants, source="indeed", search="BOB@")] == ["2"]


def test_filter_jobs_by_status_type_and_text() -> None:
    jobs = [
        {"id": "1", "title": "Designer", "department": "Design", "location": "Remote", "status": "open", "type": "Contract"},
        {"id": "2", "title": "Engineer", "department": "Eng", "location": "Paris", "status": "closed", "type": "Full-time"},
    ]
    assert [j["id"] for j in filter_jobs(jobs, status="open")] == ["1"]
    assert [j["id"] for j in filter_jobs(jobs, type="full-time")] == ["2"]
    assert [j["id"] for j in filter_jobs(jobs, search="paris")] == ["2"]
