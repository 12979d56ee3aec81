import pytest
from conftest import apply, create_job
from fastapi.testclient import TestClient


@pytest.fixture
def candidate(client: TestClient, admin_headers) -> dict:
    job = create_job(client, admin_headers)
    return apply(client, job["id"]).json()


def _payload(candidate: dict, **overrides) -> dict:
    return {
        "applicant_id": candidate["id"],
        "job_id": candidate["job_id"],
        "interviewers": ["Margaret", ""],
        "date": "2031-03-04",
        "time": "10:30",
        "duration": 45,
        "type": "technical",
        "location": "Room 2",
        "notes": "whiteboard",
        **overrides,
    }


def _schedule(client: TestClient, headers: dict, candidate: dict, **overrides) -> dict:
    response = client.post("/api/interviews", json=_payload(candidate, **overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _applicant_status(client: TestClient, headers: dict, applicant_id: str) -> str:
    return client.get(f"/api/applicants/{applicant_id}", headers=headers).json()["status"]


def test_scheduling_moves_pending_applicant_to_interview(client: TestClient, recruiter_headers, candidate) -> None:
    interview = _schedule(client, recruiter_headers, candidate)
    assert interview["status"] == "scheduled"
    assert interview["date"] == "2031-03-04T00:00:00.000Z"
    assert interview["interviewers"] == ["Margaret"]
    assert interview["applicant_name"] == candidate["name"]
    assert interview["job_title"] == candidate["job_title"]
    assert _applicant_status(client, recruiter_headers, candidate["id"]) == "interview"


def test_scheduling_leaves_hired_applicant_alone(client: TestClient, recruiter_headers, candidate) -> None:
    client.put(f"/api/applicants/{candidate['id']}/status", json={"status": "hired"}, headers=recruiter_headers)
    _schedule(client, recruiter_headers, candidate)
    assert _applicant_status(client, recruiter_headers, candidate["id"]) == "hired"


@pytest.mark.parametrize(
    ("missing", "message"),
    [
        ("applicant_id", "Applicant ID is required"),
        ("job_id", "Job ID is required"),
        ("date", "Interview date is required"),
        ("time", "Interview time is required"),
        ("duration", "Interview duration is required"),
        ("type", "Interview type is required"),
    ],
)
def test_required_fields_are_reported_one_at_a_time(
    client: TestClient, recruiter_headers, candidate, missing: str, message: str
) -> None:
    payload = _payload(candidate)
    payload.pop(missing)
    response = client.post("/api/interviews", json=payload, headers=recruiter_headers)
    assert response.status_code == 400
    assert response.json()["message"] == message


def test_reference_checks_leave_applicant_untouched(client: TestClient, recruiter_headers, candidate) -> None:
    bad_format = client.post(
        "/api/interviews", json=_payload(candidate, applicant_id="123"), headers=recruiter_headers
    )
    assert bad_format.status_code == 400
    assert bad_format.json()["message"] == "Invalid applicant ID format"

    no_applicant = client.post(
        "/api/interviews", json=_payload(candidate, applicant_id="65f1c0ffee0000000000dead"), headers=recruiter_headers
    )
    assert no_applicant.status_code == 404
    assert no_applicant.json()["message"] == "Applicant not found"

    no_job = client.post(
        "/api/interviews", json=_payload(candidate, job_id="65f1c0ffee0000000000dead"), headers=recruiter_headers
    )
    assert no_job.status_code == 404
    assert no_job.json()["message"] == "Job not found"

    bad_date = client.post("/api/interviews", json=_payload(candidate, date="2031-02-30"), headers=recruiter_headers)
    assert bad_date.status_code == 400
    assert bad_date.json()["message"].startswith("Invalid date format")

    bad_type = client.post("/api/interviews", json=_payload(candidate, type="lunch"), headers=recruiter_headers)
    assert bad_type.status_code == 400

    assert client.get("/api/interviews", headers=recruiter_headers).json() == []
    assert _applicant_status(client, recruiter_headers, candidate["id"]) == "pending"


def test_hire_recommendation_moves_applicant_but_not_interview(
    client: TestClient, recruiter_headers, candidate
) -> None:
    interview = _schedule(client, recruiter_headers, candidate)

    response = client.put(
        f"/api/interviews/{interview['id']}/feedback",
        json={"rating": 5, "strengths": "Clear thinking", "recommendation": "hire"},
        headers=recruiter_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["feedback"]["rating"] == 5
    assert body["feedback"]["recommendation"] == "hire"
    assert body["status"] == "scheduled"
    assert _applicant_status(client, recruiter_headers, candidate["id"]) == "hired"


def test_feedback_merges_with_previous_feedback(client: TestClient, recruiter_headers, candidate) -> None:
    interview = _schedule(client, recruiter_headers, candidate)
    url = f"/api/interviews/{interview['id']}/feedback"
    client.put(url, json={"rating": 3}, headers=recruiter_headers)
    body = client.put(url, json={"notes": "second look", "recommendation": "reject"}, headers=recruiter_headers).json()
    assert body["feedback"]["rating"] == 3
    assert body["feedback"]["notes"] == "second look"
    assert _applicant_status(client, recruiter_headers, candidate["id"]) == "rejected"

    invalid = client.put(url, json={"rating": 11}, headers=recruiter_headers)
    assert invalid.status_code == 400


def test_notes_only_feedback_keeps_later_applicant_status(client: TestClient, recruiter_headers, candidate) -> None:
    interview = _schedule(client, recruiter_headers, candidate)
    url = f"/api/interviews/{interview['id']}/feedback"
    client.put(url, json={"recommendation": "hire"}, headers=recruiter_headers)
    assert _applicant_status(client, recruiter_headers, candidate["id"]) == "hired"

    client.put(f"/api/applicants/{candidate['id']}/status", json={"status": "shortlisted"}, headers=recruiter_headers)
    body = client.put(url, json={"notes": "typo fix"}, headers=recruiter_headers).json()

    assert body["feedback"]["recommendation"] == "hire"
    assert body["feedback"]["notes"] == "typo fix"
    assert _applicant_status(client, recruiter_headers, candidate["id"]) == "shortlisted"


def test_status_update_requires_known_status(client: TestClient, recruiter_headers, candidate) -> None:
    interview = _schedule(client, recruiter_headers, candidate)
    url = f"/api/interviews/{interview['id']}/status"

    missing = client.put(url, json={}, headers=recruiter_headers)
    assert missing.status_code == 400
    assert missing.json()["message"] == "Status is required"

    assert client.put(url, json={"status": "postponed"}, headers=recruiter_headers).status_code == 400

    done = client.put(url, json={"status": "completed"}, headers=recruiter_headers).json()
    assert done["status"] == "completed"
    assert {key: value for key, value in done.items() if key not in ("status", "updated_at")} == {
        key: value for key, value in interview.items() if key not in ("status", "updated_at")
    }


def test_patch_writes_only_sent_fields(client: TestClient, recruiter_headers, candidate) -> None:
    interview = _schedule(client, recruiter_headers, candidate)
    url = f"/api/interviews/{interview['id']}"

    patched = client.patch(url, json={"location": "", "date": "2031-03-05T14:00:00Z"}, headers=recruiter_headers)
    assert patched.status_code == 200
    body = patched.json()
    assert body["location"] == ""
    assert body["date"] == "2031-03-05T14:00:00.000Z"
    assert body["notes"] == "whiteboard"
    assert body["duration"] == 45

    assert client.patch(url, json={"duration": None}, headers=recruiter_headers).status_code == 400
    assert client.patch(url, json={"duration": 0}, headers=recruiter_headers).status_code == 400


def test_lookups_and_admin_delete(client: TestClient, admin_headers, recruiter_headers, candidate) -> None:
    interview = _schedule(client, recruiter_headers, candidate)

    by_applicant = client.get(f"/api/interviews/applicant/{candidate['id']}", headers=recruiter_headers).json()
    assert [row["id"] for row in by_applicant] == [interview["id"]]
    detail = client.get(f"/api/applicants/{candidate['id']}", headers=recruiter_headers).json()
    assert [row["id"] for row in detail["interviews"]] == [interview["id"]]

    assert client.get("/api/interviews/nope", headers=recruiter_headers).status_code == 404
    assert client.delete(f"/api/interviews/{interview['id']}", headers=recruiter_headers).status_code == 403
    removed = client.delete(f"/api/interviews/{interview['id']}", headers=admin_headers)
    assert removed.json() == {"message": "Interview removed"}
    assert client.get(f"/api/interviews/{interview['id']}", headers=recruiter_headers).status_code == 404
