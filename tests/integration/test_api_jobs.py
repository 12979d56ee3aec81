from conftest import JOB_PAYLOAD, apply, create_job
from fastapi.testclient import TestClient


def test_admin_creates_job_with_canonical_fields(client: TestClient, admin_headers, admin_user) -> None:
    job = create_job(client, admin_headers, type="part-time", skills=[" Python ", "", "SQL"])
    assert len(job["id"]) == 24
    assert job["type"] == "Part-time"
    assert job["status"] == "open"
    assert job["skills"] == ["Python", "SQL"]
    assert job["salary"] == {"min": 60000.0, "max": 90000.0, "currency": "EUR"}
    assert job["closing_date"] == "2030-12-31T00:00:00.000Z"
    assert job["posted_date"].endswith("Z")
    assert job["created_by"] == admin_user.id


def test_job_writes_need_an_admin(client: TestClient, recruiter_headers) -> None:
    assert client.post("/api/jobs", json=JOB_PAYLOAD).status_code == 401
    assert client.post("/api/jobs", json=JOB_PAYLOAD, headers=recruiter_headers).status_code == 403


def test_job_validation_errors_are_400(client: TestClient, admin_headers) -> None:
    missing = {key: value for key, value in JOB_PAYLOAD.items() if key != "title"}
    response = client.post("/api/jobs", json=missing, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"].startswith("title")

    bad_type = client.post("/api/jobs", json={**JOB_PAYLOAD, "type": "Gig"}, headers=admin_headers)
    assert bad_type.status_code == 400


def test_listing_is_public_and_filters_by_status(client: TestClient, admin_headers) -> None:
    create_job(client, admin_headers, title="Open role")
    create_job(client, admin_headers, title="Closed role", status="closed")

    everything = client.get("/api/jobs")
    assert everything.status_code == 200
    assert len(everything.json()) == 2

    open_only = client.get("/api/jobs", params={"status": "open"}).json()
    assert [job["title"] for job in open_only] == ["Open role"]


def test_job_detail_includes_applicants(client: TestClient, admin_headers) -> None:
    job = create_job(client, admin_headers)
    assert apply(client, job["id"]).status_code == 201

    detail = client.get(f"/api/jobs/{job['id']}").json()
    assert detail["title"] == JOB_PAYLOAD["title"]
    assert [row["email"] for row in detail["applicants"]] == ["ada@example.com"]


def test_unknown_or_malformed_job_id_is_404(client: TestClient) -> None:
    assert client.get("/api/jobs/65f1c0ffee0000000000dead").status_code == 404
    response = client.get("/api/jobs/not-an-id")
    assert response.status_code == 404
    assert response.json()["message"] == "Job not found"


def test_update_writes_only_sent_fields(client: TestClient, admin_headers) -> None:
    job = create_job(client, admin_headers)
    response = client.put(
        f"/api/jobs/{job['id']}",
        json={"status": "closed", "requirements": ""},
        headers=admin_headers,
    )
    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "closed"
    assert updated["requirements"] == ""
    assert updated["title"] == job["title"]
    assert updated["salary"] == job["salary"]
    assert updated["skills"] == job["skills"]


def test_update_rejects_null_for_required_field(client: TestClient, admin_headers) -> None:
    job = create_job(client, admin_headers)
    response = client.put(f"/api/jobs/{job['id']}", json={"title": None}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["message"] == "title cannot be null"


def test_delete_leaves_applicants_in_place(client: TestClient, admin_headers) -> None:
    job = create_job(client, admin_headers)
    applicant = apply(client, job["id"]).json()

    response = client.delete(f"/api/jobs/{job['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"message": "Job removed"}
    assert client.get(f"/api/jobs/{job['id']}").status_code == 404

    orphan = client.get(f"/api/applicants/{applicant['id']}", headers=admin_headers)
    assert orphan.status_code == 200
    assert orphan.json()["job_id"] == job["id"]
    assert orphan.json()["job_title"] == ""
