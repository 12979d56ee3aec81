from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TMP = Path(tempfile.mkdtemp(prefix="talentdesk-tests-"))
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP / 'test.db'}"
os.environ["DATA_DIR"] = str(_TMP)
os.environ["UPLOAD_DIR"] = str(_TMP / "uploads")
os.environ["CLIENT_STORAGE_DIR"] = str(_TMP / "client")
os.environ["JWT_SECRET"] = "test-secret"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id.apps.googleusercontent.com"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from talentdesk.api.app import create_app  # noqa: E402
from talentdesk.core.security import create_access_token, hash_password  # noqa: E402
from talentdesk.db.base import Base  # noqa: E402
from talentdesk.db.models import User  # noqa: E402
from talentdesk.db.repositories import Repository  # noqa: E402
from talentdesk.db.session import SessionLocal, engine  # noqa: E402

JOB_PAYLOAD = {
    "title": "Backend Engineer",
    "department": "Engineering",
    "location": "Berlin",
    "type": "Full-time",
    "description": "Build and run the hiring platform APIs.",
    "requirements": "3+ years of Python",
    "salary": {"min": 60000, "max": 90000, "currency": "EUR"},
    "skills": ["Python", "SQL"],
    "closing_date": "2030-12-31",
}


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client() -> TestClient:
    with TestClient(create_app()) as test_client:
        yield test_client


def _make_user(*, email: str, role: str, password: str = "secret123") -> User:
    with SessionLocal() as db:
        return Repository(db).add(
            User(name=email.split("@")[0].title(), email=email, password_hash=hash_password(password), role=role)
        )


@pytest.fixture
def admin_user() -> User:
    return _make_user(email="admin@example.com", role="admin")


@pytest.fixture
def recruiter_user() -> User:
    return _make_user(email="recruiter@example.com", role="user")


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(admin_user.id)}"}


@pytest.fixture
def recruiter_headers(recruiter_user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(recruiter_user.id)}"}


def create_job(client: TestClient, headers: dict[str, str], **overrides) -> dict:
    response = client.post("/api/jobs", json={**JOB_PAYLOAD, **overrides}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def apply(client: TestClient, job_id: str, *, email: str = "ada@example.com", source: str = "linkedin", **fields):
    data = {
        "name": fields.pop("name", "Ada Lovelace"),
        "email": email,
        "phone": fields.pop("phone", "5550100"),
        "job_id": job_id,
        "source": source,
        "notes": fields.pop("notes", ""),
    }
    files = fields.pop("files", {"resume": ("cv.pdf", b"%PDF-1.4 resume", "application/pdf")})
    return client.post("/api/applicants", data=data, files=files)
