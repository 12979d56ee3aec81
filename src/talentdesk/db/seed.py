from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from talentdesk.core.security import hash_password
from talentdesk.db.models import Job, User
from talentdesk.db.repositories import Repository

logger = logging.getLogger(__name__)

ADMIN_EMAIL = "admin@example.com"
ADMIN_NAME = "Admin User"
ADMIN_PASSWORD = "admin123"

SAMPLE_JOBS: list[dict[str, object]] = [
    {
        "title": "Senior Software Engineer",
        "department": "Engineering",
        "location": "New York, NY",
        "description": "We are looking for a Senior Software Engineer to join our team.",
        "requirements": "5+ years of experience in full-stack development",
        "salary_min": 120000,
        "salary_max": 180000,
        "skills_json": ["JavaScript", "React", "Node.js", "TypeScript"],
    },
    {
        "title": "Product Manager",
        "department": "Product",
        "location": "San Francisco, CA",
        "description": "Seeking an experienced Product Manager to lead our product initiatives.",
        "requirements": "3+ years of product management experience",
        "salary_min": 100000,
        "salary_max": 160000,
        "skills_json": ["Product Strategy", "Agile", "User Research", "Data Analysis"],
    },
    {
        "title": "UX Designer",
        "department": "Design",
        "location": "Remote",
        "description": "Join our design team to create beautiful user experiences.",
        "requirements": "3+ years of UX design experience",
        "salary_min": 90000,
        "salary_max": 140000,
        "skills_json": ["Figma", "User Research", "Prototyping", "Design Systems"],
    },
]

SAMPLE_CLOSING_DATE = datetime(2024, 12, 31, tzinfo=UTC)


def create_admin(
    session: Session,
    *,
    email: str = ADMIN_EMAIL,
    password: str = ADMIN_PASSWORD,
    name: str = ADMIN_NAME,
) -> tuple[User, bool]:
    """Return the admin account for ``email``, creating it when absent."""
    repo = Repository(session)
    existing = repo.get_user_by_email(email)
    if existing is not None:
        return existing, False

    admin = repo.add(
        User(name=name, email=email.strip().lower(), password_hash=hash_password(password), role="admin")
    )
    logger.info("Created admin user id=%s", admin.id)
    return admin, True


def seed_sample_data(session: Session) -> dict[str, int]:
    admin, created = create_admin(session)
    if not created:
        return {"admins": 0, "jobs": 0}

    for sample in SAMPLE_JOBS:
        session.add(
            Job(
                **sample,
                type="Full-time",
                status="open",
                salary_currency="USD",
                closing_date=SAMPLE_CLOSING_DATE,
                created_by=admin.id,
            )
        )
    session.commit()
    logger.info("Seeded %d sample jobs", len(SAMPLE_JOBS))
    return {"admins": 1, "jobs": len(SAMPLE_JOBS)}
