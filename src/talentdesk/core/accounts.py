from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.orm import Session

from talentdesk.api.schemas import AuthResponse, UserResponse
from talentdesk.config import Settings, get_settings
from talentdesk.core.errors import AuthenticationFailed, ResourceNotFound, ValidationFailed
from talentdesk.core.security import (
    GoogleTokenVerifier,
    burn_password_check,
    create_access_token,
    hash_password,
    verify_password,
)
from talentdesk.db.models import User
from talentdesk.db.repositories import Repository
from talentdesk.types import UserProfile

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


class AccountService:
    def __init__(
        self,
        session: Session,
        *,
        settings: Settings | None = None,
        google_verifier: GoogleTokenVerifier | None = None,
    ):
        self.session = session
        self.settings = settings or get_settings()
        self.repo = Repository(session)
        self.google_verifier = google_verifier or GoogleTokenVerifier(self.settings)

    def _auth_response(self, user: User) -> AuthResponse:
        return AuthResponse(
            **UserResponse.from_model(user).model_dump(),
            token=create_access_token(user.id, self.settings),
        )

    def register(self, *, name: str, email: str, password: str, role: str = "user") -> AuthResponse:
        if self.repo.get_user_by_email(email):
            raise ValidationFailed("User already exists")

        user = self.repo.add(
            User(
                name=name.strip(),
                email=email.strip().lower(),
                password_hash=hash_password(password),
                role=role,
            )
        )
        logger.info("Registered user id=%s", user.id)
        return self._auth_response(user)

    def login(self, *, email: str, password: str) -> AuthResponse:
        user = self.repo.get_user_by_email(email) if email else None
        if user is None:
            burn_password_check(password)
            raise AuthenticationFailed(INVALID_CREDENTIALS)
        if not verify_password(password, user.password_hash):
            raise AuthenticationFailed(INVALID_CREDENTIALS)
        return self._auth_response(user)

    def google_login(self, token: str) -> AuthResponse:
        claims = self.google_verifier.verify(token)
        email = str(claims.get("email") or "").strip().lower()
        if not email:
            raise ValidationFailed("Email not provided by Google")

        google_id = str(claims.get("sub") or "")
        user = self.repo.get_user_by_email(email)
        if user is None:
            user = self.repo.add(
                User(
                    name=str(claims.get("name") or email.split("@")[0]),
                    email=email,
                    password_hash=None,
                    google_id=google_id or None,
                    is_google_user=True,
                    picture=str(claims.get("picture") or ""),
                )
            )
            logger.info("Provisioned Google user id=%s", user.id)
            return self._auth_response(user)

        changes: dict[str, Any] = {"is_google_user": True}
        if not user.google_id and google_id:
            changes["google_id"] = google_id
        if not user.picture and claims.get("picture"):
            changes["picture"] = str(claims["picture"])
        user = self.repo.apply_changes(user, changes)
        return self._auth_response(user)

    def get_user(self, user_id: str) -> User:
        user = self.repo.get_user(user_id)
        if user is None:
            raise ResourceNotFound("User not found")
        return user

    def update_profile(self, user_id: str, changes: dict[str, Any]) -> AuthResponse:
        user = self.get_user(user_id)
        values: dict[str, Any] = {}

        if "name" in changes:
            values["name"] = changes["name"].strip()
        if "email" in changes:
            email = changes["email"].strip().lower()
            existing = self.repo.get_user_by_email(email)
            if existing is not None and existing.id != user.id:
                raise ValidationFailed("Email is already in use")
            values["email"] = email
        if "password" in changes:
            values["password_hash"] = hash_password(changes["password"])
        if "profile" in changes:
            merged = {**(user.profile_json or {}), **changes["profile"]}
            try:
                values["profile_json"] = UserProfile.model_validate(merged).model_dump()
            except ValueError as exc:
                raise ValidationFailed(f"Invalid profile: {exc}") from exc

        if values:
            user = self.repo.apply_changes(user, values)
        return self._auth_response(user)

    def list_users(self) -> list[UserResponse]:
        return [UserResponse.from_model(user) for user in self.repo.list_users()]
