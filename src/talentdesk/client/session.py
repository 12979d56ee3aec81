from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from talentdesk.core.ids import normalize_id

Backing = Literal["remote", "local"]

DEMO_EMAIL = "demo@example.com"


@dataclass(slots=True)
class SessionUser:
    id: str
    name: str = ""
    email: str = ""
    role: str = "user"
    token: str = ""
    is_google_user: bool = False
    provider: str = ""
    is_demo: bool = False

    @classmethod
    def from_login(cls, payload: dict[str, Any], *, provider: str = "") -> "SessionUser":
        """Build a session from a login response, flagging demo accounts by email."""
        email = str(payload.get("email") or "").strip().lower()
        return cls(
            id=normalize_id(payload.get("id")),
            name=str(payload.get("name") or ""),
            email=email,
            role=str(payload.get("role") or "user"),
            token=str(payload.get("token") or ""),
            is_google_user=bool(payload.get("is_google_user", False)),
            provider=provider or str(payload.get("provider") or ""),
            is_demo=bool(payload.get("is_demo")) or email == DEMO_EMAIL or "demo" in email,
        )

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "SessionUser":
        return cls(
            id=normalize_id(payload.get("id")),
            name=str(payload.get("name") or ""),
            email=str(payload.get("email") or ""),
            role=str(payload.get("role") or "user"),
            token=str(payload.get("token") or ""),
            is_google_user=bool(payload.get("is_google_user", False)),
            provider=str(payload.get("provider") or ""),
            is_demo=bool(payload.get("is_demo", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(slots=True)
class StoragePolicy:
    backing: Backing

    @classmethod
    def for_user(cls, user: SessionUser | None) -> "StoragePolicy":
        if user is not None and (user.is_google_user or user.provider == "google" or user.is_demo):
            return cls("local")
        return cls("remote")

    @property
    def local_backed(self) -> bool:
        return self.backing == "local"

    @property
    def remote_backed(self) -> bool:
        return self.backing == "remote"


@dataclass(slots=True)
class ClientState:
    """What the client currently holds in memory for the signed-in user."""

    user: SessionUser | None = None
    applicants: list[dict[str, Any]] = field(default_factory=list)
    interviews: list[dict[str, Any]] = field(default_factory=list)

    @property
    def user_id(self) -> str:
        return self.user.id if self.user else ""

    def policy(self) -> StoragePolicy:
        return StoragePolicy.for_user(self.user)
