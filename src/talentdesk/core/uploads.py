from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path, PurePosixPath

from talentdesk.config import Settings, get_settings
from talentdesk.core.errors import ValidationFailed

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads/"


class ResumeStorage:
    """Stores uploaded resumes on disk and maps them to ``/uploads/<name>`` URLs."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.root = Path(self.settings.upload_dir)

    def save(self, filename: str, content: bytes) -> str:
        extension = PurePosixPath(filename or "").suffix.lower()
        if extension not in self.settings.resume_extension_set:
            allowed = ", ".join(sorted(self.settings.resume_extension_set))
            raise ValidationFailed(f"Resume must be one of: {allowed}")
        if not content:
            raise ValidationFailed("Resume file is empty")
        if len(content) > self.settings.resume_max_bytes:
            raise ValidationFailed(
                f"Resume exceeds the {self.settings.resume_max_bytes // (1024 * 1024)}MB limit"
            )

        self.root.mkdir(parents=True, exist_ok=True)
        stored_name = f"resume-{int(time.time() * 1000)}-{secrets.token_hex(4)}{extension}"
        (self.root / stored_name).write_bytes(content)
        logger.info("Stored resume %s (%d bytes)", stored_name, len(content))
        return f"{UPLOAD_URL_PREFIX}{stored_name}"

    def path_for(self, resume_url: str) -> Path | None:
        if not resume_url.startswith(UPLOAD_URL_PREFIX):
            return None
        name = PurePosixPath(resume_url[len(UPLOAD_URL_PREFIX):]).name
        return self.root / name if name else None

    def delete(self, resume_url: str) -> bool:
        path = self.path_for(resume_url)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            logger.info("Resume %s already absent", resume_url)
            return False
        return True
