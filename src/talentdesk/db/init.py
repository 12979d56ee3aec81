from __future__ import annotations

from pathlib import Path

from talentdesk.config import get_settings
from talentdesk.db.base import Base
from talentdesk.db.session import engine
from talentdesk.db import models  # noqa: F401


def ensure_data_directories() -> None:
    settings = get_settings()
    paths: list[Path] = [settings.data_dir, settings.upload_dir]
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def init_database() -> None:
    ensure_data_directories()
    Base.metadata.create_all(bind=engine)
