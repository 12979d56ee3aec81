from __future__ import annotations

import re
import secrets
import time
from typing import Any

OBJECT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")
SYNTHETIC_PREFIXES = ("local_", "google_", "mock_")


def new_object_id() -> str:
    """Return a 24-hex id: 4-byte epoch seconds followed by 8 random bytes."""
    return f"{int(time.time()) & 0xFFFFFFFF:08x}{secrets.token_hex(8)}"


def is_object_id(value: Any) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_PATTERN.match(value))


def normalize_id(value: Any) -> str:
    """Single normalization used wherever two ids are compared.

    Accepts plain strings, ints and populated records (``{"id": ...}``).
    """
    if value is None:
        return ""
    if isinstance(value, dict):
        return normalize_id(value.get("id"))
    return str(value).strip()


def ids_equal(left: Any, right: Any) -> bool:
    normalized = normalize_id(left)
    return bool(normalized) and normalized == normalize_id(right)


def is_synthetic_id(value: Any) -> bool:
    return normalize_id(value).startswith(SYNTHETIC_PREFIXES)


def synthetic_id(prefix: str = "local") -> str:
    return f"{prefix}_{time.time_ns() // 1_000_000}_{secrets.token_hex(3)}"
