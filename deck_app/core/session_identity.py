"""Anonymous per-browser session identifiers."""

from __future__ import annotations

import random
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 9
_rng = random.SystemRandom()


def generate_session_id() -> str:
    """Return an opaque id of the form ``session_<epoch-ms>_<base36 suffix>``."""
    suffix = "".join(_rng.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"session_{int(time.time() * 1000)}_{suffix}"


def ensure_session_id(stored: str | None) -> tuple[str, bool]:
    """Reuse a stored id or mint a new one; the flag tells whether it is new."""
    if stored and stored.strip():
        return stored.strip(), False
    return generate_session_id(), True


def normalize_user_name(name: str | None) -> str | None:
    cleaned = (name or "").strip()
    return cleaned or None
