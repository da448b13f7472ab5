"""Shared helpers — hashing, timestamps, wording."""

from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from pathlib import Path


def sha256_file(path: Path) -> str:
    """Return the hex SHA-256 digest of *path*."""
    h = hashlib.sha256()
    with open(path, "rb") as fh:
        for chunk in iter(lambda: fh.read(8192), b""):
            h.update(chunk)
    return h.hexdigest()


def utcnow_iso() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def plural(count: int, noun: str) -> str:
    """``plural(1, "column")`` -> ``"1 column"``, ``plural(3, "column")`` -> ``"3 columns"``."""
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"
