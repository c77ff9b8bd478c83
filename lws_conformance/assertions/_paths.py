"""Fixture path helpers shared by assertion modules."""

import uuid

from yarl import URL


def unique_path(prefix: str, suffix: str = ".json") -> str:
    """Return a root-level path that no earlier run can have created."""
    return f"/{prefix}-{uuid.uuid4().hex[:12]}{suffix}"


def path_of(base_url: str, location: str) -> str:
    """Turn a Location header into a path relative to ``base_url``."""
    url = URL(location)
    if not url.is_absolute():
        return location
    base_path = URL(base_url).path.rstrip("/")
    return url.path.removeprefix(base_path) or "/"
