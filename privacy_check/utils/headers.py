"""Case-insensitive access to captured HTTP response headers."""

from __future__ import annotations

from collections.abc import Mapping


def get_header(headers: Mapping[str, str], name: str) -> str | None:
    """Return the value of header *name*, ignoring case.

    Empty values are treated as absent.
    """
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() == wanted:
            return value.strip() or None
    return None
