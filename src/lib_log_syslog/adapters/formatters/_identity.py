"""Shared header-field handling for the syslog formatters.

Purpose
-------
Validate the identity strings (hostname, app name, process id, msg id) once at
construction and render timestamps according to the configured offset policy.

Contents
--------
* :class:`TimestampPolicy` - ``utc`` or ``local`` offsets.
* :func:`header_field` - RFC 5424 PRINTUSASCII validation with length limits.
* :func:`render_rfc3339` - microsecond RFC 3339 timestamps.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

NILVALUE = "-"

HOSTNAME_MAX = 255
APP_NAME_MAX = 48
PROCID_MAX = 128
MSGID_MAX = 32


class TimestampPolicy(str, Enum):
    """Offset used when rendering timestamps.

    ``UTC`` renders a ``Z`` suffix and is the default so lines from different
    hosts correlate without knowing their zones.
    """

    UTC = "utc"
    LOCAL = "local"

    @classmethod
    def from_name(cls, name: "str | TimestampPolicy") -> "TimestampPolicy":
        if isinstance(name, TimestampPolicy):
            return name
        try:
            return cls(name.strip().lower())
        except ValueError as exc:
            raise ValueError(f"timestamp policy must be 'utc' or 'local', got {name!r}") from exc


def header_field(value: object | None, name: str, max_length: int) -> str | None:
    """Return ``value`` as validated header text, or ``None`` when absent.

    Examples
    --------
    >>> header_field("app.example", "hostname", 255)
    'app.example'
    >>> header_field(None, "hostname", 255) is None
    True
    >>> header_field("two words", "app_name", 48)
    Traceback (most recent call last):
    ...
    ValueError: app_name 'two words' must be printable US-ASCII without spaces
    """

    if value is None:
        return None
    text = str(value)
    if not text:
        return None
    if len(text) > max_length:
        raise ValueError(f"{name} {text!r} exceeds {max_length} characters")
    if any(not 33 <= ord(char) <= 126 for char in text):
        raise ValueError(f"{name} {text!r} must be printable US-ASCII without spaces")
    return text


def apply_policy(moment: datetime, policy: TimestampPolicy) -> datetime:
    """Convert ``moment`` into the zone selected by ``policy``."""

    if policy is TimestampPolicy.LOCAL:
        return moment.astimezone()
    return moment.astimezone(timezone.utc)


def render_rfc3339(moment: datetime, policy: TimestampPolicy) -> str:
    """Render ``moment`` with microsecond precision.

    Examples
    --------
    >>> render_rfc3339(datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc), TimestampPolicy.UTC)
    '2024-05-01T12:00:00.000000Z'
    """

    rendered = apply_policy(moment, policy).isoformat(timespec="microseconds")
    if policy is TimestampPolicy.UTC:
        rendered = rendered.replace("+00:00", "Z")
    return rendered


__all__ = [
    "APP_NAME_MAX",
    "HOSTNAME_MAX",
    "MSGID_MAX",
    "NILVALUE",
    "PROCID_MAX",
    "TimestampPolicy",
    "apply_policy",
    "header_field",
    "render_rfc3339",
]
