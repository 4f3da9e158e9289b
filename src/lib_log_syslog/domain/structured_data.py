"""RFC 5424 STRUCTURED-DATA rendering.

Structured data arrives as ``{sd_id: {param: value}}``; an empty or missing
mapping renders as the NILVALUE ``-``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import SyslogFormatError

StructuredData = Mapping[str, Mapping[str, Any]]

NILVALUE = "-"
_SD_NAME_MAX = 32
_FORBIDDEN_NAME_CHARS = frozenset('= ]"')


def _validate_name(name: str, what: str) -> str:
    if not name or len(name) > _SD_NAME_MAX:
        raise SyslogFormatError(f"{what} {name!r} must be 1-{_SD_NAME_MAX} characters")
    for char in name:
        if not 33 <= ord(char) <= 126 or char in _FORBIDDEN_NAME_CHARS:
            raise SyslogFormatError(f"{what} {name!r} contains invalid character {char!r}")
    return name


def escape_param_value(value: Any) -> str:
    r"""Escape ``"``, ``\`` and ``]`` as required inside PARAM-VALUE.

    Examples
    --------
    >>> escape_param_value('say "hi" [x]')
    'say \\"hi\\" [x\\]'
    """

    text = str(value)
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("]", "\\]")


def render_structured_data(data: StructuredData | None) -> str:
    """Render ``data`` as one or more SD-ELEMENTs, or ``-`` when empty.

    Examples
    --------
    >>> render_structured_data(None)
    '-'
    >>> render_structured_data({"origin@32473": {"ip": "10.0.0.1", "port": 514}})
    '[origin@32473 ip="10.0.0.1" port="514"]'
    >>> render_structured_data({"a": {}, "b": {"k": "v"}})
    '[a][b k="v"]'
    """

    if not data:
        return NILVALUE
    elements: list[str] = []
    for sd_id, params in data.items():
        parts = [_validate_name(sd_id, "SD-ID")]
        for name, value in params.items():
            parts.append(f'{_validate_name(name, "SD-PARAM name")}="{escape_param_value(value)}"')
        elements.append("[" + " ".join(parts) + "]")
    return "".join(elements)


__all__ = ["NILVALUE", "StructuredData", "escape_param_value", "render_structured_data"]
