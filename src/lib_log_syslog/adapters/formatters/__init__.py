"""Syslog wire-format renderers."""

from __future__ import annotations

from ._identity import TimestampPolicy
from .rfc3164 import Rfc3164Formatter
from .rfc5424 import Rfc5424Formatter

__all__ = ["Rfc3164Formatter", "Rfc5424Formatter", "TimestampPolicy"]
