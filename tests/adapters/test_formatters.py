from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from lib_log_syslog.adapters.formatters import Rfc3164Formatter, Rfc5424Formatter, TimestampPolicy
from lib_log_syslog.domain.bounded import ByteBuffer, MaxByteWriter
from lib_log_syslog.domain.errors import SyslogFormatError
from lib_log_syslog.domain.severity import Facility, Severity
from tests.fakes import FixedClock
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def render(formatter, severity: Severity, message: object, **kwargs: object) -> str:  # noqa: ANN001
    buffer = ByteBuffer(2048)
    formatter.format(buffer, severity, message, **kwargs)
    return buffer.getvalue().decode("utf-8")


def test_rfc5424_line_layout(fixed_clock: FixedClock) -> None:
    formatter = Rfc5424Formatter(
        facility=Facility.LOCAL0,
        hostname="web1",
        app_name="billing",
        process_id=4242,
        msg_id="INVOICE",
        clock=fixed_clock,
    )

    line = render(formatter, Severity.WARNING, "late payment")

    assert line == "<132>1 2024-05-01T12:00:00.123456Z web1 billing 4242 INVOICE - late payment"


def test_rfc5424_defaults_use_nilvalues(fixed_clock: FixedClock) -> None:
    line = render(Rfc5424Formatter(clock=fixed_clock), Severity.INFO, "hi")

    assert line == "<14>1 2024-05-01T12:00:00.123456Z localhost - - - - hi"


def test_rfc5424_per_record_msg_id_and_structured_data(fixed_clock: FixedClock) -> None:
    formatter = Rfc5424Formatter(app_name="app", clock=fixed_clock)

    line = render(formatter, Severity.INFO, "done", structured_data={"job@32473": {"id": "42"}}, msg_id="JOB")

    assert line.endswith(' app - JOB [job@32473 id="42"] done')


def test_rfc5424_has_no_trailing_newline(fixed_clock: FixedClock) -> None:
    assert not render(Rfc5424Formatter(clock=fixed_clock), Severity.INFO, "x").endswith("\n")


def test_rfc5424_renders_message_objects_with_str(fixed_clock: FixedClock) -> None:
    class Payload:
        def __str__(self) -> str:
            return "payload-42"

    assert render(Rfc5424Formatter(clock=fixed_clock), Severity.INFO, Payload()).endswith(" payload-42")


def test_rfc5424_local_timestamp_uses_numeric_offset() -> None:
    moment = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    formatter = Rfc5424Formatter(timestamp=TimestampPolicy.LOCAL, clock=FixedClock(moment))

    line = render(formatter, Severity.INFO, "x")

    stamp = line.split(" ")[1]
    assert not stamp.endswith("Z")
    assert stamp[-6] in "+-"


def test_rfc5424_utc_policy_converts_other_zones() -> None:
    moment = datetime(2024, 5, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    formatter = Rfc5424Formatter(clock=FixedClock(moment))

    assert render(formatter, Severity.INFO, "x").split(" ")[1] == "2024-05-01T12:00:00.000000Z"


@pytest.mark.parametrize(
    "field, value, error_match",
    [
        ("hostname", "two words", "printable US-ASCII"),
        ("app_name", "a" * 49, "exceeds 48"),
        ("process_id", "pid\x00", "printable US-ASCII"),
        ("msg_id", "m" * 33, "exceeds 32"),
    ],
)
def test_rfc5424_rejects_invalid_identity(field: str, value: str, error_match: str) -> None:
    with pytest.raises(ValueError, match=error_match):
        Rfc5424Formatter(**{field: value})


def test_rfc5424_invalid_per_record_msg_id_is_a_format_error(fixed_clock: FixedClock) -> None:
    with pytest.raises(SyslogFormatError, match="msg_id"):
        render(Rfc5424Formatter(clock=fixed_clock), Severity.INFO, "x", msg_id="has space")


def test_rfc5424_keeps_utf8_message_bytes(fixed_clock: FixedClock) -> None:
    assert render(Rfc5424Formatter(clock=fixed_clock), Severity.INFO, "grüße 🚀").endswith(" grüße 🚀")


def test_rfc5424_truncation_lands_in_message_body(fixed_clock: FixedClock) -> None:
    buffer = ByteBuffer(64)
    sink = MaxByteWriter(buffer, 55)

    Rfc5424Formatter(hostname="h", app_name="a", process_id=1, clock=fixed_clock).format(sink, Severity.INFO, "x" * 100)

    line = buffer.getvalue().decode()
    assert len(line) == 55
    assert line.startswith("<14>1 2024-05-01T12:00:00.123456Z h a 1 - - x")


def test_rfc5424_wraps_sink_failures_in_format_error(fixed_clock: FixedClock) -> None:
    with pytest.raises(SyslogFormatError):
        Rfc5424Formatter(clock=fixed_clock).format(ByteBuffer(8), Severity.INFO, "too long for eight bytes")


def test_rfc3164_line_layout() -> None:
    clock = FixedClock(datetime(2024, 5, 1, 9, 5, 7, tzinfo=timezone.utc))
    formatter = Rfc3164Formatter(facility="local0", hostname="web1", app_name="demo", process_id=7, clock=clock)

    assert render(formatter, Severity.ERROR, "disk full") == "<131>May  1 09:05:07 web1 demo[7]: disk full"


def test_rfc3164_without_pid_and_two_digit_day() -> None:
    clock = FixedClock(datetime(2024, 12, 24, 23, 59, 59, tzinfo=timezone.utc))
    formatter = Rfc3164Formatter(hostname="web1", app_name="demo", clock=clock)

    line = render(formatter, Severity.INFO, "x", structured_data={"ignored@1": {"k": "v"}})

    assert line == "<14>Dec 24 23:59:59 web1 demo: x"
