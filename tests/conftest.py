from __future__ import annotations

import shutil
import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from tests.fakes import FixedClock


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def socket_dir() -> Iterator[Path]:
    """Short-lived directory with a path short enough for AF_UNIX addresses."""

    directory = Path(tempfile.mkdtemp(prefix="lls-", dir="/tmp" if Path("/tmp").is_dir() else None))
    try:
        yield directory
    finally:
        shutil.rmtree(directory, ignore_errors=True)
