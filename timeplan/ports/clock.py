"""Clock and id ports — injectable sources of "now" and fresh identifiers.

Core functions take these as keyword arguments so tests can pin time and
ids; production callers use the defaults below.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]
IdFactory = Callable[[], str]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Fresh random UUID4 string."""
    return str(uuid.uuid4())
