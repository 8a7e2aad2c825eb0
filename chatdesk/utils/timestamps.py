"""Epoch conversion helpers for naive UTC timestamps."""

import calendar
from datetime import datetime
from typing import Optional


def to_epoch(value: Optional[datetime]) -> int:
    """Whole seconds since the epoch, 0 for a missing timestamp."""
    if value is None:
        return 0
    return calendar.timegm(value.utctimetuple())
