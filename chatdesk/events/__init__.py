"""Event dispatch package."""

from .types import EventType
from .dispatcher import Event, EventDispatcher

__all__ = ["EventType", "Event", "EventDispatcher"]
