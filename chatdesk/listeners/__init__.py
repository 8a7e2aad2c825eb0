"""Event consumers."""

from .event_stream import EventStreamListener
from .notification import AssignmentNotifier
from .reporting import ReportingListener

__all__ = ["EventStreamListener", "AssignmentNotifier", "ReportingListener"]
