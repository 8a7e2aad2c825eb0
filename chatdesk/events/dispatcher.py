"""In-process publish/subscribe for lifecycle events."""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping
import threading

from .types import EventType
from ..errors import DispatchSubscriberFailure
from ..utils.logger import get_app_logger


@dataclass(frozen=True)
class Event:
    """One published event, shared by every subscriber."""

    topic: EventType
    timestamp: datetime
    payload: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    def __getitem__(self, key: str) -> Any:
        return self.payload[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.payload.get(key, default)


Subscriber = Callable[[Event], Any]


class EventDispatcher:
    """
    Synchronous event bus.

    Subscribers of a topic run in registration order. A subscriber that raises
    is logged and skipped; the ones after it still run.
    """

    def __init__(self):
        self._subscribers: Dict[EventType, List[Subscriber]] = {}
        self._lock = threading.Lock()
        self.logger = get_app_logger("events")

    def subscribe(self, topic: EventType, subscriber: Subscriber):
        with self._lock:
            self._subscribers.setdefault(EventType(topic), []).append(subscriber)

    def unsubscribe(self, topic: EventType, subscriber: Subscriber):
        with self._lock:
            subscribers = self._subscribers.get(EventType(topic), [])
            self._subscribers[EventType(topic)] = [s for s in subscribers if s != subscriber]

    def subscribe_listener(self, listener: Any) -> List[EventType]:
        """
        Register every method of ``listener`` named after a topic.

        ``conversation_created`` handles ``conversation.created`` and so on.

        Returns:
            Topics the listener was subscribed to
        """
        topics = []
        for topic in EventType:
            handler = getattr(listener, topic.handler_name, None)
            if callable(handler):
                self.subscribe(topic, handler)
                topics.append(topic)
        return topics

    def subscribers(self, topic: EventType) -> List[Subscriber]:
        with self._lock:
            return list(self._subscribers.get(EventType(topic), []))

    def dispatch(self, topic: EventType, timestamp: datetime, **payload) -> List[DispatchSubscriberFailure]:
        """
        Publish an event to the subscribers of ``topic``.

        Args:
            topic: Event topic
            timestamp: When the transition happened, passed unchanged to every subscriber
            **payload: Entities the event refers to

        Returns:
            Failures of subscribers that raised
        """
        event = Event(topic=EventType(topic), timestamp=timestamp, payload=MappingProxyType(dict(payload)))
        failures = []

        for subscriber in self.subscribers(event.topic):
            try:
                subscriber(event)
            except Exception as e:
                failure = DispatchSubscriberFailure(event.topic, _subscriber_name(subscriber), e)
                self.logger.exception(str(failure))
                failures.append(failure)

        return failures


def _subscriber_name(subscriber: Subscriber) -> str:
    owner = getattr(subscriber, "__self__", None)
    name = getattr(subscriber, "__qualname__", None) or repr(subscriber)
    if owner is not None and "." not in name:
        return f"{type(owner).__name__}.{name}"
    return name
