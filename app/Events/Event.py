from __future__ import annotations

from typing import Any, Dict, List, Optional, Union, Callable, Type
from abc import ABC, abstractmethod
import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import json
import uuid


class EventPriority(Enum):
    """Event listener priorities."""
    HIGHEST = 1
    HIGH = 25
    NORMAL = 50
    LOW = 75
    LOWEST = 100


@dataclass
class EventSubscription:
    """Event subscription configuration."""
    event_class: Optional[Type['Event']]
    listener: Union[Callable[..., Any], Type['EventListener']]
    priority: int = EventPriority.NORMAL.value
    halt_on_failure: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class Event(ABC):
    """Base class for Laravel-style events."""

    def __init__(self) -> None:
        self.event_id = str(uuid.uuid4())
        self.timestamp = datetime.now(timezone.utc)
        self.propagation_stopped = False

    def stop_propagation(self) -> None:
        """Stop event propagation to remaining listeners."""
        self.propagation_stopped = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary."""
        result: Dict[str, Any] = {
            'event_id': self.event_id,
            'timestamp': self.timestamp.isoformat(),
            'event_type': self.__class__.__name__
        }

        for key, value in self.__dict__.items():
            if not key.startswith('_') and key not in ['event_id', 'timestamp', 'propagation_stopped']:
                result[key] = value

        return result

    def to_json(self) -> str:
        """Convert event to JSON."""
        return json.dumps(self.to_dict(), default=str)


class EventListener(ABC):
    """Base class for event listeners."""

    def __init__(self) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def handle(self, event: Event) -> Any:
        """Handle the event."""
        pass

    def failed(self, event: Event, exception: Exception) -> None:
        """Handle a failed event."""
        self.logger.error(f"Failed to handle event {event.__class__.__name__}: {exception}")


class GenericEvent(Event):
    """Generic event for string-based events."""

    def __init__(self, name: str, data: Dict[str, Any]):
        super().__init__()
        self.name = name
        self.data = data

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result.update(self.data)
        return result


class EventDispatcher:
    """Synchronous Laravel-style event dispatcher.

    Listeners run in priority order on the caller's thread. A failing listener
    is counted and logged; the exception only propagates when its subscription
    was registered with ``halt_on_failure``.
    """

    def __init__(self) -> None:
        self.listeners: Dict[str, List[EventSubscription]] = {}
        self.wildcards: List[EventSubscription] = []
        self.logger = logging.getLogger(self.__class__.__name__)

        self.stats = {
            'events_dispatched': 0,
            'listeners_executed': 0,
            'failed_listeners': 0,
        }

    def listen(
        self,
        event: Union[str, Type[Event]],
        listener: Union[Callable[..., Any], Type[EventListener]],
        priority: int = EventPriority.NORMAL.value,
        halt_on_failure: bool = False,
    ) -> None:
        """Register an event listener. ``'*'`` listens to every event."""
        subscription = EventSubscription(
            event_class=event if not isinstance(event, str) else None,
            listener=listener,
            priority=priority,
            halt_on_failure=halt_on_failure,
        )

        if event == '*':
            self.wildcards.append(subscription)
            self.wildcards.sort(key=lambda s: s.priority)
            return

        event_name = event if isinstance(event, str) else event.__name__
        self.listeners.setdefault(event_name, []).append(subscription)
        self.listeners[event_name].sort(key=lambda s: s.priority)

        self.logger.debug(f"Registered listener for event: {event_name}")

    def forget(self, event: Union[str, Type[Event]]) -> None:
        """Remove all listeners for an event."""
        event_name = event if isinstance(event, str) else event.__name__
        self.listeners.pop(event_name, None)

    def dispatch(self, event: Union[Event, str], payload: Optional[Dict[str, Any]] = None) -> List[Any]:
        """Dispatch an event to all listeners."""
        if isinstance(event, str):
            event_name = event
            event_obj: Event = GenericEvent(event_name, payload or {})
        else:
            event_name = event.__class__.__name__
            event_obj = event

        self.stats['events_dispatched'] += 1

        subscriptions = sorted(
            self.listeners.get(event_name, []) + self.wildcards,
            key=lambda s: s.priority,
        )

        results = []
        for subscription in subscriptions:
            if event_obj.propagation_stopped:
                break

            try:
                results.append(self._execute_listener(subscription.listener, event_obj))
                self.stats['listeners_executed'] += 1
            except Exception as e:
                self.stats['failed_listeners'] += 1
                self.logger.error(f"Error executing listener for {event_name}: {e}")

                if subscription.halt_on_failure:
                    raise

        return results

    def _execute_listener(self, listener: Union[Callable[..., Any], Type[EventListener]], event: Event) -> Any:
        if inspect.isclass(listener) and issubclass(listener, EventListener):
            instance = listener()
            try:
                return instance.handle(event)
            except Exception as e:
                instance.failed(event, e)
                raise

        if callable(listener):
            return listener(event)

        raise ValueError(f"Invalid listener type: {type(listener)}")

    def get_listeners(self, event_name: str) -> List[EventSubscription]:
        """Get all listeners for an event."""
        return self.listeners.get(event_name, [])

    def has_listeners(self, event_name: str) -> bool:
        """Check if an event has listeners."""
        return bool(self.listeners.get(event_name))

    def get_stats(self) -> Dict[str, Any]:
        """Get dispatcher statistics."""
        return self.stats.copy()


class EventFake(EventDispatcher):
    """Dispatcher that records events instead of running listeners."""

    def __init__(self) -> None:
        super().__init__()
        self.dispatched_events: List[Event] = []

    def dispatch(self, event: Union[Event, str], payload: Optional[Dict[str, Any]] = None) -> List[Any]:
        if isinstance(event, str):
            event = GenericEvent(event, payload or {})

        self.dispatched_events.append(event)
        return []

    def dispatched(self, event_class: Type[Event]) -> List[Event]:
        return [e for e in self.dispatched_events if isinstance(e, event_class)]

    def assert_dispatched(self, event_class: Type[Event], count: Optional[int] = None) -> None:
        """Assert that an event was dispatched."""
        dispatched = self.dispatched(event_class)

        if count is not None:
            assert len(dispatched) == count, f"Expected {count} {event_class.__name__} events, got {len(dispatched)}"
        else:
            assert len(dispatched) > 0, f"Expected {event_class.__name__} event to be dispatched"

    def assert_not_dispatched(self, event_class: Type[Event]) -> None:
        """Assert that an event was not dispatched."""
        dispatched = self.dispatched(event_class)
        assert len(dispatched) == 0, f"Expected {event_class.__name__} event not to be dispatched"


_dispatcher: Optional[EventDispatcher] = None


def create_event_dispatcher() -> EventDispatcher:
    """Create a dispatcher with the storage listeners registered."""
    from app.Events.CloudinaryResponseLogged import CloudinaryResponseLogged
    from app.Listeners.LogCloudinaryResponse import LogCloudinaryResponse

    dispatcher = EventDispatcher()
    dispatcher.listen(CloudinaryResponseLogged, LogCloudinaryResponse)
    return dispatcher


def get_event_dispatcher() -> EventDispatcher:
    """Get the global event dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = create_event_dispatcher()
    return _dispatcher
