from .Event import (
    Event, EventListener, EventDispatcher, EventFake, GenericEvent,
    create_event_dispatcher, get_event_dispatcher
)
from .CloudinaryResponseLogged import CloudinaryResponseLogged

__all__ = [
    "Event",
    "EventListener",
    "EventDispatcher",
    "EventFake",
    "GenericEvent",
    "CloudinaryResponseLogged",
    "create_event_dispatcher",
    "get_event_dispatcher"
]
