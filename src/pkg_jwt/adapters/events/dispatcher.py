from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from ...domain.ports import EventChannel

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]
L = TypeVar("L", bound=Listener)


class EventDispatcher(EventChannel):
    """
    Adapter implementing the EventChannel port in-process.

    - Listeners are plain callables receiving the event object.
    - Delivery is synchronous, in registration order, and every listener
      gets the same instance, so later listeners see earlier mutations.
    - Listener exceptions are not caught.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[Listener]] = {}

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def publish(self, event: Any, event_name: Optional[str] = None) -> Any:
        name = event_name or getattr(event, "NAME", None)
        if not name:
            raise ValueError(f"Cannot route event {type(event).__name__} without a name")

        # snapshot, so listeners may (un)register while being notified
        listeners = list(self._listeners.get(name, ()))
        for listener in listeners:
            listener(event)

        logger.debug("Published %s to %d listener(s)", name, len(listeners))
        return event

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def add_listener(self, event_name: str, listener: Listener) -> None:
        self._listeners.setdefault(event_name, []).append(listener)

    def remove_listener(self, event_name: str, listener: Listener) -> None:
        listeners = self._listeners.get(event_name)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[event_name]

    def listen(self, event_name: str) -> Callable[[L], L]:
        """
        Decorator form of add_listener:

            @dispatcher.listen(JWT_CREATED)
            def add_tenant(event): ...
        """
        def decorator(listener: L) -> L:
            self.add_listener(event_name, listener)
            return listener

        return decorator

    def get_listeners(self, event_name: str) -> List[Listener]:
        return list(self._listeners.get(event_name, ()))

    def has_listeners(self, event_name: Optional[str] = None) -> bool:
        if event_name is None:
            return any(self._listeners.values())
        return bool(self._listeners.get(event_name))
