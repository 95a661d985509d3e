from typing import Type, Callable, List, Dict, Any
from vsp.domain.events import Event

class EventBus:
    """Synchronous in-process event channel.

    Callbacks run on the publisher's thread in subscription order, so a
    segment's updates reach every subscriber in the order they were emitted.
    """

    def __init__(self):
        self._subscribers: Dict[Type[Event], List[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: Type[Event], callback: Callable[[Any], None]):
        """Subscribes a callback to a specific event type."""
        self._subscribers.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: Type[Event], callback: Callable[[Any], None]):
        """Removes a callback; unknown callbacks are ignored."""
        callbacks = self._subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def publish(self, event: Event):
        """Publishes an event to all subscribers of its exact type."""
        for callback in list(self._subscribers.get(type(event), [])):
            callback(event)
