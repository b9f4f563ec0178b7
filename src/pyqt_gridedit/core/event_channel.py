"""
Hierarchical publish/subscribe channel for component node trees.

Events travel along the component tree in one of three ways:
- local: only the listeners registered on the originating node
- emit: the originating node, then each ancestor up to the root
- broadcast: the originating node, then its whole subtree (parents before children)

Every subscription returns a Subscription handle. Removing the handle is the only
way to de-register a listener, and removal is idempotent.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from pyqt_gridedit.core.component_node import ComponentNode

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


@dataclass
class Event:
    """An event travelling through the component tree."""
    name: str
    target_node: "ComponentNode"
    current_node: Optional["ComponentNode"] = None
    propagation_stopped: bool = field(default=False, repr=False)

    def stop_propagation(self) -> None:
        """Stop an emitted event from reaching further ancestors."""
        self.propagation_stopped = True


class Subscription:
    """
    Handle for one registered listener.

    The handle is the owner of the registration: remove() takes the listener out of
    its node and updates the listener counts along the ancestor chain.
    """

    __slots__ = ("name", "handler", "_node", "_active")

    def __init__(self, node: Optional["ComponentNode"], name: str, handler: Handler):
        self.name = name
        self.handler = handler
        self._node = node
        self._active = node is not None

    @property
    def active(self) -> bool:
        return self._active

    def invoke(self, event: Event, args: tuple) -> None:
        # A listener removed earlier in the same dispatch must not run
        if self._active:
            self.handler(event, *args)

    def remove(self) -> None:
        """De-register the listener. Safe to call any number of times."""
        if not self._active:
            return
        self._active = False
        node, self._node = self._node, None
        handlers = node.listeners.get(self.name)
        if handlers and self in handlers:
            handlers.remove(self)
            if not handlers:
                del node.listeners[self.name]
            node.adjust_listener_count(self.name, -1)

    def __call__(self) -> None:
        self.remove()

    def __repr__(self) -> str:
        state = "active" if self._active else "removed"
        return f"Subscription({self.name!r}, {state})"


def inert_subscription(name: str = "", handler: Optional[Handler] = None) -> Subscription:
    """Return a handle that registers nothing (used by destroyed nodes)."""
    return Subscription(None, name, handler or (lambda *args: None))


class EventChannel:
    """
    Dispatcher for events on a tree of ComponentNode objects.

    The channel itself is stateless; listener registries live on the nodes so that a
    node's listeners are dropped together with the node.
    """

    def subscribe(self, node: "ComponentNode", name: str, handler: Handler) -> Subscription:
        """Register handler for name on node and return its handle."""
        if node.destroyed:
            logger.debug(f"Ignoring subscription to {name!r} on destroyed node {node.id}")
            return inert_subscription(name, handler)

        subscription = Subscription(node, name, handler)
        node.listeners.setdefault(name, []).append(subscription)
        node.adjust_listener_count(name, 1)
        return subscription

    def notify(self, node: "ComponentNode", name: str, *args: Any) -> Event:
        """Deliver an event to the listeners of node only."""
        event = Event(name, node, current_node=node)
        self._deliver(node, event, args)
        return event

    def emit(self, node: "ComponentNode", name: str, *args: Any) -> Event:
        """Deliver an event to node, then to each ancestor until stopped."""
        event = Event(name, node)
        current = node
        while current is not None:
            event.current_node = current
            self._deliver(current, event, args)
            if event.propagation_stopped:
                break
            current = current.parent
        return event

    def broadcast(self, node: "ComponentNode", name: str, *args: Any) -> Event:
        """Deliver an event to node and its whole subtree, depth first."""
        event = Event(name, node)
        stack = [node]
        while stack:
            current = stack.pop()
            event.current_node = current
            self._deliver(current, event, args)
            # Skip subtrees that hold no listener for this event
            children = [child for child in current.children if child.listener_count.get(name)]
            stack.extend(reversed(children))
        return event

    @staticmethod
    def _deliver(node: "ComponentNode", event: Event, args: tuple) -> None:
        handlers = node.listeners.get(event.name)
        if not handlers:
            return
        # Snapshot: listeners may remove themselves during dispatch
        for subscription in list(handlers):
            subscription.invoke(event, args)


# Shared channel used by ComponentNode convenience methods
default_channel = EventChannel()
