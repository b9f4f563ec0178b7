"""
Component node tree.

A ComponentNode stands for one live component instance (grid, row, cell, editor).
Nodes own their children and their listener registry; the parent link is a weak
reference so that a detached subtree is never kept alive from below.

Listener counts are maintained incrementally: every node's ``listener_count`` holds,
per event name, the number of active subscriptions on the node and all of its
descendants. Subscribing, removing a subscription, attaching and detaching a subtree
each adjust the counts along the ancestor chain.
"""

import itertools
import logging
import weakref
from typing import Any, Callable, Dict, Iterator, List, Optional

from pyqt_gridedit.core.event_channel import (
    Event, EventChannel, Handler, Subscription, default_channel, inert_subscription,
)

logger = logging.getLogger(__name__)

DISPOSED = "nodeDisposed"

_node_ids = itertools.count(1)

_MISSING = object()


def _noop(*args, **kwargs) -> None:
    return None


def _register_nothing(*args, **kwargs) -> Subscription:
    return inert_subscription()


class ComponentNode:
    """One node of the live component tree."""

    def __init__(self, parent: Optional["ComponentNode"] = None, name: str = "",
                 channel: Optional[EventChannel] = None):
        self.id = next(_node_ids)
        self.name = name
        self.channel = channel or (parent.channel if parent is not None else default_channel)
        self.children: List["ComponentNode"] = []
        self.fields: Dict[str, Any] = {}
        self.listeners: Dict[str, List[Subscription]] = {}
        self.listener_count: Dict[str, int] = {}
        self.watchers: List[Callable[[], Any]] = []
        self.async_queue: List[Callable[[], Any]] = []
        self.post_digest_queue: List[Callable[[], Any]] = []
        self.destroyed = False
        self._parent_ref: Optional[weakref.ref] = None
        if parent is not None:
            parent.attach(self)

    def __repr__(self) -> str:
        label = f" {self.name}" if self.name else ""
        state = " destroyed" if self.destroyed else ""
        return f"<ComponentNode {self.id}{label}{state}>"

    # ========== TREE ==========

    @property
    def parent(self) -> Optional["ComponentNode"]:
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def root(self) -> "ComponentNode":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def next_sibling(self) -> Optional["ComponentNode"]:
        return self._sibling(1)

    @property
    def prev_sibling(self) -> Optional["ComponentNode"]:
        return self._sibling(-1)

    def _sibling(self, offset: int) -> Optional["ComponentNode"]:
        parent = self.parent
        if parent is None:
            return None
        index = parent.children.index(self) + offset
        if 0 <= index < len(parent.children):
            return parent.children[index]
        return None

    def ancestors(self) -> Iterator["ComponentNode"]:
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def descendants(self) -> Iterator["ComponentNode"]:
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def new_child(self, name: str = "") -> "ComponentNode":
        """Create a child node attached under this node."""
        return ComponentNode(self, name)

    def attach(self, child: "ComponentNode") -> None:
        """Attach child (and its listener counts) under this node."""
        if self.destroyed:
            raise RuntimeError(f"Cannot attach {child!r} to destroyed node {self!r}")
        if child.parent is not None:
            child.detach()
        self.children.append(child)
        child._parent_ref = weakref.ref(self)
        for name, count in child.listener_count.items():
            self._propagate_count(name, count)

    def detach(self) -> None:
        """Remove this node (and its listener counts) from its parent."""
        parent = self.parent
        if parent is None:
            return
        for name, count in self.listener_count.items():
            parent._propagate_count(name, -count)
        if self in parent.children:
            parent.children.remove(self)
        self._parent_ref = None

    def lookup(self, key: str, default: Any = _MISSING) -> Any:
        """Read a field from this node, falling back to its ancestors."""
        node = self
        while node is not None:
            if key in node.fields:
                return node.fields[key]
            node = node.parent
        if default is _MISSING:
            raise KeyError(key)
        return default

    # ========== LISTENER COUNTS ==========

    def adjust_listener_count(self, name: str, delta: int) -> None:
        """Apply delta to the count for name on this node and every ancestor."""
        self._propagate_count(name, delta)

    def _propagate_count(self, name: str, delta: int) -> None:
        node = self
        while node is not None:
            count = node.listener_count.get(name, 0) + delta
            if count <= 0:
                node.listener_count.pop(name, None)
            else:
                node.listener_count[name] = count
            node = node.parent

    # ========== EVENTS ==========

    def subscribe(self, name: str, handler: Handler) -> Subscription:
        return self.channel.subscribe(self, name, handler)

    def notify(self, name: str, *args: Any) -> Event:
        return self.channel.notify(self, name, *args)

    def emit(self, name: str, *args: Any) -> Event:
        return self.channel.emit(self, name, *args)

    def broadcast(self, name: str, *args: Any) -> Event:
        return self.channel.broadcast(self, name, *args)

    # ========== WATCH / DIGEST ==========

    def watch(self, watcher: Callable[[], Any]) -> Callable[[], None]:
        """Register a callable run on every digest of this node or an ancestor."""
        self.watchers.append(watcher)

        def unwatch():
            if watcher in self.watchers:
                self.watchers.remove(watcher)
        return unwatch

    def digest(self) -> None:
        """Run queued async work, then the watchers of this subtree."""
        while self.async_queue:
            self.async_queue.pop(0)()
        for node in itertools.chain((self,), self.descendants()):
            for watcher in list(node.watchers):
                watcher()
        while self.post_digest_queue:
            self.post_digest_queue.pop(0)()

    def apply(self, fn: Optional[Callable[[], Any]] = None) -> Any:
        """Run fn, then digest from the root of the tree."""
        result = fn() if fn is not None else None
        self.root.digest()
        return result

    # ========== LIFECYCLE ==========

    def destroy(self) -> None:
        """Announce disposal to the subtree, then sever the node from the tree."""
        if self.destroyed:
            return
        self.broadcast(DISPOSED)
        sever_node(self)


def sever_node(node: ComponentNode) -> None:
    """
    Mark node destroyed and cut every reference that ties it to the live tree.

    Runs unconditionally, so it may be applied to a node whose destroy() has already
    been consumed. Queues and listener tables are replaced with empty containers
    rather than None because in-flight async work may still try to use them.
    """
    parent = node.parent
    node.destroyed = True

    if parent is not None:
        for name, count in list(node.listener_count.items()):
            parent._propagate_count(name, -count)
        if node in parent.children:
            parent.children.remove(node)

    for descendant in list(node.descendants()):
        _seal(descendant)
    _seal(node)

    node._parent_ref = None
    node.children = []
    node.async_queue = []
    node.post_digest_queue = []

    # Late callers of a destroyed node get harmless no-ops
    node.destroy = node.digest = node.apply = _noop
    node.subscribe = node.watch = _register_nothing
    logger.debug(f"Severed {node!r}")


def _seal(node: ComponentNode) -> None:
    node.destroyed = True
    for handlers in node.listeners.values():
        for subscription in list(handlers):
            subscription._active = False
    node.listeners = {}
    node.listener_count = {}
    node.watchers = []
