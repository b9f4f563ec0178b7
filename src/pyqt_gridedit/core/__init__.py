"""
Core component infrastructure.

Pure Python building blocks with no Qt dependency: the component node tree,
the hierarchical event channel, and qualified field path binding.
"""

from .event_channel import Event, EventChannel, Subscription, default_channel, inert_subscription
from .component_node import ComponentNode, DISPOSED, sever_node
from .binding import FieldPath, parse_field_path

__all__ = [
    "Event",
    "EventChannel",
    "Subscription",
    "default_channel",
    "inert_subscription",
    "ComponentNode",
    "DISPOSED",
    "sever_node",
    "FieldPath",
    "parse_field_path",
]
