"""
Qualified field paths.

A qualified field path such as ``row.entity.name`` or ``row.entity['first name']``
addresses one value reachable from a component node. The first segment is looked up
through the node and its ancestors; later segments read mapping keys or attributes.
"""

import re
from collections.abc import Mapping, MutableMapping
from typing import Any, List

from pyqt_gridedit.exceptions import FieldPathError

_SEGMENT = re.compile(r"""
    (?:^|\.)(?P<name>[A-Za-z_]\w*)     # dotted identifier
    | \[\s*(?P<quote>['"])(?P<key>.*?)(?P=quote)\s*\]   # ['quoted key']
    | \[\s*(?P<index>-?\d+)\s*\]       # [integer index]
""", re.VERBOSE)


def parse_field_path(expression: str) -> List[Any]:
    """Split a field path expression into attribute names, keys and indexes."""
    segments: List[Any] = []
    position = 0
    for match in _SEGMENT.finditer(expression):
        if match.start() != position:
            break
        if match.group("name") is not None:
            segments.append(match.group("name"))
        elif match.group("key") is not None:
            segments.append(match.group("key"))
        else:
            segments.append(int(match.group("index")))
        position = match.end()
    if not segments or position != len(expression):
        raise FieldPathError(f"Invalid field path: {expression!r}")
    return segments


def _read(container: Any, segment: Any, expression: str) -> Any:
    try:
        if isinstance(container, Mapping) or isinstance(segment, int):
            return container[segment]
        return getattr(container, segment)
    except (KeyError, IndexError, AttributeError, TypeError) as e:
        raise FieldPathError(f"Cannot resolve {segment!r} in {expression!r}: {e}") from e


class FieldPath:
    """Compiled accessor for a qualified field path."""

    def __init__(self, expression: str):
        self.expression = expression
        self.segments = parse_field_path(expression)

    def __repr__(self) -> str:
        return f"FieldPath({self.expression!r})"

    def _head(self, scope) -> Any:
        head = self.segments[0]
        try:
            return scope.lookup(head)
        except KeyError as e:
            raise FieldPathError(f"{head!r} is not visible from {scope!r}") from e

    def get(self, scope) -> Any:
        """Return the value the path addresses from scope."""
        value = self._head(scope)
        for segment in self.segments[1:]:
            value = _read(value, segment, self.expression)
        return value

    def assign(self, scope, value: Any) -> None:
        """Write value through the path."""
        if len(self.segments) == 1:
            scope.fields[self.segments[0]] = value
            return

        container = self._head(scope)
        for segment in self.segments[1:-1]:
            container = _read(container, segment, self.expression)

        last = self.segments[-1]
        try:
            if isinstance(container, MutableMapping) or isinstance(last, int):
                container[last] = value
            else:
                setattr(container, last, value)
        except (IndexError, AttributeError, TypeError) as e:
            raise FieldPathError(f"Cannot assign {last!r} in {self.expression!r}: {e}") from e
