"""Tests for the component node tree, event channel and field paths."""

import pytest

from pyqt_gridedit.core import ComponentNode, DISPOSED, FieldPath, sever_node
from pyqt_gridedit.exceptions import FieldPathError


def _record(log, label):
    def handler(event, *args):
        log.append((label, event.current_node.name, args))
    return handler


def test_emit_travels_to_ancestors():
    """Test emit reaches the node and every ancestor in order."""
    root = ComponentNode(name="root")
    row = root.new_child("row")
    cell = row.new_child("cell")
    log = []
    for node in (root, row, cell):
        node.subscribe("ping", _record(log, node.name))

    cell.emit("ping", 1)

    assert [entry[1] for entry in log] == ["cell", "row", "root"]
    assert log[0][2] == (1,)


def test_emit_stop_propagation():
    """Test a stopped event does not reach further ancestors."""
    root = ComponentNode(name="root")
    cell = root.new_child("cell")
    log = []
    cell.subscribe("ping", lambda event: event.stop_propagation())
    root.subscribe("ping", _record(log, "root"))

    cell.emit("ping")

    assert log == []


def test_broadcast_reaches_subtree_parents_first():
    """Test broadcast visits the subtree depth first, parents before children."""
    root = ComponentNode(name="root")
    a = root.new_child("a")
    a1 = a.new_child("a1")
    b = root.new_child("b")
    log = []
    for node in (root, a, a1, b):
        node.subscribe("ping", _record(log, node.name))

    a.broadcast("ping")
    assert [entry[1] for entry in log] == ["a", "a1"]

    log.clear()
    root.broadcast("ping")
    assert [entry[1] for entry in log] == ["root", "a", "a1", "b"]


def test_notify_is_local_only():
    root = ComponentNode(name="root")
    cell = root.new_child("cell")
    log = []
    root.subscribe("ping", _record(log, "root"))
    cell.subscribe("ping", _record(log, "cell"))

    cell.notify("ping")

    assert [entry[1] for entry in log] == ["cell"]


def test_listener_counts_follow_subscriptions():
    """Test counts are maintained on the node and every ancestor."""
    root = ComponentNode(name="root")
    row = root.new_child("row")
    cell = row.new_child("cell")

    first = cell.subscribe("ping", lambda event: None)
    row.subscribe("ping", lambda event: None)

    assert cell.listener_count == {"ping": 1}
    assert row.listener_count == {"ping": 2}
    assert root.listener_count == {"ping": 2}

    first.remove()
    first.remove()  # idempotent

    assert cell.listener_count == {}
    assert row.listener_count == {"ping": 1}
    assert root.listener_count == {"ping": 1}


def test_detach_and_attach_move_counts():
    root = ComponentNode(name="root")
    row = root.new_child("row")
    row.subscribe("ping", lambda event: None)

    row.detach()
    assert root.listener_count == {}
    assert row.parent is None
    assert root.children == []

    other = ComponentNode(name="other")
    other.attach(row)
    assert other.listener_count == {"ping": 1}
    assert row.parent is other


def test_handler_removing_itself_during_dispatch():
    """Test a listener may remove itself and others while being dispatched."""
    node = ComponentNode()
    calls = []

    def first(event):
        calls.append("first")
        sub_first.remove()
        sub_second.remove()

    sub_first = node.subscribe("ping", first)
    sub_second = node.subscribe("ping", lambda event: calls.append("second"))

    node.emit("ping")
    node.emit("ping")

    assert calls == ["first"]
    assert node.listener_count == {}


def test_siblings_are_derived_from_children():
    root = ComponentNode()
    a, b, c = root.new_child("a"), root.new_child("b"), root.new_child("c")

    assert a.prev_sibling is None
    assert a.next_sibling is b
    assert c.prev_sibling is b

    b.destroy()
    assert a.next_sibling is c
    assert c.prev_sibling is a
    assert b.next_sibling is None


def test_destroy_broadcasts_disposed_then_severs():
    """Test destroy announces disposal, then removes the node's counts from ancestors."""
    root = ComponentNode(name="root")
    root.subscribe("ping", lambda event: None)
    row = root.new_child("row")
    cell = row.new_child("cell")
    cell.subscribe("ping", lambda event: None)
    row.subscribe("pong", lambda event: None)
    disposed = []
    cell.subscribe(DISPOSED, lambda event: disposed.append(event.target_node))

    before = sum(root.listener_count.values())
    contributed = sum(row.listener_count.values())

    row.destroy()

    assert disposed == [row]
    assert row.destroyed and cell.destroyed
    assert row.parent is None
    assert row.children == []
    assert row not in root.children
    assert root.listener_count == {"ping": 1}
    assert sum(root.listener_count.values()) == before - contributed


def test_destroyed_node_is_inert():
    """Test late callers on a destroyed node get no-ops instead of failures."""
    node = ComponentNode()
    node.destroy()

    subscription = node.subscribe("ping", lambda event: None)
    assert not subscription.active
    subscription.remove()
    assert node.listeners == {}
    assert node.apply(lambda: 1) is None
    node.digest()
    node.destroy()
    node.watch(lambda: None)()
    assert node.async_queue == []
    assert node.post_digest_queue == []


def test_sever_runs_on_already_destroyed_node():
    """Test sever_node still unlinks a node flagged destroyed but left in the tree."""
    root = ComponentNode(name="root")
    node = root.new_child("node")
    node.subscribe("ping", lambda event: None)
    node.destroyed = True

    sever_node(node)

    assert node not in root.children
    assert root.listener_count == {}


def test_watch_and_apply_run_watchers():
    root = ComponentNode()
    child = root.new_child()
    seen = []
    unwatch = child.watch(lambda: seen.append("child"))
    root.async_queue.append(lambda: seen.append("async"))

    child.apply()
    assert seen == ["async", "child"]

    unwatch()
    root.digest()
    assert seen == ["async", "child"]


def test_lookup_falls_back_to_ancestors():
    root = ComponentNode()
    root.fields["row"] = "r"
    child = root.new_child()

    assert child.lookup("row") == "r"
    assert child.lookup("missing", None) is None
    with pytest.raises(KeyError):
        child.lookup("missing")


class _Entity:
    def __init__(self, name):
        self.name = name


def test_field_path_get_and_assign():
    """Test dotted, quoted-key and index segments for reads and writes."""
    scope = ComponentNode()
    scope.fields["row"] = {"entity": {"first name": "Bob", "tags": ["a", "b"], "obj": _Entity("x")}}

    path = FieldPath("row.entity['first name']")
    assert path.get(scope) == "Bob"
    path.assign(scope, "Robert")
    assert scope.fields["row"]["entity"]["first name"] == "Robert"

    assert FieldPath("row.entity.tags[1]").get(scope) == "b"
    FieldPath("row.entity.obj.name").assign(scope, "y")
    assert scope.fields["row"]["entity"]["obj"].name == "y"


def test_field_path_errors():
    scope = ComponentNode()
    scope.fields["row"] = {"entity": {}}

    with pytest.raises(FieldPathError):
        FieldPath("row.entity.name").get(scope)
    with pytest.raises(FieldPathError):
        FieldPath("nothing.here").get(scope)
    with pytest.raises(FieldPathError):
        FieldPath("row..entity")
