from types import SimpleNamespace
from typing import List, Tuple

import pytest
from crudrouter import ConfigurationError, Except, Only, Operation
from crudrouter.operations import ALL_OPERATIONS, MAXIMAL_OPERATIONS, register_operations, select_operations, sorted_operations


class _RecordingRouter:
    def __init__(self) -> None:
        self.bound: List[Tuple[str, tuple, str]] = []

    def bind(self, verb, path, handler, endpoint=None):
        self.bound.append((verb, path, endpoint))
        return verb, path


def _controller() -> SimpleNamespace:
    handlers = {op.value: (lambda **ids: None) for op in Operation}
    return SimpleNamespace(endpoint_name=lambda op: f"r.{op.value}", **handlers)


def test_default_is_maximal_set() -> None:
    assert select_operations(None, "resource") == ALL_OPERATIONS
    assert select_operations(None, "parent") == {Operation.READ_ONE, Operation.UPDATE}


def test_only() -> None:
    assert select_operations(Only(Operation.READ_ONE, Operation.DELETE), "children") == {Operation.READ_ONE, Operation.DELETE}
    # a plain collection is an allow list
    assert select_operations([Operation.CREATE], "siblings") == {Operation.CREATE}


def test_only_outside_maximal_set() -> None:
    with pytest.raises(ConfigurationError):
        select_operations(Only(Operation.CREATE), "parent")


def test_except_is_relative_to_the_kind() -> None:
    assert select_operations(Except(Operation.DELETE), "resource") == select_operations(
        Only(Operation.READ_ONE, Operation.READ_ALL, Operation.CREATE, Operation.UPDATE), "resource"
    )
    # DELETE isn't part of the parent maximal set, excluding it is a no-op
    assert select_operations(Except(Operation.DELETE), "parent") == MAXIMAL_OPERATIONS["parent"]
    assert select_operations(Except(Operation.UPDATE), "parent") == {Operation.READ_ONE}
    assert select_operations(Except(*Operation), "resource") == frozenset()


def test_selector_rejects_strings() -> None:
    with pytest.raises(ConfigurationError):
        Only("read_one")


def test_sorted_operations_is_declaration_order() -> None:
    assert sorted_operations({Operation.DELETE, Operation.READ_ALL, Operation.UPDATE}) == [
        Operation.READ_ALL,
        Operation.UPDATE,
        Operation.DELETE,
    ]
    assert repr(Except(Operation.DELETE, Operation.CREATE)) == "Except(CREATE, DELETE)"


def test_register_binds_one_route_per_operation() -> None:
    router = _RecordingRouter()
    base_path, id_path = ("todo",), ("todo", "<todo_id>")
    register_operations(ALL_OPERATIONS, router, _controller(), base_path, id_path)
    assert router.bound == [
        ("GET", base_path, "r.read_all"),
        ("GET", id_path, "r.read_one"),
        ("POST", base_path, "r.create"),
        ("PUT", id_path, "r.update"),
        ("DELETE", id_path, "r.delete"),
    ]


def test_register_only() -> None:
    router = _RecordingRouter()
    operations = select_operations(Only(Operation.READ_ONE, Operation.DELETE), "resource")
    register_operations(operations, router, _controller(), ("todo",), ("todo", "<todo_id>"))
    assert [(verb, path) for verb, path, _ in router.bound] == [("GET", ("todo", "<todo_id>")), ("DELETE", ("todo", "<todo_id>"))]
