"""
Controller handlers on an in-memory data store, without http router or database
"""
from http import HTTPStatus
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from crudrouter import DataStore, JSONCodec, NotFoundError
from crudrouter.controller import Controller, ResourceController
from crudrouter.id_types import get_id_type
from .models import Todo


class _MemoryStore(DataStore):
    def __init__(self) -> None:
        self.records: Dict[Any, Any] = {}
        self.next_id = 1

    def find_all(self, model) -> List[Any]:
        return list(self.records.values())

    def find_by_id(self, model, id) -> Optional[Any]:
        return self.records.get(get_id_type(model).validate_id(id))

    def save(self, instance) -> Any:
        if instance.id is None:
            instance.id = self.next_id
            self.next_id += 1
        self.records[instance.id] = instance
        return instance

    def delete(self, instance) -> bool:
        return self.records.pop(instance.id, None) is not None


class _RecordingRouter:
    def __init__(self, store: DataStore) -> None:
        self.store = store
        self.codec = JSONCodec()
        self.prefix = ""
        self.bound: List[tuple] = []

    def bind(self, verb, path, handler, endpoint=None):
        self.bound.append((verb, path, endpoint))


@pytest.fixture
def router() -> _RecordingRouter:
    return _RecordingRouter(_MemoryStore())


@pytest.fixture
def todos(router) -> ResourceController:
    controller = ResourceController(router, Todo, ("todo",))
    controller.boot()
    return controller


def _set_body(monkeypatch: pytest.MonkeyPatch, body: bytes) -> None:
    monkeypatch.setattr(Controller, "request_body", staticmethod(lambda: body))


def test_boot_binds_the_operation_set(router, todos) -> None:
    assert [(verb, endpoint) for verb, _, endpoint in router.bound] == [
        ("GET", "todo.read_all"),
        ("GET", "todo.read_one"),
        ("POST", "todo.create"),
        ("PUT", "todo.update"),
        ("DELETE", "todo.delete"),
    ]
    assert router.bound[1][1] == todos.id_path


def test_read_all_is_never_missing(todos) -> None:
    assert todos.read_all() == ([], HTTPStatus.OK)


def test_create_update_read(todos, monkeypatch: pytest.MonkeyPatch) -> None:
    _set_body(monkeypatch, b'{"id": 12, "title": "x"}')
    result, status = todos.create()
    assert result == {"id": 1, "title": "x"}
    assert status == HTTPStatus.OK

    _set_body(monkeypatch, b'{"id": 12, "title": "y"}')
    result, _ = todos.update(todo_id=1)
    assert result == {"id": 1, "title": "y"}
    assert todos.read_one(todo_id=1) == ({"id": 1, "title": "y"}, HTTPStatus.OK)
    assert list(todos.store.records) == [1]


def test_lookup_not_found(todos, monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(NotFoundError):
        todos.read_one(todo_id=1)
    with pytest.raises(NotFoundError):
        todos.read_one(todo_id="abc")
    _set_body(monkeypatch, b'{"title": "y"}')
    with pytest.raises(NotFoundError):
        todos.update(todo_id=1)


def test_store_is_shared(router) -> None:
    first = ResourceController(router, Todo, ("todo",))
    second = ResourceController(router, Todo, ("tasks",))
    assert first.store is second.store is router.store
    assert repr(second) == "<ResourceController Todo tasks>"


def test_relation_builders_delegate_to_the_router(todos) -> None:
    calls = []
    todos.api = SimpleNamespace(register_relation=lambda *args, **kwargs: calls.append((args, kwargs)) or "controller")
    assert todos.with_siblings("tags", delete_related=True) == "controller"
    (base, kind, rel_name, path, methods, configure), kwargs = calls[0]
    assert (base, kind.value, rel_name) == (todos, "siblings", "tags")
    assert kwargs == {"delete_related": True}
