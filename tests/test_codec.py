import datetime
import decimal
import json
import uuid

import pytest
from crudrouter import DecodeError, JSONCodec
from crudrouter.attr_parse import parse_attr
from crudrouter.json_encoder import CrudJSONEncoder
from .models import Account, Book, Todo


@pytest.fixture
def codec() -> JSONCodec:
    return JSONCodec()


def test_decode(codec) -> None:
    todo = codec.decode(Todo, b'{"id": 3, "title": "x", "unknown": 1}')
    assert isinstance(todo, Todo)
    assert (todo.id, todo.title) == (3, "x")


def test_decode_exclude(codec) -> None:
    book = codec.decode(Book, '{"id": 3, "name": "Dune", "user_id": "u1"}', exclude=("id", "user_id"))
    assert book.name == "Dune"
    assert book.id is None
    assert book.user_id is None


def test_decode_excluded_attributes_are_not_required(codec) -> None:
    with pytest.raises(DecodeError):
        codec.decode(Todo, "{}")
    assert codec.decode(Todo, "{}", exclude=("title",)).title is None


@pytest.mark.parametrize("raw", [b"", b"  ", b"{", b'"x"', b"[]", b"null", b'{"title": "a\xffb"}'])
def test_decode_malformed(codec, raw: bytes) -> None:
    with pytest.raises(DecodeError):
        codec.decode(Todo, raw)


def test_decode_type_coercion(codec) -> None:
    todo = codec.decode(Todo, '{"id": "7", "title": "x"}')
    assert todo.id == 7
    with pytest.raises(DecodeError):
        codec.decode(Todo, '{"id": "seven", "title": "x"}')
    with pytest.raises(DecodeError):
        codec.decode(Todo, '{"title": {"nested": true}}')


def test_encode_public_representation(codec) -> None:
    account = Account(id=1, email="a@b.c", password="secret", active=True, created=datetime.datetime(2024, 1, 2))
    assert codec.encode(account) == {"id": 1, "email": "a@b.c", "active": True, "created": datetime.datetime(2024, 1, 2)}


def test_parse_attr() -> None:
    columns = Account.__table__.columns
    assert parse_attr(columns.created, "2024-01-02 03:04:05.5") == datetime.datetime(2024, 1, 2, 3, 4, 5, 500000)
    assert parse_attr(columns.created, "2024-01-02") == datetime.datetime(2024, 1, 2)
    assert parse_attr(columns.active, 1) is True
    assert parse_attr(columns.active, "False") is False
    assert parse_attr(columns.active, None) is None
    assert parse_attr(columns.id, True) == 1
    assert parse_attr(columns.id, 2.0) == 2
    with pytest.raises(DecodeError):
        parse_attr(columns.id, 1.9)
    with pytest.raises(DecodeError):
        parse_attr(columns.created, "yesterday")
    with pytest.raises(DecodeError):
        parse_attr(columns.active, [True])


def test_json_encoder() -> None:
    obj = {
        "datetime": datetime.datetime(2024, 1, 2, 3, 4, 5),
        "date": datetime.date(2024, 1, 2),
        "time": datetime.time(3, 4),
        "delta": datetime.timedelta(minutes=1),
        "decimal": decimal.Decimal("1.5"),
        "uuid": uuid.UUID(int=1),
        "set": {1},
        "bytes": b"\x01\x02",
    }
    assert json.loads(json.dumps(obj, cls=CrudJSONEncoder)) == {
        "datetime": "2024-01-02 03:04:05",
        "date": "2024-01-02",
        "time": "03:04:00",
        "delta": "0:01:00",
        "decimal": 1.5,
        "uuid": "00000000-0000-0000-0000-000000000001",
        "set": [1],
        "bytes": "0102",
    }
