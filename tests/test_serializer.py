"""JsonSerializer のユニットテスト"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

import pytest
from k1s0_typesense.exceptions import TypesenseClientError, TypesenseClientErrorCodes
from k1s0_typesense.serializer import Document, JsonSerializer, iter_lines, load_json


@dataclass
class Book:
    id: str
    title: str
    year: int
    tags: list[str]
    rating: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Book:
        return cls(
            id=data["id"],
            title=data["title"],
            year=data["year"],
            tags=data.get("tags", []),
            rating=data.get("rating"),
        )


def test_book_satisfies_document_protocol() -> None:
    assert isinstance(Book("1", "t", 2000, []), Document)


def test_round_trip_typed_document() -> None:
    """エンコードしてデコードすると元のドキュメントと等しいこと。"""
    serializer = JsonSerializer(Book)
    book = Book(id="1", title="ノルウェイの森", year=1987, tags=["novel"], rating=4.5)
    assert serializer.decode(serializer.encode(book)) == book


def test_round_trip_dict_document() -> None:
    serializer: JsonSerializer[dict[str, Any]] = JsonSerializer()
    doc = {"id": "a", "nested": {"k": [1, 2, None]}, "flag": True}
    assert serializer.decode(serializer.encode(doc)) == doc


def test_encode_lines_one_object_per_line() -> None:
    serializer = JsonSerializer(Book)
    books = [Book(id=str(i), title=f"t{i}", year=2000 + i, tags=[]) for i in range(3)]
    body = serializer.encode_lines(books)
    lines = body.split(b"\n")
    assert len(lines) == 3
    assert serializer.decode_lines(body) == books


def test_decode_lines_skips_blank_lines() -> None:
    serializer: JsonSerializer[dict[str, Any]] = JsonSerializer()
    assert serializer.decode_lines(b'{"id":"1"}\n\n{"id":"2"}\n') == [{"id": "1"}, {"id": "2"}]
    assert serializer.decode_lines(b"") == []


def test_decode_invalid_json() -> None:
    """不正な JSON は UNKNOWN になること。"""
    serializer: JsonSerializer[dict[str, Any]] = JsonSerializer()
    with pytest.raises(TypesenseClientError) as exc_info:
        serializer.decode(b"{not json")
    assert exc_info.value.code == TypesenseClientErrorCodes.UNKNOWN


def test_decode_non_object() -> None:
    serializer: JsonSerializer[dict[str, Any]] = JsonSerializer()
    with pytest.raises(TypesenseClientError) as exc_info:
        serializer.decode(b"[1, 2]")
    assert exc_info.value.code == TypesenseClientErrorCodes.UNKNOWN


def test_decode_missing_field_for_typed_document() -> None:
    serializer = JsonSerializer(Book)
    with pytest.raises(TypesenseClientError) as exc_info:
        serializer.decode(b'{"id": "1"}')
    assert exc_info.value.code == TypesenseClientErrorCodes.UNKNOWN


def test_encode_unsupported_type() -> None:
    """to_dict を持たない型は INVALID_ARGUMENT になること。"""
    serializer: JsonSerializer[dict[str, Any]] = JsonSerializer()
    with pytest.raises(TypesenseClientError) as exc_info:
        serializer.encode(object())
    assert exc_info.value.code == TypesenseClientErrorCodes.INVALID_ARGUMENT


def test_encode_unserializable_value() -> None:
    serializer: JsonSerializer[dict[str, Any]] = JsonSerializer()
    with pytest.raises(TypesenseClientError) as exc_info:
        serializer.encode({"id": "1", "when": object()})
    assert exc_info.value.code == TypesenseClientErrorCodes.INVALID_ARGUMENT


def test_iter_lines_strips_whitespace() -> None:
    assert list(iter_lines(b'  {"a":1}  \r\n\n{"b":2}')) == ['{"a":1}', '{"b":2}']


@pytest.mark.parametrize("separator", ["\u2028", "\u2029", "\x85"])
def test_decode_lines_keeps_unicode_line_separators(separator: str) -> None:
    """文字列中の Unicode 行区切り文字でレコードが分割されないこと。"""
    serializer: JsonSerializer[dict[str, Any]] = JsonSerializer()
    docs = [{"id": "1", "title": f"a{separator}b"}, {"id": "2", "title": "c"}]
    assert serializer.decode_lines(serializer.encode_lines(docs)) == docs


def test_iter_lines_splits_only_on_newline() -> None:
    body = '{"t":"a\u2028b"}\n{"t":"c\x0cd"}'.encode()
    assert list(iter_lines(body)) == ['{"t":"a\u2028b"}', '{"t":"c\x0cd"}']


@pytest.mark.parametrize("method", ["decode", "decode_lines"])
def test_decode_invalid_utf8(method: str) -> None:
    """不正な UTF-8 は置換せず UNKNOWN として失敗すること。"""
    serializer: JsonSerializer[dict[str, Any]] = JsonSerializer()
    with pytest.raises(TypesenseClientError) as exc_info:
        getattr(serializer, method)(b'{"id":"1","title":"caf\xe9"}')
    assert exc_info.value.code == TypesenseClientErrorCodes.UNKNOWN
    assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)


def test_load_json_invalid_utf8() -> None:
    with pytest.raises(TypesenseClientError) as exc_info:
        load_json(b'{"name":"caf\xe9"}')
    assert exc_info.value.code == TypesenseClientErrorCodes.UNKNOWN
