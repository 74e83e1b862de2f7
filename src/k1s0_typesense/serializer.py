"""ドキュメントの JSON / JSON Lines シリアライザ"""

from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from .exceptions import TypesenseClientError, TypesenseClientErrorCodes, invalid_argument


@runtime_checkable
class Document(Protocol):
    """ワイヤ上のフラットなマッピングと相互変換できるドキュメント。"""

    def to_dict(self) -> dict[str, Any]: ...

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Any: ...


D = TypeVar("D")


def decode_text(body: bytes) -> str:
    """レスポンスボディを UTF-8 として厳密にデコードする。"""
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise TypesenseClientError(
            code=TypesenseClientErrorCodes.UNKNOWN,
            message=f"Failed to decode response: {e}",
            cause=e,
        ) from e


def iter_lines(body: bytes) -> Iterator[str]:
    """改行区切りボディから空行を除いた行を返す。

    区切りは "\\n" のみ。U+2028 などは JSON 文字列内にそのまま現れ得る。
    """
    for raw in decode_text(body).split("\n"):
        line = raw.strip(" \t\r")
        if line:
            yield line


class JsonSerializer(Generic[D]):
    """ドキュメント型を JSON に変換するシリアライザ。

    document_type を省略した場合は dict をそのまま扱う。
    """

    def __init__(self, document_type: type[D] | None = None) -> None:
        self._document_type = document_type

    def to_mapping(self, document: Any) -> dict[str, Any]:
        if isinstance(document, dict):
            return dict(document)
        if isinstance(document, Document):
            return document.to_dict()
        raise invalid_argument(
            f"document of type {type(document).__name__} is not serializable"
        )

    def from_mapping(self, data: dict[str, Any]) -> D:
        if self._document_type is None:
            return data  # type: ignore[return-value]
        try:
            return self._document_type.from_dict(data)  # type: ignore[attr-defined, no-any-return]
        except (KeyError, TypeError, ValueError) as e:
            raise TypesenseClientError(
                code=TypesenseClientErrorCodes.UNKNOWN,
                message=f"Failed to build {self._document_type.__name__}: {e}",
                cause=e,
            ) from e

    def encode(self, document: Any) -> bytes:
        try:
            text = json.dumps(self.to_mapping(document), ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            raise TypesenseClientError(
                code=TypesenseClientErrorCodes.INVALID_ARGUMENT,
                message=f"Failed to encode document: {e}",
                cause=e,
            ) from e
        return text.encode("utf-8")

    def decode(self, body: bytes) -> D:
        return self.from_mapping(self._load_object(decode_text(body)))

    def encode_lines(self, documents: Sequence[Any]) -> bytes:
        return b"\n".join(self.encode(d) for d in documents)

    def decode_lines(self, body: bytes) -> list[D]:
        return [self.from_mapping(self._load_object(line)) for line in iter_lines(body)]

    @staticmethod
    def _load_object(text: str) -> dict[str, Any]:
        try:
            data = json.loads(text)
        except ValueError as e:
            raise TypesenseClientError(
                code=TypesenseClientErrorCodes.UNKNOWN,
                message=f"Failed to decode response: {e}",
                cause=e,
            ) from e
        if not isinstance(data, dict):
            raise TypesenseClientError(
                code=TypesenseClientErrorCodes.UNKNOWN,
                message=f"Expected a JSON object, got {type(data).__name__}",
            )
        return data


def load_json(body: bytes) -> Any:
    """レスポンスボディを JSON として読み込む。"""
    try:
        return json.loads(decode_text(body))
    except ValueError as e:
        raise TypesenseClientError(
            code=TypesenseClientErrorCodes.UNKNOWN,
            message=f"Failed to decode response: {e}",
            cause=e,
        ) from e
