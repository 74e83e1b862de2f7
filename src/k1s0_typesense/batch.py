"""バッチインポート / エクスポート"""

from __future__ import annotations

import json
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from urllib.parse import quote

import structlog

from .exceptions import (
    TypesenseClientError,
    TypesenseClientErrorCodes,
    code_for_status,
    invalid_argument,
    raise_for_status,
)
from .models import ExportParameters, ImportOutcome, ImportType
from .serializer import JsonSerializer, iter_lines
from .transport import JSONL_CONTENT_TYPE, Transport, TransportResponse

D = TypeVar("D")

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class BatchUnit(Generic[D]):
    """呼び出し元の入力列での位置を保持したドキュメント。"""

    position: int
    document: D


@dataclass
class BatchPlan(Generic[D]):
    """batch_size ごとに区切ったバッチの並び。最後のバッチのみ短くなり得る。"""

    batches: list[list[BatchUnit[D]]] = field(default_factory=list)

    @classmethod
    def build(cls, documents: Sequence[D], batch_size: int) -> BatchPlan[D]:
        if batch_size <= 0:
            raise invalid_argument(f"batch_size must be positive, got {batch_size}")
        units = [BatchUnit(position=i, document=d) for i, d in enumerate(documents)]
        return cls(
            batches=[units[i : i + batch_size] for i in range(0, len(units), batch_size)]
        )

    def __len__(self) -> int:
        return len(self.batches)

    def __iter__(self) -> Iterator[list[BatchUnit[D]]]:
        return iter(self.batches)

    def documents(self) -> list[D]:
        return [unit.document for batch in self.batches for unit in batch]


def _documents_path(collection: str, suffix: str) -> str:
    return f"/collections/{quote(collection, safe='')}/documents/{suffix}"


def _line_error_code(data: dict[str, Any]) -> str:
    code = data.get("code")
    if isinstance(code, int):
        return code_for_status(code)
    if "already exists" in str(data.get("error", "")).lower():
        return TypesenseClientErrorCodes.CONFLICT
    return TypesenseClientErrorCodes.VALIDATION_FAILED


def outcome_from_line(line: str, position: int) -> ImportOutcome:
    """インポートレスポンスの 1 行を ImportOutcome に変換する。"""
    try:
        data = json.loads(line)
    except ValueError:
        data = None
    if not isinstance(data, dict):
        return ImportOutcome(
            position=position,
            success=False,
            error=line,
            error_code=TypesenseClientErrorCodes.UNKNOWN,
        )
    if data.get("success") is True:
        return ImportOutcome(position=position, success=True)
    echo = data.get("document")
    if echo is not None and not isinstance(echo, str):
        echo = json.dumps(echo, ensure_ascii=False)
    return ImportOutcome(
        position=position,
        success=False,
        error=str(data.get("error", "")),
        error_code=_line_error_code(data),
        document=echo,
    )


def _is_outcome_body(lines: list[str], expected: int) -> bool:
    if len(lines) != expected:
        return False
    for line in lines:
        try:
            data = json.loads(line)
        except ValueError:
            return False
        if not isinstance(data, dict) or "success" not in data:
            return False
    return True


class DocumentBatcher(Generic[D]):
    """ドキュメントのバッチインポートとエクスポートを行う。

    バッチは入力順に 1 つずつ送信し、自動リトライは行わない。
    """

    def __init__(self, transport: Transport, serializer: JsonSerializer[D]) -> None:
        self._transport = transport
        self._serializer = serializer

    async def import_documents(
        self,
        collection: str,
        documents: Sequence[Any],
        batch_size: int,
        import_type: ImportType,
    ) -> list[ImportOutcome]:
        """ドキュメントをインポートし、入力と同じ順序の ImportOutcome を返す。

        Raises:
            TypesenseClientError: 引数不正、いずれかのバッチの送信失敗、
                またはドキュメント単位の結果を得られなかった場合
        """
        if not collection:
            raise invalid_argument("collection must not be empty")
        if not documents:
            raise invalid_argument("documents must not be empty")
        try:
            action = ImportType(import_type)
        except ValueError as e:
            raise invalid_argument(f"unknown import type: {import_type}") from e
        plan = BatchPlan.build(documents, batch_size)

        path = _documents_path(collection, "import")
        params = {"action": action.value, "batch_size": str(batch_size)}
        # 送信前に全バッチをエンコードし、エンコード失敗時は 1 件も送信しない
        bodies = [self._serializer.encode_lines([u.document for u in batch]) for batch in plan]
        outcomes: list[ImportOutcome] = []
        for index, (batch, body) in enumerate(zip(plan, bodies)):
            batch_outcomes = await self._import_batch(path, params, batch, body)
            failed = sum(1 for o in batch_outcomes if not o.success)
            logger.info(
                "imported batch",
                collection=collection,
                batch=index + 1,
                batches=len(plan),
                size=len(batch),
                failed=failed,
            )
            outcomes.extend(batch_outcomes)
        return outcomes

    async def _import_batch(
        self,
        path: str,
        params: dict[str, str],
        batch: list[BatchUnit[Any]],
        body: bytes,
    ) -> list[ImportOutcome]:
        resp = await self._transport.send(
            "POST", path, params=params, body=body, content_type=JSONL_CONTENT_TYPE
        )
        try:
            lines = list(iter_lines(resp.body))
        except TypesenseClientError:
            if resp.is_success:
                raise
            lines = []
        if not resp.is_success and not _is_outcome_body(lines, len(batch)):
            raise_for_status(resp.status_code, resp.body, f"import_documents({path})")
        if len(lines) != len(batch):
            raise _malformed(resp, len(batch), len(lines))
        return [outcome_from_line(line, unit.position) for line, unit in zip(lines, batch)]

    async def export_documents(
        self,
        collection: str,
        parameters: ExportParameters | None = None,
    ) -> list[D]:
        """コレクションの全ドキュメントをサーバーが返した順序で取得する。"""
        if not collection:
            raise invalid_argument("collection must not be empty")
        params = parameters.to_params() if parameters is not None else None
        resp = await self._transport.send(
            "GET", _documents_path(collection, "export"), params=params
        )
        raise_for_status(resp.status_code, resp.body, f"export_documents({collection})")
        return self._serializer.decode_lines(resp.body)


def _malformed(resp: TransportResponse, expected: int, actual: int) -> TypesenseClientError:
    return TypesenseClientError(
        code=TypesenseClientErrorCodes.UNKNOWN,
        message=f"import response has {actual} lines for {expected} documents",
        status_code=resp.status_code,
        body=resp.body,
    )
