"""Typesense ノードへの HTTP トランスポート"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass

import httpx
import structlog

from .config import Node, TypesenseConfig
from .exceptions import TypesenseClientError, TypesenseClientErrorCodes

API_KEY_HEADER = "X-TYPESENSE-API-KEY"
JSON_CONTENT_TYPE = "application/json"
JSONL_CONTENT_TYPE = "text/plain"

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """ステータスコードとボディの生データ。"""

    status_code: int
    body: bytes

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(ABC):
    """HTTP トランスポート抽象基底クラス。

    接続できなかった場合は TRANSPORT_FAILURE の TypesenseClientError を送出し、
    それ以外はステータスコードにかかわらずレスポンスを返す。
    """

    @abstractmethod
    async def send(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
        body: bytes | None = None,
        content_type: str = JSON_CONTENT_TYPE,
    ) -> TransportResponse: ...


class HttpxTransport(Transport):
    """httpx を使ったトランスポート。リクエストごとにノードをラウンドロビンで選ぶ。"""

    def __init__(self, config: TypesenseConfig) -> None:
        self._config = config
        self._nodes = itertools.cycle(config.nodes)
        headers: dict[str, str] = {}
        if config.api_key:
            headers[API_KEY_HEADER] = config.api_key
        self._headers = headers

    def _make_client(self, node: Node) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=node.base_url,
            headers=self._headers,
            timeout=self._config.connection_timeout_seconds,
        )

    async def send(
        self,
        method: str,
        path: str,
        params: Mapping[str, str] | None = None,
        body: bytes | None = None,
        content_type: str = JSON_CONTENT_TYPE,
    ) -> TransportResponse:
        node = next(self._nodes)
        headers = {"Content-Type": content_type} if body is not None else None
        try:
            async with self._make_client(node) as client:
                resp = await client.request(
                    method,
                    path,
                    params=dict(params) if params else None,
                    content=body,
                    headers=headers,
                )
        except httpx.HTTPError as e:
            logger.warning(
                "typesense request failed",
                method=method,
                path=path,
                node=node.base_url,
                error=str(e),
            )
            raise TypesenseClientError(
                code=TypesenseClientErrorCodes.TRANSPORT_FAILURE,
                message=f"{method} {path} on {node.base_url}: {e}",
                cause=e,
            ) from e
        logger.debug(
            "typesense request",
            method=method,
            path=path,
            node=node.base_url,
            status=resp.status_code,
        )
        return TransportResponse(status_code=resp.status_code, body=resp.content)
