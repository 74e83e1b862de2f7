"""Typesense HTTP クライアント実装"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar
from urllib.parse import quote

from .batch import DocumentBatcher
from .client import D, TypesenseClient
from .config import TypesenseConfig
from .exceptions import (
    TypesenseClientError,
    TypesenseClientErrorCodes,
    invalid_argument,
    raise_for_status,
)
from .models import (
    ApiKey,
    CollectionResponse,
    CollectionSchema,
    DeleteKeyResponse,
    DeleteSearchOverrideResponse,
    ExportParameters,
    FacetCount,
    FilterDeleteResponse,
    Highlight,
    ImportOutcome,
    ImportType,
    KeyResponse,
    ListKeysResponse,
    ListSearchOverridesResponse,
    SearchHit,
    SearchOverride,
    SearchParameters,
    SearchResult,
)
from .serializer import JsonSerializer, load_json
from .transport import HttpxTransport, Transport

R = TypeVar("R")


def _segment(value: str) -> str:
    return quote(value, safe="")


def _require(value: Any, name: str) -> None:
    if value is None or (isinstance(value, str) and not value):
        raise invalid_argument(f"{name} must not be empty")


def _parse(data: Any, factory: Callable[[Any], R], context: str) -> R:
    try:
        return factory(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise TypesenseClientError(
            code=TypesenseClientErrorCodes.UNKNOWN,
            message=f"{context}: unexpected response shape: {e}",
            cause=e,
        ) from e


class HttpTypesenseClient(TypesenseClient[D]):
    """Transport を使った Typesense クライアント。

    document_type を指定するとドキュメントをその型に変換して返す。
    省略時は dict のまま返す。
    """

    def __init__(
        self,
        config: TypesenseConfig,
        document_type: type[D] | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._transport = transport if transport is not None else HttpxTransport(config)
        self._serializer: JsonSerializer[D] = JsonSerializer(document_type)
        self._batcher = DocumentBatcher(self._transport, self._serializer)

    async def _request(
        self,
        method: str,
        path: str,
        context: str,
        params: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> bytes:
        resp = await self._transport.send(method, path, params=params, body=body)
        raise_for_status(resp.status_code, resp.body, context)
        return resp.body

    async def _request_json(
        self,
        method: str,
        path: str,
        context: str,
        params: Mapping[str, str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> Any:
        body = None
        if payload is not None:
            body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        return load_json(await self._request(method, path, context, params=params, body=body))

    def _document_path(self, collection: str, document_id: str | None = None) -> str:
        path = f"/collections/{_segment(collection)}/documents"
        if document_id is not None:
            path = f"{path}/{_segment(document_id)}"
        return path

    def _override_path(self, collection: str, override_name: str | None = None) -> str:
        path = f"/collections/{_segment(collection)}/overrides"
        if override_name is not None:
            path = f"{path}/{_segment(override_name)}"
        return path

    # --- collections ---

    async def create_collection(self, schema: CollectionSchema) -> CollectionResponse:
        _require(schema, "schema")
        _require(schema.name, "schema.name")
        context = f"create_collection({schema.name})"
        data = await self._request_json("POST", "/collections", context, payload=schema.to_dict())
        return _parse(data, CollectionResponse.from_dict, context)

    async def retrieve_collection(self, name: str) -> CollectionResponse:
        _require(name, "name")
        context = f"retrieve_collection({name})"
        data = await self._request_json("GET", f"/collections/{_segment(name)}", context)
        return _parse(data, CollectionResponse.from_dict, context)

    async def retrieve_collections(self) -> list[CollectionResponse]:
        context = "retrieve_collections"
        data = await self._request_json("GET", "/collections", context)
        return _parse(data, lambda d: [CollectionResponse.from_dict(c) for c in d], context)

    async def delete_collection(self, name: str) -> CollectionResponse:
        _require(name, "name")
        context = f"delete_collection({name})"
        data = await self._request_json("DELETE", f"/collections/{_segment(name)}", context)
        return _parse(data, CollectionResponse.from_dict, context)

    # --- documents ---

    async def create_document(self, collection: str, document: Any) -> D:
        _require(collection, "collection")
        _require(document, "document")
        body = await self._request(
            "POST",
            self._document_path(collection),
            f"create_document({collection})",
            body=self._serializer.encode(document),
        )
        return self._serializer.decode(body)

    async def upsert_document(self, collection: str, document: Any) -> D:
        _require(collection, "collection")
        _require(document, "document")
        body = await self._request(
            "POST",
            self._document_path(collection),
            f"upsert_document({collection})",
            params={"action": ImportType.UPSERT.value},
            body=self._serializer.encode(document),
        )
        return self._serializer.decode(body)

    async def retrieve_document(self, collection: str, document_id: str) -> D:
        _require(collection, "collection")
        _require(document_id, "document_id")
        body = await self._request(
            "GET",
            self._document_path(collection, document_id),
            f"retrieve_document({collection}, {document_id})",
        )
        return self._serializer.decode(body)

    async def update_document(self, collection: str, document_id: str, document: Any) -> D:
        _require(collection, "collection")
        _require(document_id, "document_id")
        _require(document, "document")
        body = await self._request(
            "PATCH",
            self._document_path(collection, document_id),
            f"update_document({collection}, {document_id})",
            body=self._serializer.encode(document),
        )
        return self._serializer.decode(body)

    async def delete_document(self, collection: str, document_id: str) -> D:
        _require(collection, "collection")
        _require(document_id, "document_id")
        body = await self._request(
            "DELETE",
            self._document_path(collection, document_id),
            f"delete_document({collection}, {document_id})",
        )
        return self._serializer.decode(body)

    async def delete_documents(
        self,
        collection: str,
        filter_by: str,
        batch_size: int | None = None,
    ) -> FilterDeleteResponse:
        _require(collection, "collection")
        _require(filter_by, "filter_by")
        params = {"filter_by": filter_by}
        if batch_size is not None:
            if batch_size <= 0:
                raise invalid_argument(f"batch_size must be positive, got {batch_size}")
            params["batch_size"] = str(batch_size)
        context = f"delete_documents({collection})"
        data = await self._request_json(
            "DELETE", self._document_path(collection), context, params=params
        )
        return _parse(data, FilterDeleteResponse.from_dict, context)

    async def search(self, collection: str, parameters: SearchParameters) -> SearchResult[D]:
        _require(collection, "collection")
        _require(parameters, "parameters")
        context = f"search({collection})"
        data = await self._request_json(
            "GET",
            f"{self._document_path(collection)}/search",
            context,
            params=parameters.to_params(),
        )
        return _parse(data, self._search_result, context)

    def _search_result(self, data: dict[str, Any]) -> SearchResult[D]:
        hits = [
            SearchHit(
                document=self._serializer.from_mapping(hit["document"]),
                highlights=[Highlight.from_dict(h) for h in hit.get("highlights", [])],
                text_match=hit.get("text_match"),
            )
            for hit in data.get("hits", [])
        ]
        return SearchResult(
            found=data.get("found", 0),
            out_of=data.get("out_of", 0),
            page=data.get("page", 1),
            search_time_ms=data.get("search_time_ms", 0),
            hits=hits,
            facet_counts=[FacetCount.from_dict(f) for f in data.get("facet_counts", [])],
        )

    async def import_documents(
        self,
        collection: str,
        documents: Sequence[Any],
        batch_size: int | None = None,
        import_type: ImportType | str | None = None,
    ) -> list[ImportOutcome]:
        return await self._batcher.import_documents(
            collection,
            documents,
            batch_size if batch_size is not None else self._config.import_batch_size,
            import_type if import_type is not None else self._config.import_type,
        )

    async def export_documents(
        self,
        collection: str,
        parameters: ExportParameters | None = None,
    ) -> list[D]:
        return await self._batcher.export_documents(collection, parameters)

    # --- keys ---

    async def create_key(self, key: ApiKey) -> KeyResponse:
        _require(key, "key")
        context = "create_key"
        data = await self._request_json("POST", "/keys", context, payload=key.to_dict())
        return _parse(data, KeyResponse.from_dict, context)

    async def retrieve_key(self, key_id: int) -> KeyResponse:
        context = f"retrieve_key({key_id})"
        data = await self._request_json("GET", f"/keys/{key_id}", context)
        return _parse(data, KeyResponse.from_dict, context)

    async def delete_key(self, key_id: int) -> DeleteKeyResponse:
        context = f"delete_key({key_id})"
        data = await self._request_json("DELETE", f"/keys/{key_id}", context)
        return _parse(data, DeleteKeyResponse.from_dict, context)

    async def list_keys(self) -> ListKeysResponse:
        context = "list_keys"
        data = await self._request_json("GET", "/keys", context)
        return _parse(data, ListKeysResponse.from_dict, context)

    # --- overrides ---

    async def upsert_search_override(
        self,
        collection: str,
        override_name: str,
        search_override: SearchOverride,
    ) -> SearchOverride:
        _require(collection, "collection")
        _require(override_name, "override_name")
        _require(search_override, "search_override")
        context = f"upsert_search_override({collection}, {override_name})"
        data = await self._request_json(
            "PUT",
            self._override_path(collection, override_name),
            context,
            payload=search_override.to_dict(),
        )
        return _parse(data, SearchOverride.from_dict, context)

    async def list_search_overrides(self, collection: str) -> ListSearchOverridesResponse:
        _require(collection, "collection")
        context = f"list_search_overrides({collection})"
        data = await self._request_json("GET", self._override_path(collection), context)
        return _parse(data, ListSearchOverridesResponse.from_dict, context)

    async def retrieve_search_override(
        self,
        collection: str,
        override_name: str,
    ) -> SearchOverride:
        _require(collection, "collection")
        _require(override_name, "override_name")
        context = f"retrieve_search_override({collection}, {override_name})"
        data = await self._request_json(
            "GET", self._override_path(collection, override_name), context
        )
        return _parse(data, SearchOverride.from_dict, context)

    async def delete_search_override(
        self,
        collection: str,
        override_name: str,
    ) -> DeleteSearchOverrideResponse:
        _require(collection, "collection")
        _require(override_name, "override_name")
        context = f"delete_search_override({collection}, {override_name})"
        data = await self._request_json(
            "DELETE", self._override_path(collection, override_name), context
        )
        return _parse(data, DeleteSearchOverrideResponse.from_dict, context)
