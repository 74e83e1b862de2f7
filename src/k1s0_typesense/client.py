"""TypesenseClient 抽象基底クラス"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from .models import (
    ApiKey,
    CollectionResponse,
    CollectionSchema,
    DeleteKeyResponse,
    DeleteSearchOverrideResponse,
    ExportParameters,
    FilterDeleteResponse,
    ImportOutcome,
    ImportType,
    KeyResponse,
    ListKeysResponse,
    ListSearchOverridesResponse,
    SearchOverride,
    SearchParameters,
    SearchResult,
)

D = TypeVar("D")


class TypesenseClient(ABC, Generic[D]):
    """Typesense クライアント抽象基底クラス。

    D はドキュメント型。ドキュメントを返す操作はこの型に変換して返す。
    """

    # --- collections ---

    @abstractmethod
    async def create_collection(self, schema: CollectionSchema) -> CollectionResponse:
        """スキーマからコレクションを作成する。"""
        ...

    @abstractmethod
    async def retrieve_collection(self, name: str) -> CollectionResponse:
        """コレクションを取得する。"""
        ...

    @abstractmethod
    async def retrieve_collections(self) -> list[CollectionResponse]:
        """全コレクションを取得する。"""
        ...

    @abstractmethod
    async def delete_collection(self, name: str) -> CollectionResponse:
        """コレクションを削除する。"""
        ...

    # --- documents ---

    @abstractmethod
    async def create_document(self, collection: str, document: Any) -> D:
        """ドキュメントを作成する。"""
        ...

    @abstractmethod
    async def upsert_document(self, collection: str, document: Any) -> D:
        """ドキュメントが存在しなければ作成し、存在すれば置き換える。"""
        ...

    @abstractmethod
    async def retrieve_document(self, collection: str, document_id: str) -> D:
        """ID でドキュメントを取得する。"""
        ...

    @abstractmethod
    async def update_document(self, collection: str, document_id: str, document: Any) -> D:
        """ドキュメントを部分更新する。"""
        ...

    @abstractmethod
    async def delete_document(self, collection: str, document_id: str) -> D:
        """ドキュメントを削除し、削除したドキュメントを返す。"""
        ...

    @abstractmethod
    async def delete_documents(
        self,
        collection: str,
        filter_by: str,
        batch_size: int | None = None,
    ) -> FilterDeleteResponse:
        """フィルタに一致するドキュメントを削除する。"""
        ...

    @abstractmethod
    async def search(self, collection: str, parameters: SearchParameters) -> SearchResult[D]:
        """コレクションを検索する。"""
        ...

    @abstractmethod
    async def import_documents(
        self,
        collection: str,
        documents: Sequence[Any],
        batch_size: int | None = None,
        import_type: ImportType | str | None = None,
    ) -> list[ImportOutcome]:
        """ドキュメントをバッチでインポートする。

        個々のドキュメントの失敗は例外ではなく ImportOutcome として返す。
        """
        ...

    @abstractmethod
    async def export_documents(
        self,
        collection: str,
        parameters: ExportParameters | None = None,
    ) -> list[D]:
        """コレクションのドキュメントをエクスポートする。"""
        ...

    # --- keys ---

    @abstractmethod
    async def create_key(self, key: ApiKey) -> KeyResponse:
        """API キーを作成する。"""
        ...

    @abstractmethod
    async def retrieve_key(self, key_id: int) -> KeyResponse:
        """API キーを取得する。"""
        ...

    @abstractmethod
    async def delete_key(self, key_id: int) -> DeleteKeyResponse:
        """API キーを削除する。"""
        ...

    @abstractmethod
    async def list_keys(self) -> ListKeysResponse:
        """API キー一覧を取得する。"""
        ...

    # --- overrides ---

    @abstractmethod
    async def upsert_search_override(
        self,
        collection: str,
        override_name: str,
        search_override: SearchOverride,
    ) -> SearchOverride:
        """検索結果オーバーライドを作成または更新する。"""
        ...

    @abstractmethod
    async def list_search_overrides(self, collection: str) -> ListSearchOverridesResponse:
        """コレクションのオーバーライド一覧を取得する。"""
        ...

    @abstractmethod
    async def retrieve_search_override(
        self,
        collection: str,
        override_name: str,
    ) -> SearchOverride:
        """オーバーライドを取得する。"""
        ...

    @abstractmethod
    async def delete_search_override(
        self,
        collection: str,
        override_name: str,
    ) -> DeleteSearchOverrideResponse:
        """オーバーライドを削除する。"""
        ...
