"""Typesense クライアントデータモデル"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ImportType(StrEnum):
    """インポートモード。import リクエストの action パラメータになる。"""

    CREATE = "create"
    UPDATE = "update"
    UPSERT = "upsert"
    EMPLACE = "emplace"


# --- collections ---


@dataclass
class Field:
    """コレクションのフィールド定義。"""

    name: str
    type: str
    facet: bool = False
    optional: bool = False
    index: bool = True
    sort: bool | None = None
    locale: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "facet": self.facet,
            "optional": self.optional,
            "index": self.index,
        }
        if self.sort is not None:
            data["sort"] = self.sort
        if self.locale:
            data["locale"] = self.locale
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Field:
        return cls(
            name=data["name"],
            type=data["type"],
            facet=data.get("facet", False),
            optional=data.get("optional", False),
            index=data.get("index", True),
            sort=data.get("sort"),
            locale=data.get("locale", ""),
        )


@dataclass
class CollectionSchema:
    """コレクション作成用スキーマ。"""

    name: str
    fields: list[Field] = field(default_factory=list)
    default_sorting_field: str = ""
    token_separators: list[str] = field(default_factory=list)
    symbols_to_index: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
        }
        if self.default_sorting_field:
            data["default_sorting_field"] = self.default_sorting_field
        if self.token_separators:
            data["token_separators"] = list(self.token_separators)
        if self.symbols_to_index:
            data["symbols_to_index"] = list(self.symbols_to_index)
        return data


@dataclass
class CollectionResponse:
    """サーバーから返されるコレクション情報。"""

    name: str
    num_documents: int
    fields: list[Field]
    default_sorting_field: str = ""
    created_at: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CollectionResponse:
        """API レスポンス辞書から CollectionResponse を生成する。"""
        return cls(
            name=data["name"],
            num_documents=data.get("num_documents", 0),
            fields=[Field.from_dict(f) for f in data.get("fields", [])],
            default_sorting_field=data.get("default_sorting_field", ""),
            created_at=data.get("created_at", 0),
        )


# --- documents ---


@dataclass
class ImportOutcome:
    """ドキュメント単位のインポート結果。

    position は呼び出し元が渡したドキュメント列での 0 始まりの位置。
    id はインポート後に初めて決まる場合があるため、結果は位置で対応付ける。
    """

    position: int
    success: bool
    error: str | None = None
    error_code: str | None = None
    document: str | None = None


@dataclass
class FilterDeleteResponse:
    """フィルタ指定削除のレスポンス。"""

    num_deleted: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FilterDeleteResponse:
        return cls(num_deleted=data.get("num_deleted", 0))


@dataclass
class ExportParameters:
    """エクスポート時の追加クエリパラメータ。"""

    filter_by: str = ""
    include_fields: list[str] = field(default_factory=list)
    exclude_fields: list[str] = field(default_factory=list)

    def to_params(self) -> dict[str, str]:
        params: dict[str, str] = {}
        if self.filter_by:
            params["filter_by"] = self.filter_by
        if self.include_fields:
            params["include_fields"] = ",".join(self.include_fields)
        if self.exclude_fields:
            params["exclude_fields"] = ",".join(self.exclude_fields)
        return params


# --- search ---


@dataclass
class SearchParameters:
    """検索パラメータ。

    extra には個別フィールドとして定義していないパラメータをそのまま渡せる。
    """

    q: str
    query_by: str
    filter_by: str = ""
    sort_by: str = ""
    facet_by: str = ""
    include_fields: list[str] = field(default_factory=list)
    exclude_fields: list[str] = field(default_factory=list)
    page: int | None = None
    per_page: int | None = None
    max_facet_values: int | None = None
    num_typos: int | None = None
    prefix: bool | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_params(self) -> dict[str, str]:
        params: dict[str, Any] = {"q": self.q, "query_by": self.query_by}
        for name in ("filter_by", "sort_by", "facet_by"):
            value = getattr(self, name)
            if value:
                params[name] = value
        if self.include_fields:
            params["include_fields"] = ",".join(self.include_fields)
        if self.exclude_fields:
            params["exclude_fields"] = ",".join(self.exclude_fields)
        for name in ("page", "per_page", "max_facet_values", "num_typos", "prefix"):
            value = getattr(self, name)
            if value is not None:
                params[name] = value
        params.update(self.extra)
        return {k: _param_value(v) for k, v in params.items()}


def _param_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass
class Highlight:
    """ヒットしたフィールドのハイライト。"""

    field: str
    snippet: str = ""
    matched_tokens: list[Any] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Highlight:
        return cls(
            field=data.get("field", ""),
            snippet=data.get("snippet", ""),
            matched_tokens=data.get("matched_tokens", []),
        )


@dataclass
class SearchHit(Generic[T]):
    """検索ヒット。"""

    document: T
    highlights: list[Highlight] = field(default_factory=list)
    text_match: int | None = None


@dataclass
class FacetCountValue:
    """ファセットの値ごとの件数。"""

    value: str
    count: int
    highlighted: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FacetCountValue:
        return cls(
            value=data.get("value", ""),
            count=data.get("count", 0),
            highlighted=data.get("highlighted", ""),
        )


@dataclass
class FacetCount:
    """フィールドごとのファセット集計。"""

    field_name: str
    counts: list[FacetCountValue] = field(default_factory=list)
    stats: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FacetCount:
        return cls(
            field_name=data.get("field_name", ""),
            counts=[FacetCountValue.from_dict(c) for c in data.get("counts", [])],
            stats=data.get("stats", {}),
        )


@dataclass
class SearchResult(Generic[T]):
    """検索結果。"""

    found: int
    out_of: int
    page: int
    search_time_ms: int
    hits: list[SearchHit[T]] = field(default_factory=list)
    facet_counts: list[FacetCount] = field(default_factory=list)


# --- keys ---


@dataclass
class ApiKey:
    """作成する API キーの定義。"""

    description: str
    actions: list[str]
    collections: list[str]
    value: str | None = None
    expires_at: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "description": self.description,
            "actions": list(self.actions),
            "collections": list(self.collections),
        }
        if self.value is not None:
            data["value"] = self.value
        if self.expires_at is not None:
            data["expires_at"] = self.expires_at
        return data


@dataclass
class KeyResponse:
    """API キー情報。

    value は作成時のみ返る。取得時は value_prefix のみ。
    """

    id: int
    description: str
    actions: list[str]
    collections: list[str]
    value: str | None = None
    value_prefix: str | None = None
    expires_at: int | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KeyResponse:
        return cls(
            id=int(data["id"]),
            description=data.get("description", ""),
            actions=data.get("actions", []),
            collections=data.get("collections", []),
            value=data.get("value"),
            value_prefix=data.get("value_prefix"),
            expires_at=data.get("expires_at"),
        )


@dataclass
class ListKeysResponse:
    """API キー一覧。"""

    keys: list[KeyResponse]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ListKeysResponse:
        return cls(keys=[KeyResponse.from_dict(k) for k in data.get("keys", [])])


@dataclass
class DeleteKeyResponse:
    """API キー削除レスポンス。"""

    id: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeleteKeyResponse:
        return cls(id=int(data["id"]))


# --- overrides ---


@dataclass
class OverrideRule:
    """オーバーライドが適用されるクエリ条件。"""

    query: str
    match: str = "exact"  # "exact" or "contains"

    def to_dict(self) -> dict[str, Any]:
        return {"query": self.query, "match": self.match}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> OverrideRule:
        return cls(query=data.get("query", ""), match=data.get("match", "exact"))


@dataclass
class OverrideInclude:
    """指定位置に固定表示するドキュメント。"""

    id: str
    position: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "position": self.position}


@dataclass
class OverrideExclude:
    """結果から除外するドキュメント。"""

    id: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id}


@dataclass
class SearchOverride:
    """検索結果オーバーライド。id はサーバーから返された場合のみ設定される。"""

    rule: OverrideRule
    includes: list[OverrideInclude] = field(default_factory=list)
    excludes: list[OverrideExclude] = field(default_factory=list)
    filter_by: str = ""
    remove_matched_tokens: bool | None = None
    id: str = ""

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"rule": self.rule.to_dict()}
        if self.includes:
            data["includes"] = [i.to_dict() for i in self.includes]
        if self.excludes:
            data["excludes"] = [e.to_dict() for e in self.excludes]
        if self.filter_by:
            data["filter_by"] = self.filter_by
        if self.remove_matched_tokens is not None:
            data["remove_matched_tokens"] = self.remove_matched_tokens
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SearchOverride:
        return cls(
            rule=OverrideRule.from_dict(data.get("rule", {})),
            includes=[
                OverrideInclude(id=i["id"], position=i["position"])
                for i in data.get("includes", [])
            ],
            excludes=[OverrideExclude(id=e["id"]) for e in data.get("excludes", [])],
            filter_by=data.get("filter_by", ""),
            remove_matched_tokens=data.get("remove_matched_tokens"),
            id=data.get("id", ""),
        )


@dataclass
class ListSearchOverridesResponse:
    """オーバーライド一覧。"""

    overrides: list[SearchOverride]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ListSearchOverridesResponse:
        return cls(
            overrides=[SearchOverride.from_dict(o) for o in data.get("overrides", [])]
        )


@dataclass
class DeleteSearchOverrideResponse:
    """オーバーライド削除レスポンス。"""

    id: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DeleteSearchOverrideResponse:
        return cls(id=data["id"])
