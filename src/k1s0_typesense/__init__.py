"""k1s0 typesense client library."""

from .batch import BatchPlan, BatchUnit, DocumentBatcher
from .client import TypesenseClient
from .config import Node, TypesenseConfig, load_config
from .exceptions import TypesenseClientError, TypesenseClientErrorCodes
from .http_client import HttpTypesenseClient
from .logger import new_logger
from .models import (
    ApiKey,
    CollectionResponse,
    CollectionSchema,
    DeleteKeyResponse,
    DeleteSearchOverrideResponse,
    ExportParameters,
    FacetCount,
    FacetCountValue,
    Field,
    FilterDeleteResponse,
    Highlight,
    ImportOutcome,
    ImportType,
    KeyResponse,
    ListKeysResponse,
    ListSearchOverridesResponse,
    OverrideExclude,
    OverrideInclude,
    OverrideRule,
    SearchHit,
    SearchOverride,
    SearchParameters,
    SearchResult,
)
from .serializer import Document, JsonSerializer
from .transport import HttpxTransport, Transport, TransportResponse

__all__ = [
    "TypesenseClient",
    "HttpTypesenseClient",
    "TypesenseConfig",
    "Node",
    "load_config",
    "new_logger",
    "Transport",
    "HttpxTransport",
    "TransportResponse",
    "Document",
    "JsonSerializer",
    "BatchPlan",
    "BatchUnit",
    "DocumentBatcher",
    "ImportOutcome",
    "ImportType",
    "ExportParameters",
    "FilterDeleteResponse",
    "Field",
    "CollectionSchema",
    "CollectionResponse",
    "SearchParameters",
    "SearchResult",
    "SearchHit",
    "Highlight",
    "FacetCount",
    "FacetCountValue",
    "ApiKey",
    "KeyResponse",
    "ListKeysResponse",
    "DeleteKeyResponse",
    "OverrideRule",
    "OverrideInclude",
    "OverrideExclude",
    "SearchOverride",
    "ListSearchOverridesResponse",
    "DeleteSearchOverrideResponse",
    "TypesenseClientError",
    "TypesenseClientErrorCodes",
]
