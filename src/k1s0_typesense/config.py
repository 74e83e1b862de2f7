"""Typesense クライアント設定（pydantic BaseModel）"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import TypesenseClientError, TypesenseClientErrorCodes
from .models import ImportType

DEFAULT_IMPORT_BATCH_SIZE = 40


class Node(BaseModel):
    """Typesense ノード接続先。"""

    host: str
    port: int = Field(default=8108, ge=1, le=65535)
    protocol: Literal["http", "https"] = "http"

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"


class TypesenseConfig(BaseModel):
    """Typesense クライアント設定。

    import_batch_size と import_type は import_documents で
    引数が省略された場合の既定値として使われる。
    """

    nodes: list[Node] = Field(min_length=1)
    api_key: str = ""
    connection_timeout_seconds: float = Field(default=10.0, gt=0)
    import_batch_size: int = Field(default=DEFAULT_IMPORT_BATCH_SIZE, ge=1)
    import_type: ImportType = ImportType.CREATE


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TypesenseClientError(
            code=TypesenseClientErrorCodes.CONFIG_ERROR,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise TypesenseClientError(
            code=TypesenseClientErrorCodes.CONFIG_ERROR,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if not isinstance(data, dict):
        raise TypesenseClientError(
            code=TypesenseClientErrorCodes.CONFIG_ERROR,
            message=f"Config root must be a mapping: {path}",
        )
    return data


def load_config(path: Path) -> TypesenseConfig:
    """YAML ファイルを読み込んで TypesenseConfig を返す。

    ファイルは最上位に typesense セクションを持つ形式と、
    設定項目を直接並べた形式の両方を受け付ける。
    """
    data = _read_yaml(path)
    section = data.get("typesense", data)
    try:
        return TypesenseConfig.model_validate(section)
    except ValidationError as e:
        raise TypesenseClientError(
            code=TypesenseClientErrorCodes.CONFIG_ERROR,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
