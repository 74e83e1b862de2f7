"""設定モデルとローダーのユニットテスト"""

from pathlib import Path

import pytest
from k1s0_typesense.config import DEFAULT_IMPORT_BATCH_SIZE, Node, TypesenseConfig, load_config
from k1s0_typesense.exceptions import TypesenseClientError, TypesenseClientErrorCodes
from k1s0_typesense.models import ImportType
from pydantic import ValidationError


def test_defaults() -> None:
    """インポートの既定値が batch_size 40 / create であること。"""
    config = TypesenseConfig(nodes=[Node(host="localhost")])
    assert config.import_batch_size == DEFAULT_IMPORT_BATCH_SIZE == 40
    assert config.import_type == ImportType.CREATE
    assert config.nodes[0].base_url == "http://localhost:8108"


def test_nodes_required() -> None:
    with pytest.raises(ValidationError):
        TypesenseConfig(nodes=[])


def test_batch_size_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        TypesenseConfig(nodes=[Node(host="localhost")], import_batch_size=0)


def test_load_config_with_section(tmp_path: Path) -> None:
    """typesense セクションを持つ YAML を読み込めること。"""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "typesense:\n"
        "  api_key: xyz\n"
        "  import_type: upsert\n"
        "  nodes:\n"
        "    - host: ts-1\n"
        "      port: 443\n"
        "      protocol: https\n"
        "    - host: ts-2\n"
    )
    config = load_config(config_file)
    assert config.api_key == "xyz"
    assert config.import_type == ImportType.UPSERT
    assert [n.base_url for n in config.nodes] == ["https://ts-1:443", "http://ts-2:8108"]


def test_load_config_flat(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text("nodes:\n  - host: localhost\nimport_batch_size: 100\n")
    config = load_config(config_file)
    assert config.import_batch_size == 100


def test_load_config_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(TypesenseClientError) as exc_info:
        load_config(tmp_path / "missing.yaml")
    assert exc_info.value.code == TypesenseClientErrorCodes.CONFIG_ERROR


def test_load_config_invalid_yaml(tmp_path: Path) -> None:
    bad_file = tmp_path / "bad.yaml"
    bad_file.write_text("nodes: {invalid: yaml: content:\n")
    with pytest.raises(TypesenseClientError) as exc_info:
        load_config(bad_file)
    assert exc_info.value.code == TypesenseClientErrorCodes.CONFIG_ERROR


def test_load_config_validation_error(tmp_path: Path) -> None:
    """ポート範囲外で CONFIG_ERROR になること。"""
    bad_file = tmp_path / "bad.yaml"
    bad_file.write_text("nodes:\n  - host: localhost\n    port: 99999\n")
    with pytest.raises(TypesenseClientError) as exc_info:
        load_config(bad_file)
    assert exc_info.value.code == TypesenseClientErrorCodes.CONFIG_ERROR


def test_load_config_non_mapping(tmp_path: Path) -> None:
    bad_file = tmp_path / "list.yaml"
    bad_file.write_text("- a\n- b\n")
    with pytest.raises(TypesenseClientError) as exc_info:
        load_config(bad_file)
    assert exc_info.value.code == TypesenseClientErrorCodes.CONFIG_ERROR
