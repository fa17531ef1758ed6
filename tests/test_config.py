"""Tests for codemedic.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from codemedic.config import CodeMedicConfig, ConfigError, LLMConfig, ServiceConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, CodeMedicConfig)
    assert config.root == tmp_path.resolve()
    assert config.llm == LLMConfig()
    assert config.storage.data_dir == tmp_path.resolve() / "data"
    assert config.storage.upload_dir == tmp_path.resolve() / "uploads"
    assert config.service == ServiceConfig()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".codemedic.yml"
    config_file.write_text(
        """
llm:
  model: "gpt-4o-mini"
  base_url: "http://localhost:12434/engines/v1"
  api_key: "test-key"
  request_timeout: 45
storage:
  data_dir: "var/projects"
  upload_dir: "var/uploads"
service:
  max_upload_files: 5
  max_upload_bytes: 1024
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.llm == LLMConfig(
        model="gpt-4o-mini",
        base_url="http://localhost:12434/engines/v1",
        api_key="test-key",
        request_timeout=45.0,
    )
    assert config.storage.data_dir == tmp_path.resolve() / "var" / "projects"
    assert config.storage.upload_dir == tmp_path.resolve() / "var" / "uploads"
    assert config.service == ServiceConfig(max_upload_files=5, max_upload_bytes=1024)


def test_load_config_ignores_wrongly_typed_values(tmp_path: Path) -> None:
    (tmp_path / ".codemedic.yml").write_text(
        "llm: [not, a, mapping]\nservice:\n  max_upload_files: many\n", encoding="utf-8"
    )

    config = load_config(tmp_path)

    assert config.llm == LLMConfig()
    assert config.service.max_upload_files == 20


def test_load_config_accepts_empty_file(tmp_path: Path) -> None:
    (tmp_path / ".codemedic.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).llm == LLMConfig()


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".codemedic.yml").write_text("- one\n- two\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_reports_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".codemedic.yml").write_text("llm: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)
