"""Configuration loading for codemedic (.codemedic.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".codemedic.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Model backend settings; unset values fall back to the environment."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    request_timeout: Optional[float] = None


@dataclass
class StorageConfig:
    data_dir: Path = Path("data")
    upload_dir: Path = Path("uploads")


@dataclass
class ServiceConfig:
    max_upload_files: int = 20
    max_upload_bytes: int = 10 * 1024 * 1024


@dataclass
class CodeMedicConfig:
    """Represents the settings defined in .codemedic.yml."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)


def load_config(config_path: Path) -> CodeMedicConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return CodeMedicConfig(
            root=root,
            storage=StorageConfig(data_dir=root / "data", upload_dir=root / "uploads"),
        )

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    llm_data = _as_dict(data.get("llm"))
    llm = LLMConfig(
        model=_as_str(llm_data.get("model")),
        base_url=_as_str(llm_data.get("base_url")),
        api_key=_as_str(llm_data.get("api_key")),
        request_timeout=_as_float(llm_data.get("request_timeout")),
    )

    storage_data = _as_dict(data.get("storage"))
    storage = StorageConfig(
        data_dir=root / (_as_str(storage_data.get("data_dir")) or "data"),
        upload_dir=root / (_as_str(storage_data.get("upload_dir")) or "uploads"),
    )

    service_data = _as_dict(data.get("service"))
    defaults = ServiceConfig()
    service = ServiceConfig(
        max_upload_files=_as_int(service_data.get("max_upload_files")) or defaults.max_upload_files,
        max_upload_bytes=_as_int(service_data.get("max_upload_bytes")) or defaults.max_upload_bytes,
    )

    return CodeMedicConfig(root=root, llm=llm, storage=storage, service=service)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


__all__ = [
    "CONFIG_FILENAME",
    "CodeMedicConfig",
    "ConfigError",
    "LLMConfig",
    "ServiceConfig",
    "StorageConfig",
    "load_config",
]
