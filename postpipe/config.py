"""Configuration loading for postpipe (.postpipe.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .splitter import SEPARATOR

CONFIG_FILENAME = ".postpipe.yml"
DEFAULT_INCLUDE = ["*.md", "*.markdown"]


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class OutputConfig:
    """Where build artifacts are written, relative to the content root."""

    manifest: Optional[Path] = None
    posts_dir: Optional[Path] = None


@dataclass
class PostPipeConfig:
    """Represents the settings defined in .postpipe.yml."""

    root: Path
    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude_paths: List[str] = field(default_factory=list)
    separator: str = SEPARATOR
    max_workers: int = 1
    output: OutputConfig = field(default_factory=OutputConfig)


def load_config(config_path: Path) -> PostPipeConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PostPipeConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = PostPipeConfig(root=root)

    include = _as_str_list(data.get("include"))
    if include:
        config.include = include
    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    separator = _as_str(data.get("separator"))
    if separator is not None:
        if not separator.strip():
            raise ConfigError("separator must not be blank")
        config.separator = separator

    max_workers = _as_int(data.get("max_workers"))
    if max_workers is not None:
        if max_workers < 1:
            raise ConfigError("max_workers must be at least 1")
        config.max_workers = max_workers

    output_data = _as_dict(data.get("output"))
    if output_data:
        manifest = _as_str(output_data.get("manifest"))
        posts_dir = _as_str(output_data.get("posts_dir"))
        config.output = OutputConfig(
            manifest=root / manifest if manifest else None,
            posts_dir=root / posts_dir if posts_dir else None,
        )

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
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
    return str(value) if isinstance(value, (str, int, float, bool)) else None


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


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "OutputConfig", "PostPipeConfig", "load_config"]
