from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from JsonlViewer.config.export import ExportConfig, check_export, load_export
from JsonlViewer.config.runtime import RuntimeConfig, check_runtime, load_runtime
from JsonlViewer.config.viewer import ViewerConfig, check_viewer, load_viewer

DEFAULT_CONFIG_PATH = Path("config/default.yml")


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    viewer: ViewerConfig
    export: ExportConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse a normalized mapping into AppConfig."""
    runtime = load_runtime(raw)
    viewer = load_viewer(raw)
    export = load_export(raw)

    check_runtime(runtime)
    check_viewer(viewer)
    check_export(export)

    return AppConfig(runtime=runtime, viewer=viewer, export=export)


def load_config(path: Path) -> AppConfig:
    """Load a YAML config file without default merge."""
    return load_config_with_defaults(path, default_path=path)


def load_config_with_defaults(config_path: Path, default_path: Path = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load config by merging an optional override over the defaults file."""
    base = parse_yaml(default_path.read_text(encoding="utf-8"))
    if config_path == default_path:
        return parse_config_dict(base)
    override = parse_yaml(config_path.read_text(encoding="utf-8"))
    return parse_config_dict(merge_config_dicts(base, override))


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings; override wins on scalar conflicts."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
