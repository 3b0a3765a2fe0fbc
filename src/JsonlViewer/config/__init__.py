from __future__ import annotations

"""Public configuration API for JsonlViewer."""

from JsonlViewer.config.app import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    load_config,
    load_config_with_defaults,
    merge_config_dicts,
    parse_config_dict,
)
from JsonlViewer.config.export import ExportConfig
from JsonlViewer.config.runtime import RuntimeConfig
from JsonlViewer.config.viewer import ViewerConfig

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "RuntimeConfig",
    "ViewerConfig",
    "ExportConfig",
    "AppConfig",
    "load_config",
    "load_config_with_defaults",
    "merge_config_dicts",
    "parse_config_dict",
]
