"""WireGuard configuration text: writer, reader and file output."""

from .writer import write_config, write_config_to
from .parser import WireGuardConfig, parse_config
from .output import config_filename, preview_label, render_preview, write_configs

__all__ = [
    "write_config",
    "write_config_to",
    "WireGuardConfig",
    "parse_config",
    "config_filename",
    "preview_label",
    "render_preview",
    "write_configs",
]
