"""Naming, preview and file output for generated configs."""

import logging
import os
from pathlib import Path
from typing import Dict, List

from ..models import PeerGraph, PeerNode
from .writer import write_config_to, write_config


logger = logging.getLogger(__name__)

SERVER_FILENAME = "server.conf"


def config_filename(node: PeerNode) -> str:
    """File name for a node: server.conf or peer-<id>.conf."""
    if node.is_server:
        return SERVER_FILENAME
    return f"peer-{node.id}.conf"


def preview_label(node: PeerNode) -> str:
    """Display label for a node: Server or Peer <id>."""
    if node.is_server:
        return "Server"
    return f"Peer {node.id}"


def render_preview(graph: PeerGraph) -> Dict[str, str]:
    """Render every node, keyed by display label, server first."""
    return {preview_label(node): write_config(node) for node in graph.nodes()}


def write_configs(graph: PeerGraph, output_dir: Path) -> List[Path]:
    """
    Write one config file per node into a directory.

    Files hold private keys and are restricted to the owner. Existing
    files with the same names are replaced.

    Args:
        graph: Built topology
        output_dir: Destination directory, created if missing

    Returns:
        Paths written, server first
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for node in graph.nodes():
        path = output_dir / config_filename(node)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        os.fchmod(fd, 0o600)
        with os.fdopen(fd, 'wb') as f:
            write_config_to(node, f)
        logger.info(f"Wrote {preview_label(node)} config to {path}")
        paths.append(path)

    return paths
