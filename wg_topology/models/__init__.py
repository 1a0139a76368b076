"""Data models for wg-topology."""

from .request import TopologyRequest
from .graph import Role, PeerReference, PeerNode, PeerGraph
from .project import ProjectSettings, generate_seed, load_settings, save_settings

__all__ = [
    "TopologyRequest",
    "Role",
    "PeerReference",
    "PeerNode",
    "PeerGraph",
    "ProjectSettings",
    "generate_seed",
    "load_settings",
    "save_settings",
]
