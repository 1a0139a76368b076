"""Deterministic WireGuard topology and configuration generator."""

from .errors import (
    TopologyError,
    InvalidSeed,
    InvalidSubnet,
    SubnetExhausted,
    InvalidParameter,
    ValidationAggregate,
    ConfigParseError,
)
from .models import TopologyRequest, PeerGraph, PeerNode, PeerReference, Role, ProjectSettings
from .topology import build_topology
from .config import write_config

__version__ = "0.1.0"

__all__ = [
    "TopologyError",
    "InvalidSeed",
    "InvalidSubnet",
    "SubnetExhausted",
    "InvalidParameter",
    "ValidationAggregate",
    "ConfigParseError",
    "TopologyRequest",
    "PeerGraph",
    "PeerNode",
    "PeerReference",
    "Role",
    "ProjectSettings",
    "build_topology",
    "write_config",
]
