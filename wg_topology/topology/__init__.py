"""Address allocation and peer graph assembly."""

from .allocator import Allocation, parse_subnet, usable_range, capacity, allocate
from .builder import validate_request, build_topology

__all__ = [
    "Allocation",
    "parse_subnet",
    "usable_range",
    "capacity",
    "allocate",
    "validate_request",
    "build_topology",
]
