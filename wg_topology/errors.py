"""Error types raised by the topology engine."""

from typing import Any, Dict, List, Optional


class TopologyError(ValueError):
    """Base class for topology generation errors."""

    field: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Structured form for presentation layers."""
        return {"error": type(self).__name__, "field": self.field, "message": str(self)}


class InvalidSeed(TopologyError):
    """Seed is missing, undecodable or shorter than the minimum length."""

    field = "seed"

    def __init__(self, length: int, minimum: int, reason: Optional[str] = None):
        self.length = length
        self.minimum = minimum
        self.reason = reason or f"seed must be at least {minimum} bytes, got {length}"
        super().__init__(f"Invalid seed: {self.reason}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"length": self.length, "minimum": self.minimum})
        return data


class InvalidSubnet(TopologyError):
    """Subnet text could not be parsed as a CIDR block."""

    field = "subnet"

    def __init__(self, value: str, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid subnet {value!r}: {reason}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"value": self.value, "reason": self.reason})
        return data


class SubnetExhausted(TopologyError):
    """Subnet has fewer usable host addresses than the topology needs."""

    field = "subnet"

    def __init__(self, subnet: str, requested: int, capacity: int):
        self.subnet = subnet
        self.requested = requested
        self.capacity = capacity
        super().__init__(
            f"Subnet {subnet} has {capacity} usable addresses, "
            f"{requested} required (server + {requested - 1} peers)"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "subnet": self.subnet,
            "requested": self.requested,
            "capacity": self.capacity,
        })
        return data


class InvalidParameter(TopologyError):
    """A scalar request parameter is out of range."""

    def __init__(self, field: str, value: Any, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"value": self.value, "reason": self.reason})
        return data


class ValidationAggregate(TopologyError):
    """All problems found while validating one request."""

    def __init__(self, errors: List[TopologyError]):
        self.errors = list(errors)
        summary = "; ".join(str(e) for e in self.errors)
        super().__init__(f"{len(self.errors)} validation error(s): {summary}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [e.to_dict() for e in self.errors]
        return data


class ConfigParseError(ValueError):
    """WireGuard configuration text is malformed."""

    def __init__(self, line_number: int, message: str):
        self.line_number = line_number
        super().__init__(f"line {line_number}: {message}")
