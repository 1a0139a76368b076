"""Reader for WireGuard .conf text."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..errors import ConfigParseError

SECTIONS = ("interface", "peer")


@dataclass
class WireGuardConfig:
    """Parsed configuration: interface directives and one dict per peer."""
    interface: Dict[str, str] = field(default_factory=dict)
    peers: List[Dict[str, str]] = field(default_factory=list)

    def peer_by_public_key(self, public_key: str) -> Optional[Dict[str, str]]:
        for peer in self.peers:
            if peer.get("PublicKey") == public_key:
                return peer
        return None


# Directives wg-quick allows more than once, with the separator used to join them
REPEATABLE = {
    "Address": ", ",
    "AllowedIPs": ", ",
    "DNS": ", ",
    "PreUp": "; ",
    "PostUp": "; ",
    "PreDown": "; ",
    "PostDown": "; ",
}


# Canonical spelling of the directives this project emits
_KEY_NAMES = {
    name.lower(): name
    for name in (
        "PrivateKey", "Address", "ListenPort", "DNS", "PostUp", "PostDown",
        "PublicKey", "PresharedKey", "AllowedIPs", "Endpoint",
        "PersistentKeepalive", "MTU", "Table", "FwMark",
        "PreUp", "PreDown", "SaveConfig",
    )
}


def parse_config(text: str) -> WireGuardConfig:
    """
    Parse wg-quick configuration text.

    Section and key names are case-insensitive; keys are returned in
    their canonical spelling. Comments start with '#' or ';'. Repeated
    Address, AllowedIPs and DNS lines are joined with ", ", repeated hook
    lines with "; "; any other key seen twice keeps the last value.

    Args:
        text: Configuration text

    Returns:
        WireGuardConfig

    Raises:
        ConfigParseError: On unknown sections, keys outside a section or
            lines that are not key = value
    """
    config = WireGuardConfig()
    current: Optional[Dict[str, str]] = None
    seen_interface = False

    for number, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line[0] in "#;":
            continue

        if line.startswith("[") and line.endswith("]"):
            section = line[1:-1].strip().lower()
            if section not in SECTIONS:
                raise ConfigParseError(number, f"unknown section [{line[1:-1]}]")
            if section == "interface":
                if seen_interface:
                    raise ConfigParseError(number, "duplicate [Interface] section")
                seen_interface = True
                current = config.interface
            else:
                current = {}
                config.peers.append(current)
            continue

        if "=" not in line:
            raise ConfigParseError(number, f"expected 'Key = Value', got {line!r}")
        if current is None:
            raise ConfigParseError(number, "directive outside of a section")

        key, value = line.split("=", 1)
        key = _KEY_NAMES.get(key.strip().lower(), key.strip())
        value = value.strip()
        if key in current and key in REPEATABLE:
            current[key] = current[key] + REPEATABLE[key] + value
        else:
            current[key] = value

    if not seen_interface:
        raise ConfigParseError(0, "missing [Interface] section")
    return config
