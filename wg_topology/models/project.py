"""Persisted project settings."""

import base64
import binascii
import json
import logging
import os
from pathlib import Path
from typing import List

import nacl.utils
from pydantic import BaseModel, ConfigDict, Field

from ..crypto import DEFAULT_SEED_SIZE, MIN_SEED_SIZE
from ..errors import InvalidSeed
from .request import TopologyRequest

logger = logging.getLogger(__name__)

DEFAULT_SEED_BITS = DEFAULT_SEED_SIZE * 8


def generate_seed(size_bits: int = DEFAULT_SEED_BITS) -> str:
    """
    Generate a new random seed.

    This is the only place randomness enters the project; everything else
    is derived from the returned value.

    Args:
        size_bits: Seed size in bits, a positive multiple of 8

    Returns:
        Base64-encoded seed
    """
    if size_bits <= 0 or size_bits % 8:
        raise ValueError(f"seed size must be a positive multiple of 8 bits, got {size_bits}")
    return base64.b64encode(nacl.utils.random(size_bits // 8)).decode('utf-8')


class ProjectSettings(BaseModel):
    """
    Settings of one WireGuard project.

    Stored as JSON next to the generated output. Values are immutable;
    edits produce a new instance.
    """
    model_config = ConfigDict(frozen=True)

    interface: str = Field(default="wg0", description="Interface name on the server")
    seed: str = Field(default_factory=generate_seed, repr=False, description="Base64-encoded seed")
    number_of_clients: int = Field(default=3, description="Number of client peers")
    subnet: str = Field(default="10.0.0.0/24", description="Virtual network CIDR")
    dns: str = Field(default="", description="DNS pushed to clients")
    endpoint: str = Field(default="remote.endpoint.net:51820", description="Public server endpoint")
    listen_port: int = Field(default=51820, description="Server listen port")
    allowed_ips: str = Field(default="0.0.0.0/0, ::/0", description="Client routed networks")
    use_last_address: bool = False
    use_preshared_keys: bool = False
    post_up: str = ""
    post_down: str = ""

    def seed_bytes(self) -> bytes:
        """Decode the stored seed."""
        try:
            return base64.b64decode(self.seed, validate=True)
        except (binascii.Error, ValueError):
            raise InvalidSeed(0, MIN_SEED_SIZE, "seed is not valid base64")

    def to_request(self) -> TopologyRequest:
        """Build the engine request for these settings."""
        return TopologyRequest(
            seed=self.seed_bytes(),
            subnet=self.subnet,
            peer_count=self.number_of_clients,
            listen_port=self.listen_port,
            endpoint=self.endpoint,
            allowed_ips=self.allowed_ips,
            dns=self.dns,
            use_last_address=self.use_last_address,
            use_preshared_keys=self.use_preshared_keys,
            post_up=self.post_up,
            post_down=self.post_down,
        )

    def with_new_seed(self, size_bits: int = DEFAULT_SEED_BITS) -> "ProjectSettings":
        """
        Return a copy with a freshly generated seed.

        Every config issued under the old seed stops matching.
        """
        return self.model_copy(update={"seed": generate_seed(size_bits)})

    def changed_fields(self, other: "ProjectSettings") -> List[str]:
        """Names of fields whose values differ between two snapshots."""
        return [
            name for name in type(self).model_fields
            if getattr(self, name) != getattr(other, name)
        ]


def load_settings(path: Path) -> ProjectSettings:
    """
    Load project settings from a JSON file.

    Args:
        path: Settings file

    Returns:
        ProjectSettings
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Project file not found: {path}")
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return ProjectSettings(**data)


def save_settings(settings: ProjectSettings, path: Path) -> Path:
    """
    Save project settings as JSON.

    The file holds the seed, so it is restricted to the owner.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    # The O_CREAT mode only applies to new files
    os.fchmod(fd, 0o600)
    with os.fdopen(fd, 'w', encoding='utf-8') as f:
        json.dump(settings.model_dump(mode='json'), f, indent=2)
        f.write('\n')
    logger.debug(f"Saved project settings to {path}")
    return path
