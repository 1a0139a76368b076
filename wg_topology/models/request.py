"""Topology request model."""

from pydantic import BaseModel, ConfigDict, Field


class TopologyRequest(BaseModel):
    """
    Immutable input for one generation run.

    Built once per call from persisted project settings; the engine never
    mutates it. Range checks happen in the builder so that every problem
    can be reported together.
    """
    model_config = ConfigDict(frozen=True)

    seed: bytes = Field(..., repr=False, description="Raw seed bytes, never logged")
    subnet: str = Field(..., description="CIDR block of the virtual network, e.g. 10.0.0.0/24")
    peer_count: int = Field(..., description="Number of client peers")
    listen_port: int = Field(default=51820, description="Server UDP listen port")
    endpoint: str = Field(default="", description="host:port advertised to clients")
    allowed_ips: str = Field(default="0.0.0.0/0, ::/0", description="Routes clients send through the tunnel")
    dns: str = Field(default="", description="DNS servers pushed to clients")
    use_last_address: bool = Field(default=False, description="Server takes the last usable address")
    use_preshared_keys: bool = Field(default=False, description="Add a preshared key to every pairing")
    post_up: str = Field(default="", description="Server PostUp hook, passed through verbatim")
    post_down: str = Field(default="", description="Server PostDown hook, passed through verbatim")
