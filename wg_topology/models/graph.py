"""Peer graph models produced by the topology builder."""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from ..crypto import KeyPair


class Role(str, Enum):
    """Role of a peer in the hub-and-spoke topology."""
    SERVER = "server"
    CLIENT = "client"


class PeerReference(BaseModel):
    """One [Peer] block emitted by a node."""
    model_config = ConfigDict(frozen=True)

    public_key: bytes = Field(..., description="Remote peer public key")
    preshared_key: Optional[bytes] = Field(None, repr=False, description="Pairing preshared key")
    allowed_ips: str = Field(..., description="CIDR list routed to this peer")
    endpoint: Optional[str] = Field(None, description="host:port, client to server only")


class PeerNode(BaseModel):
    """
    One participant of the graph.

    `address` is a bare host address; `prefix_length` is the prefix the
    interface is configured with (subnet prefix on the server, host
    prefix on clients).
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="0 for the server, 1..N for clients")
    role: Role
    address: str = Field(..., description="Host address inside the subnet")
    prefix_length: int = Field(..., description="Prefix length emitted in Address")
    keys: KeyPair
    preshared_key: Optional[bytes] = Field(None, repr=False, description="Pairing PSK (clients only)")
    peers: Tuple[PeerReference, ...] = Field(default_factory=tuple)
    listen_port: Optional[int] = Field(None, description="Server only")
    dns: str = ""
    post_up: str = ""
    post_down: str = ""

    @property
    def is_server(self) -> bool:
        return self.role == Role.SERVER


class PeerGraph(BaseModel):
    """Server node plus its clients in allocation order."""
    model_config = ConfigDict(frozen=True)

    server: PeerNode
    clients: Tuple[PeerNode, ...] = Field(default_factory=tuple)

    def nodes(self) -> List[PeerNode]:
        """All nodes, server first."""
        return [self.server, *self.clients]

    def get(self, node_id: int) -> PeerNode:
        """Look up a node by id."""
        for node in self.nodes():
            if node.id == node_id:
                return node
        raise KeyError(f"No peer with id {node_id}")
