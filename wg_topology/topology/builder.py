"""Topology builder: assembles the server/client peer graph."""

import logging
from typing import List, Optional

from ..crypto import KeyPair, check_seed, derive_keypair, derive_preshared_key
from ..errors import (
    InvalidParameter,
    InvalidSeed,
    InvalidSubnet,
    SubnetExhausted,
    TopologyError,
    ValidationAggregate,
)
from ..models import PeerGraph, PeerNode, PeerReference, Role, TopologyRequest
from .allocator import IPAddress, allocate, capacity, host_prefix_length, parse_subnet


logger = logging.getLogger(__name__)

SERVER_INDEX = 0

# Free-text fields written verbatim into `Key = value` lines
TEXT_FIELDS = ("endpoint", "allowed_ips", "dns", "post_up", "post_down")


def validate_request(request: TopologyRequest) -> List[TopologyError]:
    """
    Collect every problem with a request.

    Args:
        request: Request to check

    Returns:
        List of errors, empty if the request can be built
    """
    errors: List[TopologyError] = []

    try:
        check_seed(request.seed)
    except InvalidSeed as e:
        errors.append(e)

    if request.peer_count < 0:
        errors.append(InvalidParameter("peer_count", request.peer_count, "must be 0 or greater"))

    if not 1 <= request.listen_port <= 65535:
        errors.append(InvalidParameter("listen_port", request.listen_port, "must be in 1..65535"))

    try:
        network = parse_subnet(request.subnet)
    except InvalidSubnet as e:
        errors.append(e)
    else:
        required = max(request.peer_count, 0) + 1
        available = capacity(network)
        if required > available:
            errors.append(SubnetExhausted(str(network), required, available))

    for name in TEXT_FIELDS:
        value = getattr(request, name)
        if "\n" in value or "\r" in value:
            errors.append(InvalidParameter(name, value, "must not contain line breaks"))

    return errors


def _host_cidr(address: IPAddress) -> str:
    return f"{address}/{address.max_prefixlen}"


def build_topology(request: TopologyRequest) -> PeerGraph:
    """
    Build the peer graph for a request.

    Pure function of the request: no I/O, no randomness. Either returns a
    complete graph or raises; nothing is derived for a rejected request.

    Args:
        request: Generation parameters

    Returns:
        PeerGraph: Server node and client nodes with mutual references

    Raises:
        ValidationAggregate: With every validation error found
    """
    errors = validate_request(request)
    if errors:
        raise ValidationAggregate(errors)

    network = parse_subnet(request.subnet)
    allocation = allocate(network, request.peer_count, request.use_last_address)

    server_keys = derive_keypair(request.seed, SERVER_INDEX)
    client_keys: List[KeyPair] = [
        derive_keypair(request.seed, index)
        for index in range(1, request.peer_count + 1)
    ]

    psks: List[Optional[bytes]] = [None] * request.peer_count
    if request.use_preshared_keys:
        psks = [
            derive_preshared_key(request.seed, index)
            for index in range(1, request.peer_count + 1)
        ]

    server_references = tuple(
        PeerReference(
            public_key=keys.public_key,
            preshared_key=psk,
            allowed_ips=_host_cidr(address),
        )
        for keys, psk, address in zip(client_keys, psks, allocation.clients)
    )

    server = PeerNode(
        id=SERVER_INDEX,
        role=Role.SERVER,
        address=str(allocation.server),
        prefix_length=network.prefixlen,
        keys=server_keys,
        peers=server_references,
        listen_port=request.listen_port,
        post_up=request.post_up,
        post_down=request.post_down,
    )

    clients = []
    for index, (keys, psk, address) in enumerate(zip(client_keys, psks, allocation.clients), start=1):
        to_server = PeerReference(
            public_key=server_keys.public_key,
            preshared_key=psk,
            allowed_ips=request.allowed_ips,
            endpoint=request.endpoint or None,
        )
        clients.append(PeerNode(
            id=index,
            role=Role.CLIENT,
            address=str(address),
            prefix_length=host_prefix_length(network),
            keys=keys,
            preshared_key=psk,
            peers=(to_server,),
            dns=request.dns,
        ))

    logger.debug(
        f"Built topology for {network}: server {allocation.server}, "
        f"{len(clients)} client(s), preshared keys {'on' if request.use_preshared_keys else 'off'}"
    )
    return PeerGraph(server=server, clients=tuple(clients))
