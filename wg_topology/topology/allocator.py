"""Address allocation inside the virtual network subnet."""

import ipaddress
import logging
from dataclasses import dataclass
from typing import List, Tuple, Union

from ..errors import InvalidSubnet, SubnetExhausted


logger = logging.getLogger(__name__)

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]
IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]


@dataclass(frozen=True)
class Allocation:
    """Addresses handed out for one topology."""
    server: IPAddress
    clients: Tuple[IPAddress, ...]

    def all(self) -> List[IPAddress]:
        """Server address first, then clients."""
        return [self.server, *self.clients]


def parse_subnet(text: str) -> IPNetwork:
    """
    Parse a CIDR string such as "10.0.0.0/24".

    Host bits are masked off, so "10.0.0.5/24" means 10.0.0.0/24.

    Args:
        text: Subnet in address/prefix form

    Returns:
        Parsed network

    Raises:
        InvalidSubnet: With the specific reason the text was rejected
    """
    value = (text or "").strip()
    if "/" not in value:
        raise InvalidSubnet(text, "missing CIDR suffix")

    address_text, prefix_text = value.split("/", 1)
    if not (prefix_text.isascii() and prefix_text.isdigit()):
        raise InvalidSubnet(text, f"unparsable prefix length {prefix_text!r}")
    prefix = int(prefix_text)

    try:
        address = ipaddress.ip_address(address_text.strip())
    except ValueError:
        raise InvalidSubnet(text, f"unparsable address {address_text!r}")

    if not 0 <= prefix <= address.max_prefixlen:
        raise InvalidSubnet(
            text, f"prefix length {prefix} out of range 0..{address.max_prefixlen}"
        )

    return ipaddress.ip_network(f"{address}/{prefix}", strict=False)


def usable_range(network: IPNetwork) -> Tuple[IPAddress, IPAddress]:
    """
    First and last usable host address of a network.

    IPv4 excludes the network and broadcast addresses, IPv6 excludes the
    subnet-router anycast address. /31 and /127 use both addresses, /32
    and /128 their single address.
    """
    host_bits = network.max_prefixlen - network.prefixlen
    first = network.network_address
    last = network.broadcast_address

    if host_bits <= 1:
        return first, last
    if network.version == 4:
        return first + 1, last - 1
    return first + 1, last


def capacity(network: IPNetwork) -> int:
    """Number of usable host addresses."""
    first, last = usable_range(network)
    return int(last) - int(first) + 1


def host_prefix_length(network: IPNetwork) -> int:
    """Prefix of a single host: 32 for IPv4, 128 for IPv6."""
    return network.max_prefixlen


def allocate(network: IPNetwork, peer_count: int, use_last_address: bool = False) -> Allocation:
    """
    Assign the server and `peer_count` clients distinct host addresses.

    The server takes the first usable address and clients the following
    ones, or with `use_last_address` the server takes the last usable
    address and clients the ones just below it. Clients are always in
    ascending order.

    Args:
        network: Parsed subnet
        peer_count: Number of clients
        use_last_address: Place the server at the top of the range

    Returns:
        Allocation

    Raises:
        SubnetExhausted: If the range cannot fit peer_count + 1 addresses
    """
    if peer_count < 0:
        raise ValueError(f"peer_count must be non-negative, got {peer_count}")

    required = peer_count + 1
    available = capacity(network)
    if required > available:
        raise SubnetExhausted(str(network), required, available)

    first, last = usable_range(network)
    if use_last_address:
        server = last
        clients = tuple(last - peer_count + i for i in range(peer_count))
    else:
        server = first
        clients = tuple(first + 1 + i for i in range(peer_count))

    logger.debug(f"Allocated {required} addresses in {network} (server {server})")
    return Allocation(server=server, clients=clients)
