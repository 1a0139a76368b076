"""WireGuard .conf serialization."""

from typing import BinaryIO, List

from ..crypto import key_to_b64
from ..models import PeerNode, PeerReference

ENCODING = 'utf-8'


def _directive(key: str, value) -> str:
    text = str(value)
    if "\n" in text or "\r" in text:
        raise ValueError(f"{key} value must not contain line breaks: {text!r}")
    return f"{key} = {text}"


def _interface_lines(node: PeerNode) -> List[str]:
    lines = [
        "[Interface]",
        _directive("PrivateKey", node.keys.private_key_b64),
        _directive("Address", f"{node.address}/{node.prefix_length}"),
    ]
    if node.listen_port:
        lines.append(_directive("ListenPort", node.listen_port))
    if node.dns:
        lines.append(_directive("DNS", node.dns))
    if node.post_up:
        lines.append(_directive("PostUp", node.post_up))
    if node.post_down:
        lines.append(_directive("PostDown", node.post_down))
    return lines


def _peer_lines(peer: PeerReference) -> List[str]:
    lines = [
        "[Peer]",
        _directive("PublicKey", key_to_b64(peer.public_key)),
    ]
    if peer.preshared_key:
        lines.append(_directive("PresharedKey", key_to_b64(peer.preshared_key)))
    if peer.allowed_ips:
        lines.append(_directive("AllowedIPs", peer.allowed_ips))
    if peer.endpoint:
        lines.append(_directive("Endpoint", peer.endpoint))
    return lines


def write_config(node: PeerNode) -> str:
    """
    Render one node as wg-quick configuration text.

    Empty values are left out instead of written blank. Sections are
    separated by a blank line and the text ends with a newline.

    Args:
        node: Server or client node

    Returns:
        Configuration text with LF line endings

    Raises:
        ValueError: If a value contains a line break
    """
    sections = [_interface_lines(node)]
    sections.extend(_peer_lines(peer) for peer in node.peers)
    return "\n\n".join("\n".join(section) for section in sections) + "\n"


def write_config_to(node: PeerNode, stream: BinaryIO) -> int:
    """
    Write one node's configuration to a binary stream as UTF-8 (no BOM).

    Errors from the stream propagate to the caller.

    Returns:
        Number of bytes written
    """
    data = write_config(node).encode(ENCODING)
    stream.write(data)
    return len(data)
