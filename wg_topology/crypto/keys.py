"""Deterministic Curve25519 key derivation for WireGuard peers."""

import base64
from dataclasses import dataclass, field

import nacl.bindings
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ..errors import InvalidSeed

KEY_SIZE = 32
MIN_SEED_SIZE = 16
DEFAULT_SEED_SIZE = 256

HKDF_SALT = b"wg-topology/v1"
IDENTITY_TAG = b"identity"
PSK_TAG = b"psk"


@dataclass(frozen=True)
class KeyPair:
    """X25519 key pair in raw 32-byte form."""
    private_key: bytes = field(repr=False)
    public_key: bytes

    @property
    def public_key_b64(self) -> str:
        """Get base64-encoded public key."""
        return base64.b64encode(self.public_key).decode('utf-8')

    @property
    def private_key_b64(self) -> str:
        """Get base64-encoded private key."""
        return base64.b64encode(self.private_key).decode('utf-8')


def check_seed(seed: bytes) -> None:
    """
    Reject seeds that are empty or too short to derive keys from.

    Args:
        seed: Raw seed bytes

    Raises:
        InvalidSeed: If the seed is missing or below MIN_SEED_SIZE bytes
    """
    if not seed:
        raise InvalidSeed(0, MIN_SEED_SIZE, "seed is empty")
    if len(seed) < MIN_SEED_SIZE:
        raise InvalidSeed(len(seed), MIN_SEED_SIZE)


def expand_seed(seed: bytes, tag: bytes, index: int) -> bytes:
    """
    Expand the seed into 32 pseudorandom bytes for one (tag, index) slot.

    HKDF-SHA256 with salt b"wg-topology/v1" and
    info = tag || b":" || uint32_be(index).

    Args:
        seed: Raw seed bytes (input keying material)
        tag: Domain separation tag
        index: Peer index (0 = server)

    Returns:
        32 bytes of key material
    """
    check_seed(seed)
    if index < 0:
        raise ValueError(f"index must be non-negative, got {index}")

    info = tag + b":" + index.to_bytes(4, 'big')
    hkdf = HKDF(
        algorithm=hashes.SHA256(),
        length=KEY_SIZE,
        salt=HKDF_SALT,
        info=info,
    )
    return hkdf.derive(seed)


def clamp_private_key(raw: bytes) -> bytes:
    """Apply Curve25519 private scalar clamping."""
    if len(raw) != KEY_SIZE:
        raise ValueError(f"private key must be {KEY_SIZE} bytes, got {len(raw)}")
    key = bytearray(raw)
    key[0] &= 248
    key[31] &= 127
    key[31] |= 64
    return bytes(key)


def public_key_for(private_key: bytes) -> bytes:
    """Compute the X25519 public key for a clamped private key."""
    return nacl.bindings.crypto_scalarmult_base(private_key)


def derive_keypair(seed: bytes, index: int) -> KeyPair:
    """
    Derive the key pair for peer `index` from the seed.

    Index 0 is the server, 1..N are clients in allocation order. The same
    (seed, index) always yields the same key pair.

    Args:
        seed: Raw seed bytes
        index: Peer index

    Returns:
        KeyPair: Clamped private key and its public key
    """
    private_key = clamp_private_key(expand_seed(seed, IDENTITY_TAG, index))
    return KeyPair(private_key=private_key, public_key=public_key_for(private_key))


def derive_preshared_key(seed: bytes, client_index: int) -> bytes:
    """
    Derive the preshared key shared by the server and one client.

    Uses its own HKDF tag so it is independent of identity keys.
    """
    return expand_seed(seed, PSK_TAG, client_index)


def key_to_b64(key: bytes) -> str:
    """Encode a raw 32-byte key the way WireGuard config files expect."""
    return base64.b64encode(key).decode('utf-8')


def key_from_b64(key_b64: str) -> bytes:
    """
    Decode a base64 WireGuard key.

    Args:
        key_b64: Base64-encoded 32-byte key

    Returns:
        Raw key bytes
    """
    key_bytes = base64.b64decode(key_b64, validate=True)
    if len(key_bytes) != KEY_SIZE:
        raise ValueError(f"key must decode to {KEY_SIZE} bytes, got {len(key_bytes)}")
    return key_bytes
