"""Key derivation for wg-topology."""

from .keys import (
    KeyPair,
    KEY_SIZE,
    MIN_SEED_SIZE,
    DEFAULT_SEED_SIZE,
    check_seed,
    clamp_private_key,
    public_key_for,
    derive_keypair,
    derive_preshared_key,
    key_to_b64,
    key_from_b64,
)

__all__ = [
    "KeyPair",
    "KEY_SIZE",
    "MIN_SEED_SIZE",
    "DEFAULT_SEED_SIZE",
    "check_seed",
    "clamp_private_key",
    "public_key_for",
    "derive_keypair",
    "derive_preshared_key",
    "key_to_b64",
    "key_from_b64",
]
