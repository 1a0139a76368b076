"""Tests for deterministic key derivation."""

import hashlib
import hmac

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.x25519 import X25519PrivateKey

from wg_topology.crypto import (
    KEY_SIZE,
    clamp_private_key,
    derive_keypair,
    derive_preshared_key,
    key_from_b64,
    key_to_b64,
)
from wg_topology.errors import InvalidSeed

SEED = bytes(range(64))


def _reference_hkdf(seed: bytes, tag: bytes, index: int) -> bytes:
    """HKDF-SHA256 written out from RFC 5869 for a 32-byte output."""
    prk = hmac.new(b"wg-topology/v1", seed, hashlib.sha256).digest()
    info = tag + b":" + index.to_bytes(4, 'big')
    return hmac.new(prk, info + b"\x01", hashlib.sha256).digest()


def test_derivation_is_deterministic():
    """Same seed and index give the same key pair."""
    assert derive_keypair(SEED, 3) == derive_keypair(SEED, 3)
    assert derive_preshared_key(SEED, 3) == derive_preshared_key(SEED, 3)


def test_derivation_matches_reference_hkdf():
    """Private keys are the clamped HKDF output, byte for byte."""
    for index in (0, 1, 2, 255, 70000):
        expected = clamp_private_key(_reference_hkdf(SEED, b"identity", index))
        assert derive_keypair(SEED, index).private_key == expected

    assert derive_preshared_key(SEED, 7) == _reference_hkdf(SEED, b"psk", 7)


def test_public_key_matches_x25519():
    """Public key agrees with an independent X25519 implementation."""
    keypair = derive_keypair(SEED, 1)
    other = X25519PrivateKey.from_private_bytes(keypair.private_key).public_key()
    raw = other.public_bytes(
        encoding=serialization.Encoding.Raw,
        format=serialization.PublicFormat.Raw
    )
    assert keypair.public_key == raw


def test_indices_are_independent():
    """Hundreds of indices give distinct public keys."""
    public_keys = {derive_keypair(SEED, i).public_key for i in range(512)}
    assert len(public_keys) == 512


def test_seeds_are_independent():
    """Different seeds give different keys for the same index."""
    other_seed = bytes(reversed(SEED))
    assert derive_keypair(SEED, 0).public_key != derive_keypair(other_seed, 0).public_key


def test_psk_is_separate_from_identity_key():
    """Preshared keys never reuse identity key material."""
    for index in range(1, 20):
        raw_identity = _reference_hkdf(SEED, b"identity", index)
        assert derive_preshared_key(SEED, index) != raw_identity
        assert derive_preshared_key(SEED, index) != derive_keypair(SEED, index).private_key


def test_private_keys_are_clamped():
    """Every derived private key satisfies Curve25519 clamping."""
    for index in range(256):
        key = derive_keypair(SEED, index).private_key
        assert len(key) == KEY_SIZE
        assert key[0] & 0b111 == 0
        assert key[31] & 0x80 == 0
        assert key[31] & 0x40 == 0x40


def test_clamp_rejects_wrong_length():
    """Clamping needs exactly 32 bytes."""
    with pytest.raises(ValueError):
        clamp_private_key(b"\x00" * 31)


@pytest.mark.parametrize("seed", [b"", b"short", b"x" * 15])
def test_short_seed_rejected(seed):
    """Empty or too-short seeds raise InvalidSeed instead of being padded."""
    with pytest.raises(InvalidSeed) as exc_info:
        derive_keypair(seed, 0)
    assert exc_info.value.length == len(seed)
    assert exc_info.value.minimum == 16


def test_minimum_seed_accepted():
    """A 16-byte seed is enough."""
    keypair = derive_keypair(b"x" * 16, 0)
    assert len(keypair.public_key) == KEY_SIZE


def test_negative_index_rejected():
    """Indices start at zero."""
    with pytest.raises(ValueError):
        derive_keypair(SEED, -1)


def test_base64_helpers():
    """Keys encode to 44-character base64 and decode back."""
    keypair = derive_keypair(SEED, 0)
    encoded = key_to_b64(keypair.public_key)
    assert len(encoded) == 44
    assert encoded == keypair.public_key_b64
    assert key_from_b64(encoded) == keypair.public_key

    with pytest.raises(ValueError):
        key_from_b64(key_to_b64(b"\x00" * 16))


def test_repr_hides_private_key():
    """Private key bytes do not show up in repr."""
    keypair = derive_keypair(SEED, 0)
    assert repr(keypair.private_key) not in repr(keypair)
