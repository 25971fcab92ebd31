"""Tests for evanity.core key and address derivation."""

import pytest

from evanity.core import (
    address_from_private_key,
    address_from_public_key,
    address_from_public_key_hex,
    checksum_address,
    generate_and_hash,
)

# Well-known vector: private key 1
KEY_ONE = (1).to_bytes(32, "big")
KEY_ONE_ADDRESS = "0x7e5f4552091a69125d5dfcb7b8c2659029395bdf"


def test_private_key_one():
    assert address_from_private_key(KEY_ONE) == KEY_ONE_ADDRESS


def test_generated_key_is_consistent():
    prv, address = generate_and_hash()
    assert len(prv) == 32
    assert address.startswith("0x") and len(address) == 42
    assert address == address.lower()
    assert address_from_private_key(prv) == address


def test_public_key_marker_optional():
    from cryptography.hazmat.primitives import serialization
    from cryptography.hazmat.primitives.asymmetric import ec

    pub = ec.derive_private_key(1, ec.SECP256K1()).public_key().public_bytes(
        serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
    )
    assert address_from_public_key(pub) == KEY_ONE_ADDRESS
    assert address_from_public_key(pub[1:]) == KEY_ONE_ADDRESS
    assert address_from_public_key_hex("0x" + pub.hex()) == KEY_ONE_ADDRESS


def test_bad_public_key():
    with pytest.raises(ValueError):
        address_from_public_key(b"\x04" * 10)
    with pytest.raises(ValueError, match="hex"):
        address_from_public_key_hex("0xzz")


def test_checksum_is_mixed_case_of_same_address():
    cs = checksum_address(KEY_ONE_ADDRESS)
    assert cs.lower() == KEY_ONE_ADDRESS
    assert cs != KEY_ONE_ADDRESS
