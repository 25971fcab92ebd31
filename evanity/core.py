"""
Core key and address computation for Ethereum accounts.

An address is the last 20 bytes of keccak-256 over the 64-byte uncompressed
secp256k1 public key (without the 0x04 point marker).
"""

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from eth_utils import keccak, to_checksum_address

ADDRESS_BYTES = 20
PRIVATE_KEY_BYTES = 32

# Serialization constants cached at module level for performance
_X962 = serialization.Encoding.X962
_UNCOMPRESSED = serialization.PublicFormat.UncompressedPoint
_CURVE = ec.SECP256K1()


def address_from_public_key(public_key: bytes) -> str:
    """Compute the lowercase 0x-prefixed address for a public key.

    Args:
        public_key: 65-byte uncompressed point (0x04 || X || Y) or the
            64-byte form without the marker.
    """
    if len(public_key) == 65 and public_key[0] == 4:
        public_key = public_key[1:]
    if len(public_key) != 64:
        raise ValueError(
            f"Public key must be 64 or 65 bytes, got {len(public_key)}"
        )
    return "0x" + keccak(public_key)[-ADDRESS_BYTES:].hex()


def address_from_public_key_hex(public_key_hex: str) -> str:
    """Address for an order's public key given as 0x-prefixed hex."""
    body = public_key_hex[2:] if public_key_hex.startswith("0x") else public_key_hex
    try:
        raw = bytes.fromhex(body)
    except ValueError:
        raise ValueError("Public key must be a valid hex string") from None
    return address_from_public_key(raw)


def generate_and_hash() -> tuple[bytes, str]:
    """Generate one secp256k1 key and compute its address.

    This is the hot-path function called in the inner loop of each worker.

    Returns:
        (private_key_bytes, address)
        - private_key_bytes: 32-byte big-endian scalar
        - address: 0x-prefixed lowercase hex address
    """
    key = ec.generate_private_key(_CURVE)
    pub = key.public_key().public_bytes(_X962, _UNCOMPRESSED)
    scalar = key.private_numbers().private_value.to_bytes(PRIVATE_KEY_BYTES, "big")
    return scalar, "0x" + keccak(pub[1:])[-ADDRESS_BYTES:].hex()


def address_from_private_key(private_key: bytes) -> str:
    """Recompute the address for a raw 32-byte private key."""
    scalar = int.from_bytes(private_key, "big")
    key = ec.derive_private_key(scalar, _CURVE)
    pub = key.public_key().public_bytes(_X962, _UNCOMPRESSED)
    return address_from_public_key(pub)


def checksum_address(address: str) -> str:
    """EIP-55 mixed-case display form of an address."""
    return to_checksum_address(address)
