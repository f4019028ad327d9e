"""
Address derivation.

    public key      = x || y                       (64 bytes)
    public key hash = RIPEMD160(SHA256(public key)) (20 bytes)
    address         = Base58Check(0x00 || public key hash)

The checksum is the first 4 bytes of SHA256(SHA256(version || payload)),
so any corrupted character fails to decode instead of silently routing
funds to a different hash.
"""

from typing import Tuple

from Crypto.PublicKey import ECC

from bcwallet.core.errors import InvalidAddress
from bcwallet.crypto import (
    PUBLIC_KEY_HASH_SIZE,
    b58check_decode,
    b58check_encode,
    hash160,
    public_key_bytes,
)

ADDRESS_VERSION = 0x00


def public_key(private_key: ECC.EccKey) -> bytes:
    """Raw 64-byte public key of a private key."""
    return public_key_bytes(private_key)


def hash_public_key(pub_key: bytes) -> bytes:
    """Hash a raw public key into its 20-byte public key hash."""
    return hash160(pub_key)


def encode_address(pub_key_hash: bytes, version: int = ADDRESS_VERSION) -> str:
    """Encode a public key hash as a Base58Check address."""
    return b58check_encode(pub_key_hash, version)


def decode_address(address: str) -> Tuple[int, bytes]:
    """
    Decode an address into ``(version, payload)``.

    Raises:
        InvalidAddress: on checksum mismatch or malformed input
    """
    if not isinstance(address, str):
        raise InvalidAddress(f"Address must be str, got {type(address).__name__}")
    return b58check_decode(address.strip())


def address_to_pub_key_hash(address: str) -> bytes:
    """
    Recover the public key hash an address pays to.

    Raises:
        InvalidAddress: bad checksum, unexpected version or payload length
    """
    version, payload = decode_address(address)
    if version != ADDRESS_VERSION:
        raise InvalidAddress(f"Unsupported address version 0x{version:02x}")
    if len(payload) != PUBLIC_KEY_HASH_SIZE:
        raise InvalidAddress(
            f"Address payload must be {PUBLIC_KEY_HASH_SIZE} bytes, got {len(payload)}"
        )
    return payload


def address_from_public_key(pub_key: bytes) -> str:
    """Derive the address of a raw public key."""
    return encode_address(hash_public_key(pub_key))


def is_valid_address(address: str) -> bool:
    """Check whether a string is a well-formed wallet address."""
    try:
        address_to_pub_key_hash(address)
    except InvalidAddress:
        return False
    return True
