"""
Cryptographic primitives for bcwallet.

This module provides:
- Hashing functions (SHA-256, double SHA-256, HASH160)
- Key generation and PEM (de)serialization on NIST P-256
- Digital signatures (ECDSA, FIPS 186-3 random nonces)
- Base58Check encoding

Design Notes:
-------------
Keys live on P-256 (secp256r1). Public keys travel as the raw 64-byte
concatenation of the point coordinates, signatures as the fixed-width
64-byte ``r || s`` pair.

ECDSA hashes the signed message with SHA-256 before signing, so signing
``payload`` attests to ``sha256(payload)``.
"""

import hashlib
from typing import Tuple, Union

import base58
from Crypto.Hash import RIPEMD160, SHA256
from Crypto.IO import PEM
from Crypto.PublicKey import ECC
from Crypto.Signature import DSS

from bcwallet.core.errors import InvalidAddress, KeyDecodeError


# =============================================================================
# Constants
# =============================================================================

CURVE_NAME = "P-256"

# Accepted aliases reported by pycryptodome for the wallet curve
_CURVE_ALIASES = {"NIST P-256", "p256", "P-256", "prime256v1", "secp256r1"}

# Width of a single coordinate / scalar on the curve
COORDINATE_SIZE = 32

PUBLIC_KEY_SIZE = 2 * COORDINATE_SIZE
SIGNATURE_SIZE = 2 * COORDINATE_SIZE
PUBLIC_KEY_HASH_SIZE = 20
CHECKSUM_SIZE = 4


# =============================================================================
# Hashing
# =============================================================================


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash.

    Used for: transaction identifiers, signing digests.
    """
    return hashlib.sha256(data).digest()


def double_sha256(data: bytes) -> bytes:
    """
    Compute SHA-256(SHA-256(data)).

    Used for: Base58Check checksums.
    """
    return sha256(sha256(data))


def hash160(data: bytes) -> bytes:
    """
    Compute RIPEMD-160(SHA-256(data)).

    Used for: public key hashes.
    """
    return RIPEMD160.new(sha256(data)).digest()


# =============================================================================
# Key Generation
# =============================================================================


def generate_private_key() -> ECC.EccKey:
    """
    Generate a new random private key on P-256.

    Randomness comes from the operating system CSPRNG. A failure of the
    entropy source propagates to the caller unchanged.
    """
    return ECC.generate(curve=CURVE_NAME)


def public_key_bytes(private_key: ECC.EccKey) -> bytes:
    """
    Derive the raw public key from a private key.

    Returns:
        64-byte public key (x || y, each 32 bytes big-endian)
    """
    point = private_key.pointQ
    x_bytes = int(point.x).to_bytes(COORDINATE_SIZE, byteorder="big")
    y_bytes = int(point.y).to_bytes(COORDINATE_SIZE, byteorder="big")
    return x_bytes + y_bytes


def public_key_from_bytes(public_key: bytes) -> ECC.EccKey:
    """Rebuild a verifying key from the raw 64-byte encoding."""
    if len(public_key) != PUBLIC_KEY_SIZE:
        raise ValueError(f"Public key must be {PUBLIC_KEY_SIZE} bytes")

    x = int.from_bytes(public_key[:COORDINATE_SIZE], byteorder="big")
    y = int.from_bytes(public_key[COORDINATE_SIZE:], byteorder="big")
    return ECC.construct(curve=CURVE_NAME, point_x=x, point_y=y)


# =============================================================================
# Key Serialization
# =============================================================================


def serialize_private_key(private_key: ECC.EccKey) -> bytes:
    """
    Encode a private key as a PEM SEC1 ``EC PRIVATE KEY`` block.
    """
    pem = private_key.export_key(format="PEM", use_pkcs8=False)
    return pem.encode("ascii")


def deserialize_private_key(data: Union[bytes, str]) -> ECC.EccKey:
    """
    Decode a PEM-encoded private key.

    The PEM label is not trusted: the DER body may be SEC1 or PKCS#8, so
    files written with a plain ``PRIVATE KEY`` label around SEC1 DER load
    as well.

    Raises:
        KeyDecodeError: if the data is not a private key on P-256
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("ascii")
        except UnicodeDecodeError as exc:
            raise KeyDecodeError("Private key is not ASCII PEM") from exc

    try:
        der, _marker, encrypted = PEM.decode(data)
    except (ValueError, TypeError) as exc:
        raise KeyDecodeError(f"Malformed PEM block: {exc}") from exc

    if encrypted:
        raise KeyDecodeError("Encrypted PEM private keys are not supported")

    try:
        key = ECC.import_key(der)
    except (ValueError, IndexError, TypeError) as exc:
        raise KeyDecodeError(f"Invalid EC private key: {exc}") from exc

    if not key.has_private():
        raise KeyDecodeError("PEM block holds a public key, not a private key")
    if key.curve not in _CURVE_ALIASES:
        raise KeyDecodeError(f"Unexpected curve {key.curve}, expected {CURVE_NAME}")

    return key


# =============================================================================
# Digital Signatures (ECDSA)
# =============================================================================


def sign(message: bytes, private_key: ECC.EccKey) -> bytes:
    """
    Sign a message using ECDSA on P-256.

    The message is hashed with SHA-256 and signed with a fresh random nonce,
    so signing the same message twice yields different signatures.

    Returns:
        64-byte signature (r || s, each 32 bytes)
    """
    signer = DSS.new(private_key, "fips-186-3", encoding="binary")
    return signer.sign(SHA256.new(message))


def verify(message: bytes, signature: bytes, public_key: bytes) -> bool:
    """
    Verify an ECDSA signature.

    Args:
        message: the signed message (hashed with SHA-256 here)
        signature: 64-byte signature (r || s)
        public_key: 64-byte public key (x || y)

    Returns:
        True if signature is valid, False otherwise
    """
    if len(signature) != SIGNATURE_SIZE:
        return False

    try:
        key = public_key_from_bytes(public_key)
    except ValueError:
        return False

    verifier = DSS.new(key, "fips-186-3", encoding="binary")
    try:
        verifier.verify(SHA256.new(message), signature)
    except ValueError:
        return False
    return True


# =============================================================================
# Base58Check
# =============================================================================


def b58check_encode(payload: bytes, version: int) -> str:
    """Base58 encode ``version || payload || checksum``."""
    if not 0 <= version <= 0xFF:
        raise ValueError(f"Version must fit in one byte, got {version}")
    return base58.b58encode_check(bytes([version]) + payload).decode("ascii")


def b58check_decode(encoded: str) -> Tuple[int, bytes]:
    """
    Decode a Base58Check string into ``(version, payload)``.

    Raises:
        InvalidAddress: on bad alphabet, truncated input or checksum mismatch
    """
    try:
        raw = base58.b58decode_check(encoded)
    except ValueError as exc:
        raise InvalidAddress(f"Invalid Base58Check string {encoded!r}: {exc}") from exc

    if len(raw) < 1:
        raise InvalidAddress(f"Base58Check string {encoded!r} has no version byte")
    return raw[0], raw[1:]


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)
