"""
Identity primitives for Gavel.

This module provides:
- Keccak-256 hashing
- secp256k1 keypair generation
- Ethereum-style address derivation, normalization and EIP-55 checksums

Design Notes:
-------------
Ledger identities are plain address strings ("0x" + 40 hex chars), so that
scripts and fixtures can name bidders the same way a chain explorer would.
Addresses are compared in lower case; the checksummed form is only used for
display.
"""

import secrets
from dataclasses import dataclass

from Crypto.Hash import keccak
from py_ecc.secp256k1 import secp256k1


# =============================================================================
# Constants
# =============================================================================

# secp256k1 curve order (number of points on the curve)
SECP256K1_ORDER = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141

ADDRESS_LENGTH = 20
ZERO_ADDRESS = "0x" + "00" * ADDRESS_LENGTH


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: address derivation and checksum casing.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return k.digest()


# =============================================================================
# Key Generation
# =============================================================================


@dataclass
class KeyPair:
    """
    An ECDSA keypair on secp256k1.

    Attributes:
        private_key: 32-byte secret key (integer in [1, order-1])
        public_key: 64-byte uncompressed public key (x || y coordinates)
    """
    private_key: bytes  # 32 bytes
    public_key: bytes   # 64 bytes (uncompressed, no 0x04 prefix)

    @property
    def address(self) -> str:
        """Lower-case address derived from the public key."""
        return address_from_public_key(self.public_key)

    @property
    def checksum_address(self) -> str:
        """EIP-55 checksummed address, for display."""
        return to_checksum_address(self.address)


def generate_keypair() -> KeyPair:
    """
    Generate a new random keypair.

    Uses cryptographically secure random number generator.
    """
    private_key_int = secrets.randbelow(SECP256K1_ORDER - 1) + 1
    private_key = private_key_int.to_bytes(32, byteorder="big")
    return KeyPair(private_key=private_key, public_key=private_key_to_public_key(private_key))


def private_key_to_public_key(private_key: bytes) -> bytes:
    """
    Derive public key from private key.

    Args:
        private_key: 32-byte private key

    Returns:
        64-byte uncompressed public key
    """
    if len(private_key) != 32:
        raise ValueError("Private key must be 32 bytes")

    public_key_point = secp256k1.privtopub(private_key)
    x_bytes = public_key_point[0].to_bytes(32, byteorder="big")
    y_bytes = public_key_point[1].to_bytes(32, byteorder="big")
    return x_bytes + y_bytes


def address_from_public_key(public_key: bytes) -> str:
    """
    Derive an address from a public key.

    Address = last 20 bytes of keccak256(public_key), hex-encoded with 0x prefix.
    """
    if len(public_key) != 64:
        raise ValueError("Public key must be 64 bytes")
    return bytes_to_hex(keccak256(public_key)[-ADDRESS_LENGTH:])


# =============================================================================
# Address Handling
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def hex_to_bytes(hex_str: str) -> bytes:
    """Convert hex string (with or without 0x prefix) to bytes."""
    if hex_str.startswith("0x") or hex_str.startswith("0X"):
        hex_str = hex_str[2:]
    return bytes.fromhex(hex_str)


def is_valid_address(address: str) -> bool:
    """Check if string is a valid address format (any casing)."""
    if not isinstance(address, str):
        return False
    if not address.startswith(("0x", "0X")):
        return False
    if len(address) != 2 + ADDRESS_LENGTH * 2:
        return False
    try:
        int(address, 16)
        return True
    except ValueError:
        return False


def normalize_address(address: str) -> str:
    """
    Canonical (lower-case, 0x-prefixed) form of an address.

    Raises:
        ValueError: if the string is not an address
    """
    if not is_valid_address(address):
        raise ValueError(f"Invalid address: {address!r}")
    return "0x" + address[2:].lower()


def to_checksum_address(address: str) -> str:
    """
    EIP-55 mixed-case checksum encoding.

    A hex letter is upper-cased when the matching nibble of
    keccak256(lower_hex) is >= 8.
    """
    lower_hex = normalize_address(address)[2:]
    digest = keccak256(lower_hex.encode("ascii")).hex()
    return "0x" + "".join(
        ch.upper() if int(digest[i], 16) >= 8 else ch
        for i, ch in enumerate(lower_hex)
    )
