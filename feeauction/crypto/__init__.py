"""
Cryptographic primitives for the fee auction engine.

This module provides:
- Keccak-256 hashing
- Key generation (secp256k1) for simulated accounts
- Ethereum-style address derivation
- CREATE2 address computation for deterministic pair addresses

Design Notes:
-------------
Addresses are raw 20-byte values throughout the package. Hex strings with a
0x prefix are only used at the edges (CLI output, record dumps).
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

ZERO_ADDRESS = bytes(20)

# CREATE2 address prefix
CREATE2_PREFIX = b"\xff"


# =============================================================================
# Hashing
# =============================================================================


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash (Ethereum-style).

    Used for: address derivation, pair code hashes, CREATE2 salts.
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
    def address(self) -> bytes:
        """20-byte address: last 20 bytes of keccak256(public_key)."""
        return address_from_public_key(self.public_key)


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


def address_from_public_key(public_key: bytes) -> bytes:
    """Derive a 20-byte address from a 64-byte public key."""
    if len(public_key) != 64:
        raise ValueError("Public key must be 64 bytes")
    return keccak256(public_key)[-20:]


# =============================================================================
# Contract Addresses
# =============================================================================


def create2_address(deployer: bytes, salt: bytes, init_code_hash: bytes) -> bytes:
    """
    Compute a CREATE2 contract address.

    address = keccak256(0xff || deployer || salt || init_code_hash)[12:]
    """
    if len(deployer) != 20:
        raise ValueError(f"Deployer must be 20 bytes, got {len(deployer)}")
    if len(salt) != 32:
        raise ValueError(f"Salt must be 32 bytes, got {len(salt)}")
    if len(init_code_hash) != 32:
        raise ValueError(f"Init code hash must be 32 bytes, got {len(init_code_hash)}")
    return keccak256(CREATE2_PREFIX + deployer + salt + init_code_hash)[12:]


# =============================================================================
# Utility Functions
# =============================================================================


def bytes_to_hex(data: bytes) -> str:
    """Convert bytes to hex string with 0x prefix."""
    return "0x" + data.hex()


def short_hex(data: bytes, length: int = 10) -> str:
    """Abbreviated hex form for log lines."""
    return bytes_to_hex(data)[:length] + "..."

