"""
Skynet Key Derivation

Deterministic ed25519 keypairs from arbitrary-length seeds, and
one-way child seeds for hierarchical key management.

Key derivation is a two-stage pipeline:

1. Stretch: PBKDF2-HMAC-SHA256 (seed as password, empty salt,
   1000 iterations) normalizes a seed of any length into 32 bytes.
2. Expand: the 32 bytes are the ed25519 key-generation seed.

Randomness comes from an injected EntropySource so tests can supply
deterministic bytes.
"""

import hashlib
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

from nacl.signing import SigningKey

from .keys import PRIVATE_KEY_SIZE, PUBLIC_KEY_SIZE, PublicKey

KDF_ITERATIONS = 1000
KDF_SALT = b""
DERIVED_KEY_SIZE = 32

# blake2b digest_size bounds
MAX_CHILD_SEED_SIZE = hashlib.blake2b.MAX_DIGEST_SIZE


class EntropySource(ABC):
    """Source of cryptographically secure random bytes."""

    @abstractmethod
    def fill_bytes(self, length: int) -> bytes:
        """Return `length` random bytes."""
        pass


class SystemEntropy(EntropySource):
    """Operating system CSPRNG via the secrets module."""

    def fill_bytes(self, length: int) -> bytes:
        return secrets.token_bytes(length)


_system_entropy = SystemEntropy()


@dataclass(frozen=True)
class KeyPair:
    """Ed25519 key pair. The private key is seed || public key (64 bytes)."""
    public_key: bytes
    private_key: bytes

    def __post_init__(self):
        if len(self.public_key) != PUBLIC_KEY_SIZE:
            raise ValueError(f"Public key must be {PUBLIC_KEY_SIZE} bytes")
        if len(self.private_key) != PRIVATE_KEY_SIZE:
            raise ValueError(f"Private key must be {PRIVATE_KEY_SIZE} bytes")

    @property
    def public(self) -> PublicKey:
        """The algorithm-tagged public key."""
        return PublicKey(key=self.public_key)

    def __repr__(self) -> str:
        return f"KeyPair(public_key={self.public.to_tagged()!r}, private_key=<redacted>)"


def generate_seed(length: int, entropy: Optional[EntropySource] = None) -> bytes:
    """
    Generate a random seed.

    Args:
        length: Number of bytes
        entropy: Random source (default: the OS CSPRNG)

    Returns:
        `length` random bytes
    """
    if length < 1:
        raise ValueError(f"Seed length must be positive, got {length}")
    seed = (entropy or _system_entropy).fill_bytes(length)
    if len(seed) != length:
        raise RuntimeError(f"Entropy source returned {len(seed)} bytes, expected {length}")
    return seed


def derive_keypair(seed: bytes) -> KeyPair:
    """
    Derive an ed25519 keypair from a seed.

    The same seed always yields the same keypair.
    """
    derived_key = hashlib.pbkdf2_hmac(
        "sha256", bytes(seed), KDF_SALT, KDF_ITERATIONS, dklen=DERIVED_KEY_SIZE
    )
    signing_key = SigningKey(derived_key)
    public_key = bytes(signing_key.verify_key)
    return KeyPair(public_key=public_key, private_key=derived_key + public_key)


def gen_keypair_and_seed(
    length: int,
    entropy: Optional[EntropySource] = None
) -> Tuple[KeyPair, bytes]:
    """
    Generate a fresh seed and its keypair.

    Returns:
        Tuple of (keypair, seed). Keep the seed to recreate the keypair.
    """
    seed = generate_seed(length, entropy)
    return derive_keypair(seed), seed


def derive_child_seed(master: bytes, label: bytes) -> bytes:
    """
    Derive a child seed from a master seed and a label.

    BLAKE2b with an output size equal to len(master), fed master then
    label. The child has the same length as the master and reveals
    nothing about the master or its siblings.

    Raises:
        ValueError: if the master is empty or longer than 64 bytes
    """
    if not 1 <= len(master) <= MAX_CHILD_SEED_SIZE:
        raise ValueError(
            f"Master seed must be 1 to {MAX_CHILD_SEED_SIZE} bytes, got {len(master)}"
        )
    hasher = hashlib.blake2b(digest_size=len(master))
    hasher.update(bytes(master))
    hasher.update(bytes(label))
    return hasher.digest()
