"""
Algorithm-Tagged Public Keys

Public keys travel with an explicit algorithm identifier so that other
signature schemes can be added later. The tagged string form
("ed25519:<hex>") is parsed once, at the edge, into a PublicKey; code
past that point never inspects algorithm prefixes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Union

from .util import hex_decode, hex_encode

PUBLIC_KEY_SIZE = 32
PRIVATE_KEY_SIZE = 64
SIGNATURE_SIZE = 64


class SignatureAlgorithm(str, Enum):
    """Signature schemes understood by the registry."""
    ED25519 = "ed25519"


@dataclass(frozen=True)
class PublicKey:
    """A raw public key together with its signature algorithm."""
    key: bytes
    algorithm: SignatureAlgorithm = SignatureAlgorithm.ED25519

    def __post_init__(self):
        if not isinstance(self.key, (bytes, bytearray)):
            raise TypeError(f"Public key must be bytes, got {type(self.key).__name__}")
        if len(self.key) != PUBLIC_KEY_SIZE:
            raise ValueError(
                f"Public key must be {PUBLIC_KEY_SIZE} bytes, got {len(self.key)}"
            )
        object.__setattr__(self, "key", bytes(self.key))
        object.__setattr__(self, "algorithm", SignatureAlgorithm(self.algorithm))

    def to_tagged(self) -> str:
        """Return the single-string form, e.g. "ed25519:ab12..."."""
        return f"{self.algorithm.value}:{hex_encode(self.key)}"

    def to_json(self) -> Dict[str, Any]:
        """Return the structured form used in publish bodies."""
        return {
            "algorithm": self.algorithm.value,
            "key": list(self.key),
        }

    @classmethod
    def from_tagged(cls, value: str) -> 'PublicKey':
        """
        Parse "algorithm:hex" into a PublicKey.

        Raises:
            ValueError: on a missing prefix, an unknown algorithm, or bad hex
        """
        algorithm, sep, key_hex = value.partition(":")
        if not sep:
            raise ValueError(f"Public key is missing an algorithm prefix: {value!r}")
        try:
            alg = SignatureAlgorithm(algorithm.lower())
        except ValueError:
            raise ValueError(f"Unsupported signature algorithm: {algorithm!r}") from None
        return cls(key=hex_decode(key_hex), algorithm=alg)

    @classmethod
    def coerce(cls, value: Union[bytes, str, 'PublicKey']) -> 'PublicKey':
        """Accept a PublicKey, raw ed25519 key bytes, or a tagged string."""
        if isinstance(value, PublicKey):
            return value
        if isinstance(value, str):
            return cls.from_tagged(value)
        return cls(key=bytes(value))

    def __str__(self) -> str:
        return self.to_tagged()

