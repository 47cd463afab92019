"""
Skynet Registry Entries

A registry entry is one version of a named record under a public key:
a data key, an opaque payload and a revision counter. The signed form
pairs it with an ed25519 signature over the entry's canonical hash.
"""

from dataclasses import dataclass
from typing import Any, Dict, Union

from .hashing import canonical_hash, normalize_data_key
from .keys import SIGNATURE_SIZE, PublicKey
from .signing import sign, verify
from .util import hex_encode, to_bytes

MAX_REVISION = 2 ** 64 - 1


@dataclass(frozen=True)
class RegistryEntry:
    """
    One logical version of a registry record.

    The caller chooses `revision`; it must be strictly greater than any
    revision already published for the same public key and data key.
    This class does not check that.
    """
    data_key: str
    data: bytes
    revision: int

    def __post_init__(self):
        if not isinstance(self.data_key, str):
            raise TypeError(f"data_key must be str, got {type(self.data_key).__name__}")
        object.__setattr__(self, "data", to_bytes(self.data, "data"))
        if isinstance(self.revision, bool) or not isinstance(self.revision, int):
            raise TypeError(f"revision must be int, got {type(self.revision).__name__}")
        if not 0 <= self.revision <= MAX_REVISION:
            raise ValueError(f"revision must be an unsigned 64-bit integer, got {self.revision}")

    def hash(self, already_hashed: bool = False) -> bytes:
        """Canonical hash of this entry."""
        return canonical_hash(self, already_hashed)

    def hashed_data_key(self, already_hashed: bool = False) -> str:
        return normalize_data_key(self.data_key, already_hashed)

    def sign(self, private_key: bytes, already_hashed: bool = False) -> 'SignedRegistryEntry':
        """Sign this entry with a 64-byte ed25519 private key."""
        return SignedRegistryEntry(
            entry=self,
            signature=sign(self.hash(already_hashed), private_key),
        )


@dataclass(frozen=True)
class SignedRegistryEntry:
    """A registry entry together with its 64-byte signature."""
    entry: RegistryEntry
    signature: bytes

    def __post_init__(self):
        object.__setattr__(self, "signature", to_bytes(self.signature, "signature"))
        if len(self.signature) != SIGNATURE_SIZE:
            raise ValueError(
                f"signature must be {SIGNATURE_SIZE} bytes, got {len(self.signature)}"
            )

    def verify(
        self,
        public_key: Union[bytes, PublicKey],
        already_hashed: bool = False
    ) -> bool:
        """Check the signature against the entry's canonical hash and a public key."""
        key = PublicKey.coerce(public_key)
        return verify(self.entry.hash(already_hashed), key.key, self.signature)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "data_key": self.entry.data_key,
            "data": hex_encode(self.entry.data),
            "revision": self.entry.revision,
            "signature": hex_encode(self.signature),
        }
