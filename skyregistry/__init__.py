"""
Skynet Registry Client

Version: 0.1.0
License: MIT

A client for the signed, mutable registry of a Skynet portal. Each
entry lives under an ed25519 public key and a data key, carries an
opaque payload and a revision, and is signed by the owner. Entries
fetched from an untrusted portal are verified before they are returned;
an entry that fails verification raises InvalidSignatureError.

Usage:
    from skyregistry import (
        SkynetClient,
        RegistryEntry,
        gen_keypair_and_seed,
        get_registry_entry,
        set_registry_entry,
    )

    keypair, seed = gen_keypair_and_seed(64)
    client = SkynetClient()

    set_registry_entry(
        client,
        keypair.public,
        keypair.private_key,
        RegistryEntry(data_key="data", data=b"hello world", revision=0),
    )

    signed = get_registry_entry(client, keypair.public, "data")
    assert signed.entry.data == b"hello world"
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Keys and derivation
from .crypto import (
    EntropySource,
    SystemEntropy,
    KeyPair,
    generate_seed,
    derive_keypair,
    gen_keypair_and_seed,
    derive_child_seed,
)
from .keys import PublicKey, SignatureAlgorithm

# Hashing and signing
from .hashing import normalize_data_key, canonical_hash
from .signing import sign, verify

# Entries
from .entry import RegistryEntry, SignedRegistryEntry

# Protocol
from .client import SkynetClient, ClientOptions
from .registry import (
    EntryOptions,
    RevisionCache,
    InMemoryRevisionCache,
    get_registry_entry,
    set_registry_entry,
)

# Errors
from .errors import (
    SkynetError,
    TransportError,
    PortalResponseError,
    InvalidSignatureError,
    StaleRevisionError,
)

from .config import DEFAULT_PORTAL_URL


__all__ = [
    "__version__",

    # Keys
    "EntropySource",
    "SystemEntropy",
    "KeyPair",
    "PublicKey",
    "SignatureAlgorithm",
    "generate_seed",
    "derive_keypair",
    "gen_keypair_and_seed",
    "derive_child_seed",

    # Hashing and signing
    "normalize_data_key",
    "canonical_hash",
    "sign",
    "verify",

    # Entries
    "RegistryEntry",
    "SignedRegistryEntry",

    # Protocol
    "SkynetClient",
    "ClientOptions",
    "EntryOptions",
    "RevisionCache",
    "InMemoryRevisionCache",
    "get_registry_entry",
    "set_registry_entry",

    # Errors
    "SkynetError",
    "TransportError",
    "PortalResponseError",
    "InvalidSignatureError",
    "StaleRevisionError",

    "DEFAULT_PORTAL_URL",
]
