"""
Skynet Registry Hashing

Canonical hashing of registry entries. All hashes are BLAKE2b with a
32-byte digest.

The canonical hash of an entry is

    BLAKE2b-256( hashed_data_key_hex || data || str(revision) )

where hashed_data_key_hex is the UTF-8 encoded, lower-case hex data
key and str(revision) is the decimal ASCII revision. This byte layout
is what gets signed; other implementations must reproduce it exactly.
"""

import hashlib
import logging
from typing import Union

from .util import hex_encode, is_lower_hex

logger = logging.getLogger(__name__)

HASH_SIZE = 32


def blake2b_256(*parts: Union[bytes, str]) -> bytes:
    """BLAKE2b-256 over the concatenation of parts. Strings are UTF-8 encoded."""
    hasher = hashlib.blake2b(digest_size=HASH_SIZE)
    for part in parts:
        if isinstance(part, str):
            part = part.encode("utf-8")
        hasher.update(part)
    return hasher.digest()


def normalize_data_key(data_key: str, already_hashed: bool = False) -> str:
    """
    Return the on-wire form of a data key.

    Args:
        data_key: The application data key
        already_hashed: The caller asserts data_key is already a
            hex-encoded 32-byte hash; it is returned unchanged

    Returns:
        64 lower-case hex characters (for already_hashed, whatever the caller gave)
    """
    if already_hashed:
        if not is_lower_hex(data_key, expected_length=HASH_SIZE * 2):
            logger.warning("Pre-hashed data key is not 64 lower-case hex characters")
        return data_key
    return hex_encode(blake2b_256(data_key))


def canonical_hash(entry, already_hashed: bool = False) -> bytes:
    """
    Compute the 32-byte hash that is signed for a registry entry.

    Args:
        entry: RegistryEntry with data_key, data and revision
        already_hashed: See normalize_data_key

    Returns:
        32-byte BLAKE2b digest
    """
    return blake2b_256(
        normalize_data_key(entry.data_key, already_hashed),
        entry.data,
        str(entry.revision),
    )
