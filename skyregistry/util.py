"""
Utility functions for the Skynet registry client.

Hex encoding and log-safe masking of secrets.
"""

import string
from typing import Optional, Union

HEX_ALPHABET = frozenset("0123456789abcdef")


def hex_encode(b: bytes) -> str:
    """Encode bytes as lower-case hex."""
    return bytes(b).hex()


def hex_decode(s: str) -> bytes:
    """
    Decode a hex string to bytes.

    Raises:
        ValueError: if the string is not valid hex
    """
    if not isinstance(s, str):
        raise ValueError(f"Expected hex string, got {type(s).__name__}")
    if len(s) % 2 or any(c not in string.hexdigits for c in s):
        raise ValueError("Invalid hex string")
    return bytes.fromhex(s)


def is_lower_hex(s: str, expected_length: Optional[int] = None) -> bool:
    """Validate that a string uses only the lower-case hex alphabet."""
    if expected_length is not None and len(s) != expected_length:
        return False
    return len(s) % 2 == 0 and all(c in HEX_ALPHABET for c in s)


def to_bytes(data: Union[bytes, bytearray, memoryview], name: str = "data") -> bytes:
    """Coerce a bytes-like value to bytes, rejecting text."""
    if isinstance(data, (bytes, bytearray, memoryview)):
        return bytes(data)
    raise TypeError(f"{name} must be bytes, got {type(data).__name__}")


def mask_sensitive(value: str, visible_chars: int = 4) -> str:
    """
    Mask a sensitive value, showing only the last N characters.
    Useful for logging.
    """
    if len(value) <= visible_chars:
        return '*' * len(value)
    return '*' * (len(value) - visible_chars) + value[-visible_chars:]
