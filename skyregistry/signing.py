"""
Skynet Registry Signing

Ed25519 (RFC 8032) signatures over canonical entry hashes, via PyNaCl.

sign() and verify() work on the 32-byte canonical hash, never on the
raw entry. Wrong key or signature lengths are programming errors and
raise ValueError; a signature that merely does not match returns False.
"""

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .hashing import HASH_SIZE
from .keys import PRIVATE_KEY_SIZE, PUBLIC_KEY_SIZE, SIGNATURE_SIZE


def _check_length(name: str, value: bytes, expected: int) -> None:
    if not isinstance(value, (bytes, bytearray)):
        raise TypeError(f"{name} must be bytes, got {type(value).__name__}")
    if len(value) != expected:
        raise ValueError(f"{name} must be {expected} bytes, got {len(value)}")


def sign(hash_: bytes, private_key: bytes) -> bytes:
    """
    Sign a canonical hash.

    Args:
        hash_: 32-byte canonical hash
        private_key: 64-byte ed25519 private key (seed || public key)

    Returns:
        64-byte deterministic signature
    """
    _check_length("hash", hash_, HASH_SIZE)
    _check_length("private_key", private_key, PRIVATE_KEY_SIZE)
    signing_key = SigningKey(bytes(private_key[:32]))
    return signing_key.sign(bytes(hash_)).signature


def verify(hash_: bytes, public_key: bytes, signature: bytes) -> bool:
    """
    Verify an ed25519 signature over a canonical hash.

    Returns:
        True if the signature is valid, False otherwise
    """
    _check_length("hash", hash_, HASH_SIZE)
    _check_length("public_key", public_key, PUBLIC_KEY_SIZE)
    _check_length("signature", signature, SIGNATURE_SIZE)
    try:
        VerifyKey(bytes(public_key)).verify(bytes(hash_), bytes(signature))
        return True
    except BadSignatureError:
        return False
