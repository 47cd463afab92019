"""
Skynet Registry Protocol

Fetch and publish signed registry entries through a portal.

Fetch: build the lookup query, send it, decode the response, rebuild
the entry and verify its signature against the caller's public key.
An entry that fails verification raises InvalidSignatureError and is
never returned.

Publish: canonical-hash the entry, sign it, serialize the body and
POST it. The caller picks the revision. Without a revision cache no
revision check happens here and the portal's own conflict handling
decides the outcome.
"""

import json
import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional, Tuple, Union

from pydantic import ValidationError

from . import config
from .client import SkynetClient
from .entry import RegistryEntry, SignedRegistryEntry
from .errors import InvalidSignatureError, PortalResponseError, StaleRevisionError
from .hashing import normalize_data_key
from .keys import PublicKey
from .logging_config import audit_log, with_operation_id
from .models import PublishRequest, RegistryEntryResponse

logger = logging.getLogger(__name__)

DEFAULT_GET_ENTRY_TIMEOUT = config.REGISTRY_LOOKUP_TIMEOUT


@dataclass
class EntryOptions:
    """
    Per-call registry options.

    hashed_data_key_hex: the data key is already a hex BLAKE2b-256 hash.
        Must be the same for the publish and the fetch of a key, or the
        fetch looks up a different record.
    timeout: lookup timeout the portal applies, sent in the query string
    """
    endpoint_path: str = config.REGISTRY_ENDPOINT
    api_key: Optional[str] = None
    custom_user_agent: Optional[str] = None
    hashed_data_key_hex: bool = False
    timeout: int = DEFAULT_GET_ENTRY_TIMEOUT


class RevisionCache(ABC):
    """
    Records the highest revision seen per (public key, hashed data key).

    The cache is advisory. set_registry_entry checks it before signing
    and updates it after the POST, and nothing holds a lock between the
    two, so concurrent publishers of the same key can both pass the
    check. The portal's conflict handling makes the final decision.
    """

    @abstractmethod
    def get(self, public_key: PublicKey, hashed_data_key: str) -> Optional[int]:
        """Return the known revision, or None if nothing is recorded."""
        pass

    @abstractmethod
    def update(self, public_key: PublicKey, hashed_data_key: str, revision: int) -> None:
        """Record a revision that was fetched or published."""
        pass


class InMemoryRevisionCache(RevisionCache):
    """Process-local revision cache; each get and update is atomic on its own."""

    def __init__(self):
        self._revisions: Dict[Tuple[str, str], int] = {}
        self._lock = threading.Lock()

    def get(self, public_key: PublicKey, hashed_data_key: str) -> Optional[int]:
        with self._lock:
            return self._revisions.get((public_key.to_tagged(), hashed_data_key))

    def update(self, public_key: PublicKey, hashed_data_key: str, revision: int) -> None:
        key = (public_key.to_tagged(), hashed_data_key)
        with self._lock:
            known = self._revisions.get(key)
            if known is None or revision > known:
                self._revisions[key] = revision


def _decode_entry_response(body: bytes, url: str) -> RegistryEntryResponse:
    """Decode a lookup body, raising PortalResponseError with the raw body on any failure."""
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as exc:
        audit_log.portal_response_rejected(url, "body is not UTF-8")
        raise PortalResponseError(body.decode("utf-8", errors="replace"), "body is not UTF-8") from exc

    # ValueError also covers integers past the int/str digit limit
    try:
        payload = json.loads(text)
    except (ValueError, RecursionError) as exc:
        audit_log.portal_response_rejected(url, "invalid JSON")
        raise PortalResponseError(text, f"invalid JSON: {exc}") from exc

    try:
        return RegistryEntryResponse.model_validate(payload)
    except ValidationError as exc:
        audit_log.portal_response_rejected(url, "unexpected fields")
        raise PortalResponseError(text, str(exc)) from exc


@with_operation_id
def get_registry_entry(
    client: SkynetClient,
    public_key: Union[bytes, str, PublicKey],
    data_key: str,
    opt: Optional[EntryOptions] = None,
    revision_cache: Optional[RevisionCache] = None
) -> SignedRegistryEntry:
    """
    Fetch and verify a registry entry.

    Args:
        client: Portal client
        public_key: Owner's public key (raw bytes, "ed25519:<hex>", or PublicKey)
        data_key: The entry's data key, raw or pre-hashed per opt
        opt: Per-call options
        revision_cache: Optional cache updated with the verified revision

    Returns:
        The verified SignedRegistryEntry; entry.data_key is `data_key` as given

    Raises:
        TransportError: the request failed
        PortalResponseError: the body could not be decoded
        InvalidSignatureError: the entry does not verify; it is discarded
    """
    opt = opt or EntryOptions()
    key = PublicKey.coerce(public_key)
    hashed_data_key = normalize_data_key(data_key, opt.hashed_data_key_hex)
    logger.debug("Fetching registry entry %s for %s", hashed_data_key, key)

    params = {
        "publickey": key.to_tagged(),
        "datakey": hashed_data_key,
        "timeout": opt.timeout,
    }
    response = client.request(
        "GET",
        opt.endpoint_path,
        params=params,
        api_key=opt.api_key,
        custom_user_agent=opt.custom_user_agent,
    )

    decoded = _decode_entry_response(response.content, response.url)
    signed = SignedRegistryEntry(
        entry=RegistryEntry(
            data_key=data_key,
            data=decoded.data,
            revision=decoded.revision,
        ),
        signature=decoded.signature,
    )

    if not signed.verify(key, opt.hashed_data_key_hex):
        audit_log.signature_rejected(key.to_tagged(), hashed_data_key, client.get_portal_url())
        raise InvalidSignatureError(key.to_tagged(), data_key)

    if revision_cache is not None:
        revision_cache.update(key, hashed_data_key, signed.entry.revision)

    audit_log.entry_fetched(key.to_tagged(), hashed_data_key, signed.entry.revision)
    return signed


@with_operation_id
def set_registry_entry(
    client: SkynetClient,
    public_key: Union[bytes, str, PublicKey],
    private_key: bytes,
    entry: RegistryEntry,
    opt: Optional[EntryOptions] = None,
    revision_cache: Optional[RevisionCache] = None
) -> SignedRegistryEntry:
    """
    Sign and publish a registry entry.

    The caller owns the revision: it must be strictly greater than any
    revision previously published for this public key and data key.
    Only when a revision_cache is passed is that checked locally, and
    that check is best effort: see RevisionCache.

    Args:
        client: Portal client
        public_key: Owner's public key
        private_key: Matching 64-byte ed25519 private key
        entry: Entry to publish
        opt: Per-call options
        revision_cache: Optional cache consulted before signing

    Returns:
        The SignedRegistryEntry that was submitted

    Raises:
        StaleRevisionError: the cache knows an equal or newer revision
        ValueError: the private key does not belong to the public key
        TransportError: the request failed
    """
    opt = opt or EntryOptions()
    key = PublicKey.coerce(public_key)
    hashed_data_key = normalize_data_key(entry.data_key, opt.hashed_data_key_hex)

    if revision_cache is not None:
        known = revision_cache.get(key, hashed_data_key)
        if known is not None and entry.revision <= known:
            raise StaleRevisionError(entry.data_key, entry.revision, known)

    signed = entry.sign(private_key, opt.hashed_data_key_hex)
    if not signed.verify(key, opt.hashed_data_key_hex):
        raise ValueError("Private key does not match the given public key")

    logger.debug("Publishing registry entry %s at revision %d", hashed_data_key, entry.revision)
    body = PublishRequest.from_signed_entry(key, signed, opt.hashed_data_key_hex)
    client.request(
        "POST",
        opt.endpoint_path,
        data=body.model_dump_json(),
        api_key=opt.api_key,
        custom_user_agent=opt.custom_user_agent,
    )

    if revision_cache is not None:
        revision_cache.update(key, hashed_data_key, entry.revision)

    audit_log.entry_published(key.to_tagged(), hashed_data_key, entry.revision)
    return signed
