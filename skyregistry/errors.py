"""
Skynet Registry Errors

Error taxonomy for registry operations:

- TransportError: the HTTP exchange itself failed (connection, timeout,
  non-2xx status). Never retried by this package.
- PortalResponseError: the portal answered, but the body could not be
  decoded (bad JSON, bad hex, wrong field types).
- InvalidSignatureError: the entry failed signature verification and
  must not be trusted. Terminal and non-retryable.
- StaleRevisionError: a revision cache rejected a publish.

Caller contract violations (wrong key lengths, bad revisions) raise the
builtin ValueError / TypeError instead.
"""

from typing import Optional


class SkynetError(Exception):
    """Base class for all registry client errors."""


class TransportError(SkynetError):
    """An HTTP request to the portal failed."""

    def __init__(
        self,
        message: str,
        method: Optional[str] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body


class PortalResponseError(SkynetError):
    """The portal returned a body that could not be decoded."""

    def __init__(self, body: str, reason: Optional[str] = None):
        message = "Malformed portal response"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.body = body
        self.reason = reason


class InvalidSignatureError(SkynetError):
    """
    A fetched registry entry did not verify against the public key.

    Deliberately carries no entry data: a rejected entry is discarded
    and nothing from it reaches the caller.
    """

    def __init__(self, public_key: str, data_key: str):
        super().__init__(
            f"Invalid signature for registry entry {data_key} of {public_key}"
        )
        self.public_key = public_key
        self.data_key = data_key


class StaleRevisionError(SkynetError):
    """A publish was attempted with a revision that is not newer than the known one."""

    def __init__(self, data_key: str, revision: int, known_revision: int):
        super().__init__(
            f"Revision {revision} for {data_key} is not greater than known revision {known_revision}"
        )
        self.data_key = data_key
        self.revision = revision
        self.known_revision = known_revision
