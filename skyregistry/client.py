"""
Skynet portal client.

Thin HTTP transport for the registry adapter: holds the portal URL,
the API key and user agent, and a requests session. Failures of the
HTTP exchange surface as TransportError, chained to the original
requests exception. Nothing is retried here.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from . import config
from .errors import TransportError
from .logging_config import audit_log
from .util import mask_sensitive

logger = logging.getLogger(__name__)


@dataclass
class ClientOptions:
    """Options applied to every request made by a client."""
    api_key: Optional[str] = config.API_KEY
    custom_user_agent: Optional[str] = config.USER_AGENT
    timeout: float = config.HTTP_TIMEOUT


class SkynetClient:
    """
    Client for a Skynet portal.

    Args:
        portal_url: Base URL of the portal (default: SKYNET_PORTAL_URL)
        options: Client-wide API key, user agent and HTTP timeout
        session: requests session to send through (default: a new one)
    """

    def __init__(
        self,
        portal_url: Optional[str] = None,
        options: Optional[ClientOptions] = None,
        session: Optional[requests.Session] = None
    ):
        self._portal_url = (portal_url or config.PORTAL_URL).rstrip("/")
        self.options = options or ClientOptions()
        self.http = session or requests.Session()

    def get_portal_url(self) -> str:
        return self._portal_url

    def make_url(self, path: str) -> str:
        return f"{self._portal_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[str] = None,
        api_key: Optional[str] = None,
        custom_user_agent: Optional[str] = None
    ) -> requests.Response:
        """
        Send one request to the portal.

        Per-call api_key and custom_user_agent override the client options.

        Returns:
            The response, guaranteed to have a 2xx status

        Raises:
            TransportError: on connection errors, timeouts and non-2xx statuses
        """
        url = self.make_url(path)
        api_key = api_key or self.options.api_key
        user_agent = custom_user_agent or self.options.custom_user_agent

        headers = {}
        if user_agent:
            headers["User-Agent"] = user_agent
        if data is not None:
            headers["Content-Type"] = "application/json"
        auth = ("", api_key) if api_key else None

        logger.debug(
            "%s %s (api key: %s)",
            method, url, mask_sensitive(api_key) if api_key else "none"
        )

        try:
            response = self.http.request(
                method,
                url,
                params=params,
                data=data,
                headers=headers,
                auth=auth,
                timeout=self.options.timeout,
            )
        except requests.RequestException as exc:
            audit_log.transport_failure(method, url, reason=str(exc))
            raise TransportError(
                f"{method} {url} failed: {exc}", method=method, url=url
            ) from exc

        if not response.ok:
            audit_log.transport_failure(method, url, status_code=response.status_code)
            raise TransportError(
                f"{method} {url} returned HTTP {response.status_code}",
                method=method,
                url=url,
                status_code=response.status_code,
                body=response.text,
            )

        return response

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> 'SkynetClient':
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
