"""
In-memory stand-in for a portal's registry endpoint.

Mounted on a requests.Session so the client's real request path runs
without network access.
"""

import json
from typing import Dict, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from skyregistry import ClientOptions, SkynetClient

PORTAL_URL = "https://portal.test"


class InMemoryPortal(BaseAdapter):
    """
    Registry endpoint backed by a dict.

    Stores what a publish sends and serves it back on lookup in the
    portal's response format. `override_body` replaces the lookup body
    to simulate a broken or malicious portal.
    """

    def __init__(self, endpoint: str = "/skynet/registry"):
        super().__init__()
        self.endpoint = endpoint
        self.entries: Dict[Tuple[str, str], Dict] = {}
        self.requests = []
        self.override_body: Optional[bytes] = None

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self.requests.append(request)
        url = urlparse(request.url)
        if url.path != self.endpoint:
            return self._respond(request, 404, b'{"message":"unknown endpoint"}')

        if request.method == "GET":
            query = parse_qs(url.query)
            record = self.entries.get((query["publickey"][0], query["datakey"][0]))
            if self.override_body is not None:
                return self._respond(request, 200, self.override_body)
            if record is None:
                return self._respond(request, 404, b'{"message":"no registry entry found"}')
            return self._respond(request, 200, json.dumps(record).encode("utf-8"))

        if request.method == "POST":
            payload = json.loads(request.body)
            public_key = "{}:{}".format(
                payload["publickey"]["algorithm"],
                bytes(payload["publickey"]["key"]).hex(),
            )
            key = (public_key, payload["datakey"])
            existing = self.entries.get(key)
            if existing is not None and payload["revision"] <= existing["revision"]:
                return self._respond(request, 400, b'{"message":"revision number too low"}')
            self.entries[key] = {
                "data": bytes(payload["data"]).hex(),
                "revision": payload["revision"],
                "signature": bytes(payload["signature"]).hex(),
            }
            return self._respond(request, 204, b"")

        return self._respond(request, 405, b"")

    def close(self):
        pass

    def _respond(self, request, status: int, body: bytes) -> requests.Response:
        response = requests.Response()
        response.status_code = status
        response._content = body
        response.headers = CaseInsensitiveDict({"Content-Type": "application/json"})
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response


class FailingAdapter(BaseAdapter):
    """Adapter whose every request fails at the connection level."""

    def send(self, request, **kwargs):
        raise requests.ConnectionError("connection refused")

    def close(self):
        pass


def make_client(adapter: BaseAdapter, options: Optional[ClientOptions] = None) -> SkynetClient:
    session = requests.Session()
    session.mount(PORTAL_URL, adapter)
    return SkynetClient(
        portal_url=PORTAL_URL,
        options=options or ClientOptions(api_key=None, custom_user_agent=None),
        session=session,
    )
