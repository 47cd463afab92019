"""
Configuration module for the Skynet registry client.

Centralizes defaults with environment variable overrides. Values are
read once at import time; explicit arguments to the client and to
EntryOptions always win over these.
"""

import os
from typing import Optional

# ============================================================
# Portal Configuration
# ============================================================

DEFAULT_PORTAL_URL = "https://siasky.net"

PORTAL_URL = os.getenv("SKYNET_PORTAL_URL", DEFAULT_PORTAL_URL)
API_KEY: Optional[str] = os.getenv("SKYNET_API_KEY") or None
USER_AGENT: Optional[str] = os.getenv("SKYNET_USER_AGENT") or None

# HTTP timeout on the client side (seconds)
HTTP_TIMEOUT = float(os.getenv("SKYNET_HTTP_TIMEOUT", "30"))

# ============================================================
# Registry Configuration
# ============================================================

REGISTRY_ENDPOINT = os.getenv("SKYNET_REGISTRY_ENDPOINT", "/skynet/registry")

# Lookup timeout the portal applies server side, sent in the query string
REGISTRY_LOOKUP_TIMEOUT = int(os.getenv("SKYNET_REGISTRY_TIMEOUT", "5"))

# Seed length used by keygen when none is given
DEFAULT_SEED_LENGTH = 64

# ============================================================
# Logging
# ============================================================

LOG_LEVEL = os.getenv("SKYREGISTRY_LOG_LEVEL", "INFO")
LOG_JSON = os.getenv("SKYREGISTRY_LOG_JSON", "").lower() in ("1", "true", "yes")


def is_debug() -> bool:
    """Check if debug mode is enabled."""
    return os.getenv("SKYREGISTRY_DEBUG", "").lower() in ("1", "true", "yes")
