"""
Bearer API-key authentication for the ingestion endpoint.

Parses the allow-list from the API_KEYS setting into an immutable set and
validates incoming Authorization: Bearer {key} headers. Uses constant-time
comparison via secrets.compare_digest to prevent timing attacks.

CHANGELOG:
- 2026-10-18: Initial creation

TODO:
- None
"""

import logging
import secrets
from collections.abc import Iterable

from fastapi import Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from meterhub.exceptions import Unauthorized

logger = logging.getLogger(__name__)


def parse_api_keys(raw: str) -> frozenset[str]:
    """Parse the API_KEYS setting into a set of valid keys.

    Format: "key1,key2". Whitespace around keys is stripped and empty
    entries are skipped.

    Args:
        raw: The raw comma-separated key list.

    Returns:
        frozenset[str]: The valid API keys.
    """
    if not raw or not raw.strip():
        return frozenset()
    return frozenset(key.strip() for key in raw.split(",") if key.strip())


def verify_api_key(key: str, valid_keys: Iterable[str]) -> bool:
    """Check a bearer key against the allow-list using constant-time comparison.

    Every configured key is compared so the time taken does not reveal
    which key, if any, matched.

    Args:
        key: The bearer key extracted from the Authorization header.
        valid_keys: The allow-list.

    Returns:
        bool: True if the key is in the allow-list.
    """
    if not key:
        return False

    matched = False
    for valid_key in valid_keys:
        if secrets.compare_digest(key.encode("utf-8"), valid_key.encode("utf-8")):
            matched = True
    return matched


class BearerAuth:
    """FastAPI-compatible bearer API-key authentication dependency.

    Wraps HTTPBearer for OpenAPI documentation and validates the extracted key
    against the allow-list injected at startup.

    Attributes:
        api_keys: Immutable allow-list of valid keys.
        scheme: FastAPI HTTPBearer security scheme.
    """

    def __init__(self, api_keys: Iterable[str]) -> None:
        """Initialise BearerAuth with the API-key allow-list."""
        self.api_keys = frozenset(api_keys)
        self.scheme = HTTPBearer(auto_error=False)

    async def verify(self, request: Request) -> None:
        """FastAPI dependency that rejects requests without a valid API key.

        Args:
            request: The incoming FastAPI request.

        Raises:
            Unauthorized: The key is missing or not in the allow-list.
        """
        credentials: HTTPAuthorizationCredentials | None = await self.scheme(request)

        if credentials is None or not verify_api_key(credentials.credentials, self.api_keys):
            logger.warning(
                "Rejected %s %s: invalid or missing API key",
                request.method,
                request.url.path,
            )
            raise Unauthorized()
