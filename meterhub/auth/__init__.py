"""
Authentication package.

Exports the BearerAuth dependency class and API-key parsing utilities
for use by FastAPI route handlers.

CHANGELOG:
- 2026-10-18: Export BearerAuth, parse_api_keys, verify_api_key
"""

from meterhub.auth.bearer import BearerAuth, parse_api_keys, verify_api_key

__all__ = ["BearerAuth", "parse_api_keys", "verify_api_key"]
