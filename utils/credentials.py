"""
Credential extraction from request headers.

Both schemes read the Authorization header. Prefixes are matched
case-sensitively with a single space, and the remainder is returned as-is.
"""
from __future__ import annotations

from typing import Mapping

from utils.exceptions import MalformedCredential, MissingCredential

AUTH_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "
API_KEY_PREFIX = "ApiKey "


def _get_prefixed(headers: Mapping[str, str], prefix: str) -> str:
    value = headers.get(AUTH_HEADER)
    if not value:
        raise MissingCredential(f"missing {AUTH_HEADER} header")
    if not value.startswith(prefix):
        raise MalformedCredential(f"{AUTH_HEADER} header must start with '{prefix}'")
    return value[len(prefix):]


def get_bearer_token(headers: Mapping[str, str]) -> str:
    return _get_prefixed(headers, BEARER_PREFIX)


def get_api_key(headers: Mapping[str, str]) -> str:
    return _get_prefixed(headers, API_KEY_PREFIX)
