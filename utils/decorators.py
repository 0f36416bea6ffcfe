from __future__ import annotations
import hmac
import logging
from functools import wraps
from flask import request, g, current_app
from utils.credentials import get_api_key
from utils.exceptions import BadRequest, CredentialError, Unauthorized
from utils.sessions import get_session_manager

logger = logging.getLogger(__name__)


def jwt_required():
    """Reject the request with 401 unless it carries a valid bearer access token.

    The authenticated user id is exposed as g.current_user_id.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            g.current_user_id = get_session_manager().authenticate(request.headers)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def api_key_required(config_key: str = "POLKA_KEY"):
    """Require `Authorization: ApiKey <key>` matching app.config[config_key]."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                key = get_api_key(request.headers)
            except CredentialError as exc:
                logger.debug("api key rejected: %s", exc.__class__.__name__)
                raise Unauthorized("Invalid or missing API key") from exc
            expected = current_app.config.get(config_key) or ""
            # an unset key never matches, not even an empty one
            if not expected or not hmac.compare_digest(key.encode(), expected.encode()):
                raise Unauthorized("Invalid or missing API key")
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def no_body():
    """Refuse requests that carry a body (refresh/revoke take the token from the header only)."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            chunked = "chunked" in request.headers.get("Transfer-Encoding", "").lower()
            if request.content_length or chunked:
                raise BadRequest("Request body not allowed")
            return fn(*args, **kwargs)

        return wrapper

    return decorator
