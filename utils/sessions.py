"""
Session lifecycle: login, refresh, revoke, and the per-request guard.

A session is a refresh-token row. Access tokens are derived from it and are
never stored:

    Anonymous --login--> Authenticated --refresh--> Refreshed (repeatable)
    Authenticated | Refreshed --revoke--> Revoked (terminal)

Every credential or token failure leaves this module as either
AuthenticationFailed (login) or Unauthorized (everything else). The precise
cause is only logged.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Mapping

from flask import current_app

from models.user import User
from utils.credentials import get_bearer_token
from utils.exceptions import (
    AuthenticationFailed,
    CredentialError,
    TokenError,
    Unauthorized,
)
from utils.security import (
    PasswordCheck,
    check_password,
    create_access_token,
    hash_password,
    make_refresh_token,
    validate_access_token,
)

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(hours=1)
REFRESH_TOKEN_TTL = timedelta(days=60)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password(make_refresh_token())


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    refresh_token: str
    user: User


class SessionManager:
    def __init__(
        self,
        storage,
        signing_secret: str | bytes,
        access_ttl: timedelta = ACCESS_TOKEN_TTL,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
    ):
        self._storage = storage
        self._secret = signing_secret
        self._access_ttl = access_ttl
        self._refresh_ttl = refresh_ttl

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def issue_access_token(self, user_id) -> str:
        return create_access_token(user_id, self._secret, self._access_ttl)

    def login(self, email: str, password: str) -> LoginResult:
        user = self._storage.get_user_by_email(email)
        if user is None:
            # unknown emails cost one verify, same as known ones
            check_password(password, _dummy_hash())
            logger.info("login failed: unknown email")
            raise AuthenticationFailed()

        result = check_password(password, user.hashed_password)
        if result is not PasswordCheck.OK:
            logger.info("login failed for user %s: %s", user.id, result.value)
            raise AuthenticationFailed()

        access_token = self.issue_access_token(user.id)
        refresh_token = make_refresh_token()
        self._storage.create_refresh_token(
            token=refresh_token,
            user_id=user.id,
            expires_at=self._now() + self._refresh_ttl,
        )
        logger.info("session opened for user %s", user.id)
        return LoginResult(access_token=access_token, refresh_token=refresh_token, user=user)

    def refresh(self, refresh_token: str) -> str:
        """Issue a new access token; the refresh token itself is left untouched."""
        user = self._storage.get_user_from_refresh_token(refresh_token, self._now())
        if user is None:
            # unknown, revoked and expired are deliberately indistinguishable
            logger.debug("refresh rejected")
            raise Unauthorized()
        return self.issue_access_token(user.id)

    def revoke(self, refresh_token: str) -> bool:
        """Revoke a refresh token. Unknown or already-revoked tokens return False."""
        revoked = self._storage.revoke_refresh_token(refresh_token, self._now())
        if revoked:
            logger.info("refresh token revoked")
        else:
            logger.debug("revoke was a no-op")
        return revoked

    def authenticate(self, headers: Mapping[str, str]) -> str:
        """Return the user id carried by the request's bearer access token."""
        try:
            token = get_bearer_token(headers)
            return validate_access_token(token, self._secret)
        except (CredentialError, TokenError) as exc:
            logger.debug("access token rejected: %s", exc.__class__.__name__)
            raise Unauthorized() from exc


def get_session_manager() -> SessionManager:
    """Build a SessionManager from the current app's config and the shared storage."""
    from models import storage

    cfg = current_app.config
    return SessionManager(
        storage,
        cfg["JWT_SECRET"],
        access_ttl=cfg.get("ACCESS_TOKEN_EXPIRES", ACCESS_TOKEN_TTL),
        refresh_ttl=cfg.get("REFRESH_TOKEN_EXPIRES", REFRESH_TOKEN_TTL),
    )
