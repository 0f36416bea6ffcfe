"""
security helpers:
- Argon2 password hashing via argon2-cffi
- Access token (JWT, HMAC family) creation/verification via PyJWT
- Opaque refresh token generation from the OS entropy source
"""
from __future__ import annotations

import enum
import os
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from argon2 import PasswordHasher
from argon2 import exceptions as argon2_exceptions

from utils.exceptions import (
    EntropyError,
    HashingError,
    InvalidSignature,
    InvalidSubject,
    MalformedToken,
    TokenExpired,
)

ISSUER = "chirpy"
SIGNING_ALGORITHM = "HS256"
# Only symmetric HMAC tokens are accepted. Anything else (RS*, ES*, "none")
# is rejected before the signature is even looked at.
HMAC_ALGORITHMS = ("HS256", "HS384", "HS512")
REFRESH_TOKEN_BYTES = 32

ph = PasswordHasher()


class PasswordCheck(enum.Enum):
    OK = "ok"
    MISMATCH = "mismatch"
    INVALID_HASH = "invalid_hash"


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2 with the library's default cost."""
    try:
        return ph.hash(password)
    except argon2_exceptions.HashingError as exc:
        raise HashingError("could not hash password") from exc


def check_password(password: str, password_hash: str) -> PasswordCheck:
    """Verify a plaintext password against a stored Argon2 hash.

    MISMATCH and INVALID_HASH are both authentication failures; they are kept
    apart only for server-side diagnostics.
    """
    try:
        ph.verify(password_hash, password)
    except argon2_exceptions.VerifyMismatchError:
        return PasswordCheck.MISMATCH
    except argon2_exceptions.InvalidHashError:
        return PasswordCheck.INVALID_HASH
    except argon2_exceptions.VerificationError:
        return PasswordCheck.MISMATCH
    return PasswordCheck.OK


def generate_jti() -> str:
    """Generate a unique JTI (JWT ID)."""
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_access_token(user_id, secret: str | bytes, ttl: timedelta) -> str:
    """
    Sign an access token for `user_id` valid for `ttl`.
    A zero or negative ttl yields a token that is already expired.
    """
    now = _now()
    payload = {
        "iss": ISSUER,
        "sub": str(user_id),
        "iat": now,
        "exp": now + ttl,
        "jti": generate_jti(),
    }
    return jwt.encode(payload, secret, algorithm=SIGNING_ALGORITHM)


def validate_access_token(token: str, secret: str | bytes) -> str:
    """
    Verify an access token and return the canonical user id it was issued for.

    Raises:
      MalformedToken   - not a three-segment JWT, undecodable, or missing claims
      InvalidSignature - non-HMAC algorithm or signature mismatch
      TokenExpired     - exp <= now
      InvalidSubject   - sub missing or not a UUID
    """
    if not isinstance(token, str) or token.count(".") != 2:
        raise MalformedToken("token must have three segments")

    try:
        header = jwt.get_unverified_header(token)
    except jwt.InvalidTokenError as exc:
        raise MalformedToken(f"undecodable header: {exc}") from exc

    alg = header.get("alg")
    if alg not in HMAC_ALGORITHMS:
        raise InvalidSignature(f"unexpected signing method: {alg}")

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=list(HMAC_ALGORITHMS),
            issuer=ISSUER,
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired("token expired") from exc
    except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError, jwt.InvalidKeyError) as exc:
        raise InvalidSignature(str(exc)) from exc
    except jwt.exceptions.InvalidSubjectError as exc:
        raise InvalidSubject(str(exc)) from exc
    except jwt.PyJWTError as exc:
        raise MalformedToken(str(exc)) from exc

    sub = claims.get("sub")
    if not isinstance(sub, str):
        raise InvalidSubject("missing subject")
    try:
        return str(uuid.UUID(sub))
    except ValueError as exc:
        raise InvalidSubject("subject is not a valid user id") from exc


def make_refresh_token() -> str:
    """Return 32 bytes from the OS CSPRNG as 64 lowercase hex characters."""
    try:
        key = os.urandom(REFRESH_TOKEN_BYTES)
    except (OSError, NotImplementedError) as exc:
        raise EntropyError("entropy source unavailable") from exc
    if len(key) != REFRESH_TOKEN_BYTES:
        raise EntropyError(f"expected {REFRESH_TOKEN_BYTES} bytes, got {len(key)}")
    return key.hex()
