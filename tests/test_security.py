import base64
import hashlib
import hmac
import json
import re
import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from utils import security
from utils.exceptions import (
    EntropyError,
    HashingError,
    InvalidSignature,
    InvalidSubject,
    MalformedToken,
    TokenExpired,
)
from utils.security import (
    PasswordCheck,
    check_password,
    create_access_token,
    hash_password,
    make_refresh_token,
    validate_access_token,
)

SECRET = "test-secret-key-that-is-long-enough-for-hs256"
OTHER_SECRET = "a-completely-different-secret-for-signing"
HEX64 = re.compile(r"^[0-9a-f]{64}$")


def _claims(**overrides):
    now = datetime.now(timezone.utc)
    claims = {"iss": "chirpy", "sub": str(uuid.uuid4()), "iat": now, "exp": now + timedelta(hours=1)}
    claims.update(overrides)
    return claims


def _b64(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _forge(header, claims, key: bytes) -> str:
    """Hand-assemble a JWT so the header and claims are not checked by the encoder."""
    payload = {k: int(v.timestamp()) if isinstance(v, datetime) else v for k, v in claims.items()}
    signing_input = ".".join([_b64(json.dumps(header).encode()), _b64(json.dumps(payload).encode())])
    signature = hmac.new(key, signing_input.encode(), hashlib.sha256).digest()
    return f"{signing_input}.{_b64(signature)}"


# --- password hashing -----------------------------------------------------

def test_hash_and_check_password():
    hashed = hash_password("04234")
    assert hashed.startswith("$argon2")
    assert check_password("04234", hashed) is PasswordCheck.OK


def test_hash_is_salted():
    assert hash_password("same") != hash_password("same")


def test_wrong_password_is_mismatch():
    hashed = hash_password("04234")
    assert check_password("wrong", hashed) is PasswordCheck.MISMATCH


def test_malformed_hash_is_reported_separately():
    assert check_password("04234", "not-a-hash") is PasswordCheck.INVALID_HASH


def test_hashing_failure_raises_hashing_error(monkeypatch):
    class BrokenHasher:
        def hash(self, password):
            raise security.argon2_exceptions.HashingError("boom")

    monkeypatch.setattr(security, "ph", BrokenHasher())
    with pytest.raises(HashingError):
        hash_password("04234")


# --- access tokens --------------------------------------------------------

@pytest.mark.parametrize("ttl", [timedelta(seconds=5), timedelta(hours=1), timedelta(days=1)])
def test_access_token_round_trip(ttl):
    user_id = uuid.uuid4()
    token = create_access_token(user_id, SECRET, ttl)
    assert token.count(".") == 2
    assert validate_access_token(token, SECRET) == str(user_id)


def test_access_token_claims():
    user_id = uuid.uuid4()
    token = create_access_token(user_id, SECRET, timedelta(hours=1))
    claims = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert claims["iss"] == "chirpy"
    assert claims["sub"] == str(user_id)
    assert claims["exp"] - claims["iat"] == 3600
    assert jwt.get_unverified_header(token)["alg"] == "HS256"


def test_tokens_for_same_user_differ():
    user_id = uuid.uuid4()
    a = create_access_token(user_id, SECRET, timedelta(hours=1))
    b = create_access_token(user_id, SECRET, timedelta(hours=1))
    assert a != b


def test_wrong_secret_is_rejected():
    token = create_access_token(uuid.uuid4(), SECRET, timedelta(hours=1))
    with pytest.raises(InvalidSignature):
        validate_access_token(token, OTHER_SECRET)


def test_empty_secret_is_rejected():
    token = create_access_token(uuid.uuid4(), SECRET, timedelta(hours=1))
    with pytest.raises(InvalidSignature):
        validate_access_token(token, "")


@pytest.mark.parametrize("ttl", [timedelta(0), timedelta(seconds=-1), -timedelta(hours=1)])
def test_non_positive_ttl_is_already_expired(ttl):
    token = create_access_token(uuid.uuid4(), SECRET, ttl)
    with pytest.raises(TokenExpired):
        validate_access_token(token, SECRET)


@pytest.mark.parametrize("token", ["", "not-a-jwt-token", "invalid.token.format", "a.b", "a.b.c.d"])
def test_malformed_tokens(token):
    with pytest.raises(MalformedToken):
        validate_access_token(token, SECRET)


def test_none_algorithm_is_rejected():
    token = jwt.encode(_claims(), None, algorithm="none")
    with pytest.raises(InvalidSignature):
        validate_access_token(token, SECRET)


def test_other_hmac_algorithms_are_accepted():
    claims = _claims()
    token = jwt.encode(claims, SECRET, algorithm="HS512")
    assert validate_access_token(token, SECRET) == claims["sub"]


def test_tampered_payload_is_rejected():
    a = create_access_token(uuid.uuid4(), SECRET, timedelta(hours=1))
    b = create_access_token(uuid.uuid4(), SECRET, timedelta(hours=1))
    header, _, signature = a.split(".")
    forged = ".".join([header, b.split(".")[1], signature])
    with pytest.raises(InvalidSignature):
        validate_access_token(forged, SECRET)


def test_non_uuid_subject_is_rejected():
    token = jwt.encode(_claims(sub="user-42"), SECRET, algorithm="HS256")
    with pytest.raises(InvalidSubject):
        validate_access_token(token, SECRET)


def test_missing_subject_is_rejected():
    claims = _claims()
    del claims["sub"]
    token = jwt.encode(claims, SECRET, algorithm="HS256")
    with pytest.raises(InvalidSubject):
        validate_access_token(token, SECRET)


def test_numeric_subject_is_invalid_subject():
    claims = _claims(sub=42)
    token = _forge({"alg": "HS256", "typ": "JWT"}, claims, SECRET.encode())
    with pytest.raises(InvalidSubject):
        validate_access_token(token, SECRET)


@pytest.mark.parametrize("alg", ["RS256", "ES256", "PS256", "EdDSA"])
def test_asymmetric_algorithm_header_is_rejected(alg):
    # HMAC-signed with the shared secret under an asymmetric header
    token = _forge({"alg": alg, "typ": "JWT"}, _claims(), SECRET.encode())
    with pytest.raises(InvalidSignature):
        validate_access_token(token, SECRET)


def test_foreign_issuer_is_rejected():
    token = jwt.encode(_claims(iss="someone-else"), SECRET, algorithm="HS256")
    with pytest.raises(MalformedToken):
        validate_access_token(token, SECRET)


def test_token_without_expiry_is_rejected():
    claims = _claims()
    del claims["exp"]
    token = jwt.encode(claims, SECRET, algorithm="HS256")
    with pytest.raises(MalformedToken):
        validate_access_token(token, SECRET)


# --- refresh tokens -------------------------------------------------------

def test_refresh_token_format():
    assert HEX64.match(make_refresh_token())


def test_refresh_tokens_do_not_collide():
    tokens = [make_refresh_token() for _ in range(10_000)]
    assert len(set(tokens)) == len(tokens)
    assert all(HEX64.match(t) for t in tokens)


def test_entropy_failure_raises(monkeypatch):
    def unavailable(n):
        raise OSError("no entropy")

    monkeypatch.setattr(security.os, "urandom", unavailable)
    with pytest.raises(EntropyError):
        make_refresh_token()


def test_short_read_raises(monkeypatch):
    monkeypatch.setattr(security.os, "urandom", lambda n: b"\x00" * (n - 1))
    with pytest.raises(EntropyError):
        make_refresh_token()
