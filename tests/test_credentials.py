import pytest
from werkzeug.datastructures import Headers

from utils.credentials import get_api_key, get_bearer_token
from utils.exceptions import MalformedCredential, MissingCredential


def test_bearer_token():
    assert get_bearer_token({"Authorization": "Bearer abc123"}) == "abc123"


def test_bearer_token_is_returned_verbatim():
    assert get_bearer_token({"Authorization": "Bearer  abc 123 "}) == " abc 123 "


def test_bearer_token_from_request_headers():
    headers = Headers({"authorization": "Bearer abc123"})
    assert get_bearer_token(headers) == "abc123"


@pytest.mark.parametrize("value", ["bearer abc123", "BEARER abc123", "Bearerabc123", "Token abc123", "ApiKey abc123"])
def test_bearer_prefix_is_case_sensitive(value):
    with pytest.raises(MalformedCredential):
        get_bearer_token({"Authorization": value})


@pytest.mark.parametrize("headers", [{}, {"Authorization": ""}])
def test_bearer_missing(headers):
    with pytest.raises(MissingCredential):
        get_bearer_token(headers)


def test_api_key():
    assert get_api_key({"Authorization": "ApiKey f271c81f"}) == "f271c81f"


def test_api_key_rejects_bearer_scheme():
    with pytest.raises(MalformedCredential):
        get_api_key({"Authorization": "Bearer f271c81f"})


def test_api_key_missing():
    with pytest.raises(MissingCredential):
        get_api_key({})
