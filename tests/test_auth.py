from datetime import timedelta

import pytest

from conftest import OWNER_KEY

from app.utils.auth import create_access_token, resolve_principal
from app.utils.errors import AuthenticationError


def test_authorizer_context_wins():
    event = {
        "requestContext": {"authorizer": {"ownerKey": "owner-1"}},
        "headers": {"X-Access-Key": OWNER_KEY},
    }
    assert resolve_principal(event) == "owner-1"


def test_authorizer_principal_id_is_used():
    assert resolve_principal({"requestContext": {"authorizer": {"principalId": "p-9"}}}) == "p-9"


def test_bearer_token_subject_is_principal():
    token = create_access_token({"sub": "user-42"})
    assert resolve_principal({"headers": {"authorization": f"Bearer {token}"}}) == "user-42"


def test_expired_or_forged_token_is_rejected():
    expired = create_access_token({"sub": "user-42"}, expires_delta=timedelta(minutes=-5))
    for token in [expired, "not.a.jwt"]:
        with pytest.raises(AuthenticationError):
            resolve_principal({"headers": {"Authorization": f"Bearer {token}"}})


def test_non_bearer_authorization_is_rejected():
    with pytest.raises(AuthenticationError):
        resolve_principal({"headers": {"Authorization": "Basic dXNlcjpwYXNz"}})


def test_access_key_headers_are_case_insensitive():
    assert resolve_principal({"headers": {"x-access-key": OWNER_KEY}}) == OWNER_KEY
    assert resolve_principal({"headers": {"X-Api-Key": OWNER_KEY}}) == OWNER_KEY


def test_malformed_access_key_is_rejected():
    with pytest.raises(AuthenticationError):
        resolve_principal({"headers": {"X-Access-Key": "letmein"}})


def test_missing_credentials_are_rejected():
    with pytest.raises(AuthenticationError) as exc:
        resolve_principal({"headers": {}})
    assert exc.value.status_code == 401
