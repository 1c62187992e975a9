"""Tests for id token claim decoding."""

import pytest

from conftest import ISSUER, mint_id_token
from jagex_oauth.errors import TokenDecodeError
from jagex_oauth.jwt_utils import decode_id_token_claims


def test_decodes_claims_without_signature_key():
    token = mint_id_token("launcher", "n-1")

    claims = decode_id_token_claims(token, audience="launcher", nonce="n-1", issuer=ISSUER)

    assert claims["sub"] == "user-1"
    assert claims["nickname"] == "Bob"


def test_issuer_check_skipped_when_unknown():
    token = mint_id_token("launcher", "n-1", issuer="https://other.test")
    assert decode_id_token_claims(token, audience="launcher", nonce="n-1")["sub"] == "user-1"


@pytest.mark.parametrize("token_kwargs", [
    {"audience": "someone-else", "nonce": "n-1"},
    {"audience": "launcher", "nonce": "n-1", "expires_in": -60},
    {"audience": "launcher", "nonce": "n-1", "issuer": "https://evil.test"},
    {"audience": "launcher", "nonce": "other"},
    {"audience": "launcher", "nonce": None},
])
def test_rejected_claims(token_kwargs):
    token = mint_id_token(**token_kwargs)

    with pytest.raises(TokenDecodeError):
        decode_id_token_claims(token, audience="launcher", nonce="n-1", issuer=ISSUER)


def test_garbage_token():
    with pytest.raises(TokenDecodeError):
        decode_id_token_claims("not-a-jwt", audience="launcher", nonce="n-1")
