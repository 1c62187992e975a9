"""PKCE (Proof Key for Code Exchange) and random flow values"""

import base64
import hashlib
import secrets

from .models import PkceCodes


def compute_challenge(code_verifier: str) -> str:
    """S256 challenge for a verifier (base64url, no padding)"""
    challenge_bytes = hashlib.sha256(code_verifier.encode('utf-8')).digest()
    return base64.urlsafe_b64encode(challenge_bytes).decode('utf-8').rstrip('=')


def generate_pkce() -> PkceCodes:
    """Generate PKCE code verifier and challenge

    RFC 7636: 32 random bytes give a 43 character base64url verifier.

    Returns:
        PkceCodes with a fresh verifier and its S256 challenge
    """
    code_verifier = base64.urlsafe_b64encode(secrets.token_bytes(32)).decode('utf-8').rstrip('=')
    return PkceCodes(code_verifier=code_verifier, code_challenge=compute_challenge(code_verifier))


def create_state() -> str:
    """Random CSRF token for the ``state`` parameter"""
    return secrets.token_urlsafe(32)


def create_nonce() -> str:
    """Random nonce bound into the id token"""
    return secrets.token_urlsafe(32)
