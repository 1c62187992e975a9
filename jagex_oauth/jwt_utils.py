"""ID token claim decoding

The id token arrives straight from the token endpoint over TLS, so its
signature is not checked. Structure, expiry, audience, issuer and nonce still
are.
"""

import logging
from typing import Any, Dict, Optional

import jwt

from .errors import TokenDecodeError

logger = logging.getLogger(__name__)


def decode_id_token_claims(
    id_token: str,
    audience: str,
    nonce: str,
    issuer: Optional[str] = None,
) -> Dict[str, Any]:
    """Decode id token claims without verifying the signature

    Args:
        id_token: Compact JWT
        audience: Client id the token must be issued to
        nonce: Nonce sent with the authorization request
        issuer: Expected ``iss``; skipped when discovery did not provide one

    Returns:
        Claims dictionary

    Raises:
        TokenDecodeError: Malformed token or rejected claims
    """
    options = {
        "verify_signature": False,
        "verify_exp": True,
        "verify_aud": True,
        "verify_iss": issuer is not None,
        "require": ["sub", "exp"],
    }
    try:
        claims = jwt.decode(
            id_token,
            options=options,
            audience=audience,
            issuer=issuer,
        )
    except jwt.DecodeError as e:
        logger.error(f"Failed to decode id token: {e}")
        raise TokenDecodeError(f"Failed to decode id token: {e}") from e
    except jwt.InvalidTokenError as e:
        logger.error(f"Failed to get claims from id token: {e}")
        raise TokenDecodeError(f"Failed to get claims from id token: {e}") from e

    if claims.get("nonce") != nonce:
        logger.error("Id token nonce does not match the authorization request")
        raise TokenDecodeError("Id token nonce does not match the authorization request")

    return claims
