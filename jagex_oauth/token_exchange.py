"""OAuth token exchange for the launcher login"""

import hmac
import logging

from .errors import CsrfMismatchError
from .models import AuthFlow, OAuthToken
from .transport import create_http_client, parse_model, raise_for_provider_error, send_request

logger = logging.getLogger(__name__)


def verify_state(expected: str, returned: str) -> None:
    """Constant-time comparison of the returned state with the CSRF token

    Raises:
        CsrfMismatchError: The values differ
    """
    if not hmac.compare_digest(expected.encode("utf-8"), returned.encode("utf-8")):
        logger.error("State returned on redirect does not match the CSRF token")
        raise CsrfMismatchError()


async def exchange_code_for_token(flow: AuthFlow, code: str, state: str) -> OAuthToken:
    """Exchange authorization code for an OAuth token bundle

    The state is checked before anything is sent. The POST does not follow
    redirects.

    Args:
        flow: Flow the code was issued for
        code: Authorization code from the redirect
        state: State from the redirect

    Returns:
        OAuthToken with all six fields populated

    Raises:
        CsrfMismatchError: State does not match the flow's CSRF token
        OAuthProviderError: Token endpoint returned an error
        NetworkError: Transport failure
        MalformedResponseError: Token response was not a complete token bundle
    """
    verify_state(flow.csrf_token, state)

    data = {
        "client_id": flow.client.client_id,
        "redirect_uri": flow.client.redirect_uri,
        "grant_type": "authorization_code",
        "code": code,
        "code_verifier": flow.verifier,
    }

    logger.info(f"Exchanging authorization code for tokens at {flow.client.token_endpoint}")

    async with create_http_client() as client:
        response = await send_request(client, "POST", flow.client.token_endpoint, "Token exchange", data=data)

    raise_for_provider_error(response, "Token exchange")
    token = parse_model(response, OAuthToken, "token exchange")

    logger.info("Successfully exchanged authorization code for tokens")
    return token
