"""Authorization URL construction for the launcher login and the game session"""

import logging
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlencode, urlsplit

from settings import (
    AUTH_CODE_CLIENT_ID,
    AUTH_CODE_REDIRECT_URI,
    AUTH_CODE_SCOPE,
    SESSION_CLIENT_ID,
    SESSION_REDIRECT_URI,
    SESSION_SCOPE,
)
from .discovery import fetch_provider_metadata
from .models import AuthFlow, ClientConfig, OAuthToken, ProviderMetadata, SessionRequest
from .pkce import create_nonce, create_state, generate_pkce

logger = logging.getLogger(__name__)


def normalize_scopes(scopes: Iterable[str]) -> str:
    """Space separated scope string with ``openid`` first and no duplicates"""
    ordered: List[str] = ["openid"]
    for scope in scopes:
        if scope and scope not in ordered:
            ordered.append(scope)
    return " ".join(ordered)


def build_authorization_url(endpoint: str, params: Dict[str, str]) -> str:
    """Append query parameters to an authorization endpoint"""
    separator = "&" if urlsplit(endpoint).query else "?"
    return f"{endpoint}{separator}{urlencode(params)}"


def create_authorization_flow(
    metadata: ProviderMetadata,
    client_id: str = AUTH_CODE_CLIENT_ID,
    redirect_uri: str = AUTH_CODE_REDIRECT_URI,
    scope: str = AUTH_CODE_SCOPE,
) -> AuthFlow:
    """Create the launcher authorization flow for already-fetched metadata

    Generates the PKCE pair, CSRF token and nonce together so none of them can
    outlive the attempt they belong to.
    """
    client = ClientConfig(client_id=client_id, redirect_uri=redirect_uri, metadata=metadata)
    pkce = generate_pkce()
    csrf_token = create_state()
    nonce = create_nonce()

    params = {
        "response_type": "code",
        "client_id": client.client_id,
        "redirect_uri": client.redirect_uri,
        "scope": normalize_scopes(scope.split()),
        "state": csrf_token,
        "nonce": nonce,
        "code_challenge": pkce.code_challenge,
        "code_challenge_method": "S256",
    }
    url = build_authorization_url(client.authorization_endpoint, params)

    return AuthFlow(
        client=client,
        authorization_url=url,
        pkce=pkce,
        csrf_token=csrf_token,
        nonce=nonce,
    )


async def begin_login(discovery_url: Optional[str] = None) -> AuthFlow:
    """Start a login attempt: discover the provider and build the AuthFlow

    Args:
        discovery_url: Override for the configured discovery URL

    Returns:
        AuthFlow for a single login attempt
    """
    metadata = await fetch_provider_metadata(discovery_url)
    flow = create_authorization_flow(metadata)
    logger.info("Created launcher authorization flow")
    return flow


def create_session_request(
    flow: AuthFlow,
    oauth_token: OAuthToken,
    client_id: str = SESSION_CLIENT_ID,
    redirect_uri: str = SESSION_REDIRECT_URI,
    scope: str = SESSION_SCOPE,
) -> SessionRequest:
    """Build the hidden hybrid-flow request that yields a game session id token

    Reuses the metadata discovered for ``flow`` and passes the id token just
    obtained as ``id_token_hint`` so the provider can skip the login page.
    """
    csrf_token = create_state()
    nonce = create_nonce()

    params = {
        "response_type": "code id_token",
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": normalize_scopes(scope.split()),
        "state": csrf_token,
        "nonce": nonce,
        "id_token_hint": oauth_token.id_token,
    }
    url = build_authorization_url(flow.client.authorization_endpoint, params)
    return SessionRequest(url=url, csrf_token=csrf_token, nonce=nonce)
