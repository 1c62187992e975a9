"""OpenID Connect provider discovery"""

import logging
from typing import Optional

from settings import OIDC_DISCOVERY_URL
from .models import ProviderMetadata
from .transport import create_http_client, parse_model, raise_for_provider_error, send_request

logger = logging.getLogger(__name__)


async def fetch_provider_metadata(discovery_url: Optional[str] = None) -> ProviderMetadata:
    """Fetch and validate the provider's discovery document

    Args:
        discovery_url: Override for the configured discovery URL

    Returns:
        ProviderMetadata with at least the authorization and token endpoints

    Raises:
        NetworkError: Discovery endpoint unreachable
        OAuthProviderError: Discovery endpoint answered with an error status
        MalformedResponseError: Document is not valid discovery JSON
    """
    url = discovery_url or OIDC_DISCOVERY_URL

    async with create_http_client(follow_redirects=True) as client:
        response = await send_request(client, "GET", url, "Provider discovery")

    raise_for_provider_error(response, "Provider discovery")
    metadata = parse_model(response, ProviderMetadata, "provider discovery")
    logger.debug(f"Discovered authorization endpoint {metadata.authorization_endpoint}")
    return metadata
