"""HTTP helpers shared by the pipeline stages

All remote calls go through httpx.AsyncClient. Transport failures become
NetworkError, non-2xx responses become OAuthProviderError and unexpected
bodies become MalformedResponseError.
"""

import logging
from typing import Any, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from settings import CONNECT_TIMEOUT, REQUEST_TIMEOUT
from .errors import MalformedResponseError, NetworkError, OAuthProviderError
from .models import OAuthErrorResponse

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def create_http_client(follow_redirects: bool = False) -> httpx.AsyncClient:
    """Create an async client; redirects are not followed unless asked for"""
    return httpx.AsyncClient(
        follow_redirects=follow_redirects,
        timeout=httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT),
    )


async def send_request(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    context: str,
    **kwargs: Any,
) -> httpx.Response:
    """Send a request, mapping transport failures to NetworkError

    Args:
        client: Client to send with
        method: HTTP method
        url: Target URL
        context: Short description used in log and error messages

    Returns:
        The response, whatever its status
    """
    logger.debug(f"{context}: {method} {url}")
    try:
        response = await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        logger.error(f"{context} timed out: {e}")
        raise NetworkError(f"{context} timed out") from e
    except httpx.RequestError as e:
        logger.error(f"{context} request failed: {e}")
        raise NetworkError(f"{context} request failed: {e}") from e

    logger.debug(f"{context} response status: {response.status_code}")
    return response


def raise_for_provider_error(response: httpx.Response, context: str) -> None:
    """Raise OAuthProviderError for a non-2xx response

    The body is parsed as an OAuth error document. Bodies that are not one
    still raise OAuthProviderError, with an ``http_<status>`` error code.
    """
    if response.is_success:
        return

    try:
        body = OAuthErrorResponse.model_validate(response.json())
        error, description = body.error, body.error_description
    except (ValueError, ValidationError):
        error, description = f"http_{response.status_code}", response.text[:200] or None

    logger.error(f"{context} failed with status {response.status_code}: {error}: {description or ''}")
    raise OAuthProviderError(error, description, status_code=response.status_code, context=context)


def parse_json(response: httpx.Response, context: str) -> Any:
    """Decode a JSON body or raise MalformedResponseError"""
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Failed to parse {context} response: {e}")
        raise MalformedResponseError(f"{context} returned invalid JSON") from e


def parse_model(response: httpx.Response, model: Type[ModelT], context: str) -> ModelT:
    """Validate a JSON body against a pydantic model"""
    data = parse_json(response, context)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error(f"Unexpected {context} response: {e}")
        raise MalformedResponseError(f"{context} returned an unexpected document: {e}") from e
