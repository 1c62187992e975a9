"""Character enumeration and account resolution"""

import logging
from typing import List
from urllib.parse import quote

from pydantic import ValidationError

from settings import CHARACTERS_URL, DISPLAY_NAME_URL
from .errors import MalformedResponseError
from .jwt_utils import decode_id_token_claims
from .models import (
    AccountInfo,
    AuthFlow,
    CharacterEntry,
    DisplayNameResponse,
    GameCharacter,
    GameSession,
    OAuthToken,
)
from .transport import (
    create_http_client,
    parse_json,
    parse_model,
    raise_for_provider_error,
    send_request,
)

logger = logging.getLogger(__name__)


async def fetch_characters(session: GameSession) -> List[GameCharacter]:
    """List the characters on the account, in provider order

    Membership is not reported by the endpoint, so ``is_members`` is False.

    Raises:
        OAuthProviderError: Endpoint returned an error
        MalformedResponseError: Body was not a list of characters
    """
    async with create_http_client() as client:
        response = await send_request(
            client,
            "GET",
            CHARACTERS_URL,
            "Characters",
            headers={"Authorization": f"Bearer {session.session_id}"},
        )

    raise_for_provider_error(response, "Characters")
    data = parse_json(response, "characters")
    if not isinstance(data, list):
        raise MalformedResponseError("characters response is not a list")

    try:
        entries = [CharacterEntry.model_validate(item) for item in data]
    except ValidationError as e:
        logger.error(f"Unexpected characters response: {e}")
        raise MalformedResponseError(f"characters response has an unexpected entry: {e}") from e

    characters = [
        GameCharacter(
            account_id=entry.account_id,
            display_name=entry.display_name,
            user_hash=entry.user_hash,
        )
        for entry in entries
    ]
    logger.info(f"Found {len(characters)} character(s)")
    return characters


async def fetch_account_info(flow: AuthFlow, oauth_token: OAuthToken) -> AccountInfo:
    """Resolve account metadata from the id token and the display-name API

    Raises:
        TokenDecodeError: Id token could not be decoded or was rejected
        OAuthProviderError: Display-name endpoint returned an error
        MalformedResponseError: Display-name response was incomplete
    """
    claims = decode_id_token_claims(
        oauth_token.id_token,
        audience=flow.client.client_id,
        nonce=flow.nonce,
        issuer=flow.client.issuer,
    )
    subject = str(claims["sub"])
    nickname = str(claims.get("nickname", ""))
    logger.debug(f"Account nickname: {nickname} - Sub: {subject}")

    async with create_http_client() as client:
        response = await send_request(
            client,
            "GET",
            DISPLAY_NAME_URL.format(sub=quote(subject, safe="")),
            "Display name",
            headers={"Authorization": f"Bearer {oauth_token.access_token}"},
        )

    raise_for_provider_error(response, "Display name")
    body = parse_model(response, DisplayNameResponse, "display name")

    return AccountInfo(
        subject=subject,
        nickname=nickname,
        display_name=body.display_name,
        id=body.id,
        user_id=body.user_id,
        email=claims.get("email"),
    )
