"""Game session establishment

A second, hidden authorization request (hybrid flow with the launcher's id
token as hint) returns a fresh id token in the redirect fragment. That id token
is then traded for a game session id.
"""

import logging

from settings import GAME_SESSION_URL, SESSION_REDIRECT_URI, SESSION_WINDOW_SIZE
from .authorization import create_session_request
from .interceptor import ParamSource, RedirectInterceptor, RedirectMatcher
from .models import AuthFlow, GameSession, GameSessionResponse, OAuthToken
from .surface import SurfaceFactory, SurfaceOptions
from .token_exchange import verify_state
from .transport import create_http_client, parse_model, raise_for_provider_error, send_request

logger = logging.getLogger(__name__)

SESSION_PARAMS = ("id_token", "code", "state")

SESSION_SURFACE = SurfaceOptions(
    label="auth_session_id",
    title="Fetching Session Id",
    width=SESSION_WINDOW_SIZE,
    height=SESSION_WINDOW_SIZE,
    visible=False,
)


async def create_game_session(id_token: str) -> str:
    """Trade an id token for a game session id

    Raises:
        OAuthProviderError: Session service returned an error
        NetworkError: Transport failure
        MalformedResponseError: Response lacked ``sessionId``
    """
    async with create_http_client() as client:
        response = await send_request(
            client, "POST", GAME_SESSION_URL, "Game session", json={"idToken": id_token}
        )

    raise_for_provider_error(response, "Game session")
    return parse_model(response, GameSessionResponse, "game session").session_id


async def establish_game_session(
    flow: AuthFlow,
    oauth_token: OAuthToken,
    surface_factory: SurfaceFactory,
) -> GameSession:
    """Run the hidden hybrid flow and obtain a game session

    Args:
        flow: Flow of the current login attempt
        oauth_token: Token bundle from the launcher login
        surface_factory: Creates the hidden surface

    Returns:
        GameSession with all four fields set
    """
    request = create_session_request(flow, oauth_token)
    interceptor = RedirectInterceptor(
        surface_factory,
        RedirectMatcher(prefix=SESSION_REDIRECT_URI, source=ParamSource.FRAGMENT, required=SESSION_PARAMS),
        SESSION_SURFACE,
    )

    logger.info("Requesting game session id token")
    params = await interceptor.intercept(request.url)
    verify_state(request.csrf_token, params["state"])

    session_id = await create_game_session(params["id_token"])
    logger.info("Obtained game session")

    return GameSession(
        code=params["code"],
        id_token=params["id_token"],
        state=params["state"],
        session_id=session_id,
    )
