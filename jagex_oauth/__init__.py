"""
Jagex Account login pipeline

Authorization code + PKCE login in an embedded browser, followed by a hidden
hybrid-flow exchange that yields a game session and the account's characters.
"""
from .errors import (
    AuthError,
    BrowserSurfaceError,
    CsrfMismatchError,
    FlowCancelledError,
    InvalidRedirectError,
    MalformedResponseError,
    NetworkError,
    OAuthProviderError,
    TokenDecodeError,
)
from .models import (
    Account,
    AccountInfo,
    AuthFlow,
    ClientConfig,
    GameCharacter,
    GameSession,
    OAuthToken,
    PkceCodes,
    ProviderMetadata,
    SessionRequest,
)
from .pkce import generate_pkce, create_state, create_nonce
from .discovery import fetch_provider_metadata
from .authorization import begin_login, create_authorization_flow, create_session_request
from .surface import (
    BrowserSurface,
    NavigationDecision,
    SurfaceFactory,
    SurfaceOptions,
    WindowGeometry,
)
from .interceptor import (
    CompletionSlot,
    ParamSource,
    RedirectInterceptor,
    RedirectMatcher,
    authorize,
    parse_redirect_params,
)
from .token_exchange import exchange_code_for_token, verify_state
from .session import create_game_session, establish_game_session
from .jwt_utils import decode_id_token_claims
from .identity import fetch_account_info, fetch_characters
from .login import (
    ACCOUNT_ADDED_EVENT,
    LOGIN_COMPLETE_EVENT,
    PROGRESS_EVENT,
    LoginPipeline,
    LoginStage,
)

__all__ = [
    # Errors
    "AuthError",
    "BrowserSurfaceError",
    "CsrfMismatchError",
    "FlowCancelledError",
    "InvalidRedirectError",
    "MalformedResponseError",
    "NetworkError",
    "OAuthProviderError",
    "TokenDecodeError",
    # Models
    "Account",
    "AccountInfo",
    "AuthFlow",
    "ClientConfig",
    "GameCharacter",
    "GameSession",
    "OAuthToken",
    "PkceCodes",
    "ProviderMetadata",
    "SessionRequest",
    # Flow initiation
    "generate_pkce",
    "create_state",
    "create_nonce",
    "fetch_provider_metadata",
    "begin_login",
    "create_authorization_flow",
    "create_session_request",
    # Browser surfaces
    "BrowserSurface",
    "NavigationDecision",
    "SurfaceFactory",
    "SurfaceOptions",
    "WindowGeometry",
    # Redirect interception
    "CompletionSlot",
    "ParamSource",
    "RedirectInterceptor",
    "RedirectMatcher",
    "authorize",
    "parse_redirect_params",
    # Token exchange
    "exchange_code_for_token",
    "verify_state",
    # Game session
    "create_game_session",
    "establish_game_session",
    # Identity
    "decode_id_token_claims",
    "fetch_account_info",
    "fetch_characters",
    # Pipeline
    "ACCOUNT_ADDED_EVENT",
    "LOGIN_COMPLETE_EVENT",
    "PROGRESS_EVENT",
    "LoginPipeline",
    "LoginStage",
]
