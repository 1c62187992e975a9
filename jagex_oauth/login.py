"""Login pipeline orchestration

Runs the five stages strictly in order and reports progress to the UI layer:

    begin_login -> authorize -> exchange_code_for_token
        -> establish_game_session -> fetch_characters / fetch_account_info

Any failure propagates to the caller; no partial Account is ever emitted.
"""

import logging
from enum import Enum
from typing import Any, Callable, Optional

from .authorization import begin_login
from .identity import fetch_account_info, fetch_characters
from .interceptor import authorize
from .models import Account
from .session import establish_game_session
from .surface import SurfaceFactory, WindowGeometry
from .token_exchange import exchange_code_for_token

logger = logging.getLogger(__name__)

PROGRESS_EVENT = "login-progress"
ACCOUNT_ADDED_EVENT = "account-added"
LOGIN_COMPLETE_EVENT = "login-complete"

ProgressEmitter = Callable[[str, Any], None]


class LoginStage(str, Enum):
    AUTHORIZING = "Authorizing..."
    GETTING_TOKEN = "Getting Token..."
    GETTING_SESSION = "Getting Session..."
    GETTING_CHARACTERS = "Getting Characters..."


def _discard(event: str, payload: Any) -> None:
    pass


class LoginPipeline:
    """Jagex account login

    Args:
        surface_factory: Creates the browser surfaces for both redirect waits
        emit: Receives (event, payload) UI notifications
        main_window: Launcher window geometry used to place the login window
        discovery_url: Override for the configured discovery URL
    """

    def __init__(
        self,
        surface_factory: SurfaceFactory,
        emit: Optional[ProgressEmitter] = None,
        main_window: Optional[WindowGeometry] = None,
        discovery_url: Optional[str] = None,
    ):
        self.surface_factory = surface_factory
        self.emit = emit or _discard
        self.main_window = main_window
        self.discovery_url = discovery_url

    def _progress(self, stage: LoginStage) -> None:
        logger.info(stage.value)
        self.emit(PROGRESS_EVENT, stage.value)

    async def login(self) -> Account:
        """Run one complete login attempt

        Returns:
            The verified Account with its characters

        Raises:
            AuthError: Any stage failed; the attempt must be restarted
        """
        flow = await begin_login(self.discovery_url)

        self._progress(LoginStage.AUTHORIZING)
        code, state = await authorize(flow, self.surface_factory, self.main_window)

        self._progress(LoginStage.GETTING_TOKEN)
        oauth_token = await exchange_code_for_token(flow, code, state)

        self._progress(LoginStage.GETTING_SESSION)
        game_session = await establish_game_session(flow, oauth_token, self.surface_factory)

        self._progress(LoginStage.GETTING_CHARACTERS)
        characters = await fetch_characters(game_session)
        account_info = await fetch_account_info(flow, oauth_token)

        # The nickname claim stands in for the email until the provider exposes it
        account = Account(
            email=account_info.nickname,
            account_name=account_info.display_name,
            characters=tuple(characters),
        )

        self.emit(ACCOUNT_ADDED_EVENT, account)
        self.emit(LOGIN_COMPLETE_EVENT, "")
        logger.debug(f"Game Session: {game_session}")
        return account
