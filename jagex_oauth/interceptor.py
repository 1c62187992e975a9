"""Redirect interception on an ephemeral browser surface

The interceptor opens a surface at an authorization URL and waits until the
provider redirects to the expected URI. Navigation callbacks can fire more than
once for the same redirect and may arrive on a browser thread, so completion is
funneled through a single-slot sender: whoever takes it first resolves the
wait, everyone after that finds the slot empty and does nothing.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Dict, Optional, Tuple
from urllib.parse import unquote, unquote_plus, urlsplit

from settings import AUTH_WINDOW_HEIGHT, AUTH_WINDOW_OFFSET, AUTH_WINDOW_WIDTH
from .errors import FlowCancelledError, InvalidRedirectError, OAuthProviderError
from .models import AuthFlow
from .surface import NavigationDecision, SurfaceFactory, SurfaceOptions, WindowGeometry

logger = logging.getLogger(__name__)

AUTH_PARAMS = ("code", "state")


class ParamSource(Enum):
    QUERY = "query"
    FRAGMENT = "fragment"


def parse_redirect_params(url: str, source: ParamSource) -> Dict[str, str]:
    """Extract URL-decoded key/value pairs from a redirect URL

    Query strings are form-decoded (``+`` is a space); fragments are
    percent-decoded only. Pairs without ``=`` are dropped and the first
    occurrence of a repeated key wins.
    """
    parts = urlsplit(url)
    raw = parts.query if source is ParamSource.QUERY else parts.fragment
    decode = unquote_plus if source is ParamSource.QUERY else unquote

    params: Dict[str, str] = {}
    for pair in raw.split("&"):
        key, sep, value = pair.partition("=")
        if not sep:
            continue
        key = decode(key)
        if key not in params:
            params[key] = decode(value)
    return params


@dataclass(frozen=True)
class RedirectMatcher:
    """Describes the redirect an interceptor is waiting for

    Attributes:
        prefix: Redirect URI, compared case-insensitively as a prefix
        source: Where the parameters live
        required: Keys that must be present and non-empty
    """
    prefix: str
    source: ParamSource
    required: Tuple[str, ...] = ()

    def matches(self, url: str) -> bool:
        prefix = self.prefix.lower()
        candidate = url.lower()
        if not candidate.startswith(prefix):
            return False
        # "http://localhost" must not match "http://localhost.example.com"
        if len(candidate) == len(prefix) or prefix[-1] in "/?#&=":
            return True
        return candidate[len(prefix)] in "/?#"

    def extract(self, url: str) -> Dict[str, str]:
        return parse_redirect_params(url, self.source)

    def missing(self, params: Dict[str, str]) -> Tuple[str, ...]:
        return tuple(key for key in self.required if not params.get(key))


class CompletionSender:
    """The one permitted way to resolve a CompletionSlot"""

    def __init__(self, loop: asyncio.AbstractEventLoop, future: asyncio.Future):
        self._loop = loop
        self._future = future

    def send(self, value: Dict[str, str]) -> None:
        self._loop.call_soon_threadsafe(self._resolve, value, None)

    def fail(self, error: BaseException) -> None:
        self._loop.call_soon_threadsafe(self._resolve, None, error)

    def _resolve(self, value: Optional[Dict[str, str]], error: Optional[BaseException]) -> None:
        # The waiter may have been cancelled in the meantime
        if self._future.done():
            return
        if error is not None:
            self._future.set_exception(error)
        else:
            self._future.set_result(value)


class CompletionSlot:
    """Single-use completion channel shared with navigation callbacks"""

    def __init__(self, loop: asyncio.AbstractEventLoop):
        self._future: asyncio.Future = loop.create_future()
        self._lock = threading.Lock()
        self._sender: Optional[CompletionSender] = CompletionSender(loop, self._future)

    def take(self) -> Optional[CompletionSender]:
        """Remove and return the sender; None once it has been taken"""
        with self._lock:
            sender, self._sender = self._sender, None
        return sender

    @property
    def taken(self) -> bool:
        with self._lock:
            return self._sender is None

    async def wait(self) -> Dict[str, str]:
        return await self._future


class RedirectInterceptor:
    """Waits on a browser surface for one matching redirect

    Args:
        surface_factory: Creates the surface for each interception
        matcher: Which navigation completes the wait and what it must carry
        options: Presentation of the surface
    """

    def __init__(self, surface_factory: SurfaceFactory, matcher: RedirectMatcher, options: SurfaceOptions):
        self.surface_factory = surface_factory
        self.matcher = matcher
        self.options = options

    def handle_navigation(self, slot: CompletionSlot, url: str) -> NavigationDecision:
        """Navigation hook: decide whether ``url`` proceeds and complete the slot"""
        if not self.matcher.matches(url):
            return NavigationDecision.ALLOW

        sender = slot.take()
        if sender is None:
            logger.debug(f"[{self.options.label}] Ignoring repeated redirect navigation")
            return NavigationDecision.ALLOW

        params = self.matcher.extract(url)
        error = params.get("error")
        if error:
            logger.error(f"[{self.options.label}] Provider returned error on redirect: {error}")
            sender.fail(OAuthProviderError(error, params.get("error_description"), context="Authorization"))
            return NavigationDecision.CANCEL

        missing = self.matcher.missing(params)
        if missing:
            logger.error(f"[{self.options.label}] Invalid redirect URL, missing {', '.join(missing)}: {url}")
            sender.fail(InvalidRedirectError(url, missing))
            return NavigationDecision.CANCEL

        sender.send(params)
        return NavigationDecision.CANCEL

    def handle_closed(self, slot: CompletionSlot) -> None:
        """Closed hook: the user closed the surface before the redirect"""
        sender = slot.take()
        if sender is None:
            return
        logger.warning(f"[{self.options.label}] Surface closed before the redirect arrived")
        sender.fail(FlowCancelledError())

    async def intercept(self, url: str) -> Dict[str, str]:
        """Open a surface at ``url`` and wait for the matching redirect

        The surface is closed on every exit path. There is no timeout: the
        wait only ends on a matching redirect or when the surface is closed.

        Returns:
            Decoded redirect parameters

        Raises:
            InvalidRedirectError: Redirect lacked required parameters
            OAuthProviderError: Redirect carried an ``error`` parameter
            FlowCancelledError: Surface closed before the redirect
        """
        slot = CompletionSlot(asyncio.get_running_loop())
        surface = self.surface_factory(
            self.options,
            partial(self.handle_navigation, slot),
            partial(self.handle_closed, slot),
        )

        async with surface:
            logger.info(f"[{self.options.label}] Opening browser surface")
            await surface.open(url)
            params = await slot.wait()

        logger.info(f"[{self.options.label}] Redirect captured, surface closed")
        return params


def auth_surface_options(main_window: Optional[WindowGeometry] = None) -> SurfaceOptions:
    """Visible login window, placed beside the main window when known"""
    position = main_window.beside(AUTH_WINDOW_OFFSET) if main_window else None
    return SurfaceOptions(
        label="auth",
        title="Login with Jagex Account",
        width=AUTH_WINDOW_WIDTH,
        height=AUTH_WINDOW_HEIGHT,
        visible=True,
        position=position,
    )


async def authorize(
    flow: AuthFlow,
    surface_factory: SurfaceFactory,
    main_window: Optional[WindowGeometry] = None,
) -> Tuple[str, str]:
    """Run the launcher login in a browser surface

    Args:
        flow: Flow created by begin_login()
        surface_factory: Creates the login surface
        main_window: Geometry of the launcher window, if any

    Returns:
        Tuple of (code, state) from the redirect
    """
    logger.info("Starting OAuth authorization. Opening authorization window popup.")
    interceptor = RedirectInterceptor(
        surface_factory,
        RedirectMatcher(prefix=flow.client.redirect_uri, source=ParamSource.QUERY, required=AUTH_PARAMS),
        auth_surface_options(main_window),
    )
    params = await interceptor.intercept(flow.authorization_url)
    logger.info("Finished OAuth authorization.")
    return params["code"], params["state"]
