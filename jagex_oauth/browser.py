"""Browser surface backed by NoDriver (Chrome DevTools Protocol)

Every document request is paused through the CDP Fetch domain and handed to
the surface's navigation handler, which decides whether it continues or is
aborted. The browser process is polled so that a user closing the window is
reported through the closed handler.
"""

import asyncio
import logging
from typing import List, Optional

import nodriver as uc
from nodriver import cdp

from settings import BROWSER_EXECUTABLE_PATH, BROWSER_POLL_INTERVAL
from .errors import BrowserSurfaceError
from .surface import (
    BrowserSurface,
    ClosedHandler,
    NavigationDecision,
    NavigationHandler,
    SurfaceOptions,
)

logger = logging.getLogger(__name__)


class NodriverSurface(BrowserSurface):
    """Chrome window driven over CDP"""

    def __init__(
        self,
        options: SurfaceOptions,
        on_navigation: NavigationHandler,
        on_closed: ClosedHandler,
        executable_path: Optional[str] = None,
        poll_interval: float = BROWSER_POLL_INTERVAL,
    ):
        super().__init__(options, on_navigation, on_closed)
        self.executable_path = executable_path or BROWSER_EXECUTABLE_PATH
        self.poll_interval = poll_interval

        self._browser = None
        self._tab = None
        self._watcher: Optional[asyncio.Task] = None
        self._closing = False

    def _browser_args(self) -> List[str]:
        args = [f"--window-size={self.options.width},{self.options.height}"]
        if self.options.position is not None:
            x, y = self.options.position
            args.append(f"--window-position={x},{y}")
        return args

    def is_alive(self) -> bool:
        """Check if browser process is still running."""
        try:
            return (
                self._browser is not None
                and self._browser._process is not None
                and self._browser._process.returncode is None
            )
        except AttributeError:
            return False

    async def open(self, url: str) -> None:
        try:
            self._browser = await uc.start(
                headless=not self.options.visible,
                browser_executable_path=self.executable_path,
                browser_args=self._browser_args(),
            )
            self._tab = await self._browser.get("about:blank")
            self._tab.add_handler(cdp.fetch.RequestPaused, self._on_request_paused)
            await self._tab.send(cdp.fetch.enable(patterns=[
                cdp.fetch.RequestPattern(
                    url_pattern="*",
                    resource_type=cdp.network.ResourceType.DOCUMENT,
                    request_stage=cdp.fetch.RequestStage.REQUEST,
                )
            ]))
        # nodriver reports a failed connect as a bare Exception
        except Exception as e:
            logger.error(f"[{self.options.label}] Failed to launch browser: {e}")
            raise BrowserSurfaceError(f"Failed to launch browser: {e}") from e

        logger.info(f"[{self.options.label}] Browser launched (visible={self.options.visible})")
        self._watcher = asyncio.create_task(self._watch_process())
        await self._tab.get(url)

    async def _on_request_paused(self, event: cdp.fetch.RequestPaused, tab=None) -> None:
        # CDP reports the fragment separately from the URL
        url = event.request.url + (event.request.url_fragment or "")
        decision = self.on_navigation(url)

        if decision is NavigationDecision.CANCEL:
            await self._tab.send(cdp.fetch.fail_request(
                request_id=event.request_id,
                error_reason=cdp.network.ErrorReason.ABORTED,
            ))
        else:
            await self._tab.send(cdp.fetch.continue_request(request_id=event.request_id))

    async def _watch_process(self) -> None:
        while self.is_alive():
            await asyncio.sleep(self.poll_interval)
        if not self._closing:
            logger.debug(f"[{self.options.label}] Browser process exited")
            self.on_closed()

    async def close(self) -> None:
        if self._closing:
            return
        self._closing = True

        if self._watcher is not None:
            self._watcher.cancel()
        if self._browser is not None:
            self._browser.stop()
            logger.debug(f"[{self.options.label}] Browser stopped")


def nodriver_surface_factory(
    options: SurfaceOptions,
    on_navigation: NavigationHandler,
    on_closed: ClosedHandler,
) -> NodriverSurface:
    """SurfaceFactory producing NodriverSurface instances"""
    return NodriverSurface(options, on_navigation, on_closed)
