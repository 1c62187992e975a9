"""Browser surface abstraction used by the redirect interceptor

A surface is an ephemeral browser window the login pipeline owns for the
duration of one redirect wait. It reports every navigation attempt to a
handler which decides whether the navigation may proceed, and reports when
the user closes it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Tuple


class NavigationDecision(Enum):
    ALLOW = "allow"
    CANCEL = "cancel"


# Both handlers may be called from any thread.
NavigationHandler = Callable[[str], NavigationDecision]
ClosedHandler = Callable[[], None]


@dataclass(frozen=True)
class WindowGeometry:
    """Position and size of the launcher's main window"""
    x: int
    y: int
    width: int
    height: int

    def beside(self, offset: int) -> Tuple[int, int]:
        """Top-left corner for a window placed to the right of this one"""
        return self.x + self.width + offset, self.y


@dataclass(frozen=True)
class SurfaceOptions:
    """How a surface should be presented

    Attributes:
        label: Identifier for the surface, used in logs
        title: Window title
        width: Window width in pixels
        height: Window height in pixels
        visible: False for surfaces that must never be shown
        position: Top-left corner; None lets the browser center it
    """
    label: str
    title: str
    width: int
    height: int
    visible: bool = True
    position: Optional[Tuple[int, int]] = None


class BrowserSurface(ABC):
    """An owned browser window; use as an async context manager"""

    def __init__(
        self,
        options: SurfaceOptions,
        on_navigation: NavigationHandler,
        on_closed: ClosedHandler,
    ):
        self.options = options
        self.on_navigation = on_navigation
        self.on_closed = on_closed

    @abstractmethod
    async def open(self, url: str) -> None:
        """Show the surface and start navigating to ``url``"""

    @abstractmethod
    async def close(self) -> None:
        """Close the surface; must be safe to call more than once"""

    async def __aenter__(self) -> "BrowserSurface":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()


SurfaceFactory = Callable[[SurfaceOptions, NavigationHandler, ClosedHandler], BrowserSurface]
