"""Shared fixtures: provider metadata, id token minting and scripted browser surfaces."""

import time
from typing import Callable, Dict, List, Optional, Union
from urllib.parse import parse_qs, urlsplit

import jwt
import pytest
import respx

from jagex_oauth.models import ProviderMetadata
from jagex_oauth.surface import BrowserSurface, NavigationDecision

DISCOVERY_URL = "https://account.example.test/.well-known/openid-configuration"
ISSUER = "https://account.example.test"
AUTH_ENDPOINT = "https://account.example.test/oauth2/auth"
TOKEN_ENDPOINT = "https://account.example.test/oauth2/token"

METADATA = {
    "issuer": ISSUER,
    "authorization_endpoint": AUTH_ENDPOINT,
    "token_endpoint": TOKEN_ENDPOINT,
    "jwks_uri": f"{ISSUER}/.well-known/keys",
    "response_types_supported": ["code", "code id_token"],
}

# Sentinel a surface script returns to simulate the user closing the window
CLOSE = object()

Script = Callable[[str], Union[List[str], object]]


def mint_id_token(
    audience: str,
    nonce: Optional[str],
    issuer: str = ISSUER,
    sub: str = "user-1",
    nickname: Optional[str] = "Bob",
    expires_in: int = 3600,
    **extra,
) -> str:
    claims = {"sub": sub, "aud": audience, "iss": issuer, "exp": int(time.time()) + expires_in}
    if nonce is not None:
        claims["nonce"] = nonce
    if nickname is not None:
        claims["nickname"] = nickname
    claims.update(extra)
    return jwt.encode(claims, "unit-test-signing-key-not-verified-0123456789", algorithm="HS256")


def query_param(url: str, name: str) -> str:
    return parse_qs(urlsplit(url).query)[name][0]


def mock_discovery(router=respx) -> respx.Route:
    """Register the discovery route on a respx router, the global one by default"""
    return router.get(DISCOVERY_URL).respond(200, json=METADATA)


class ScriptedSurface(BrowserSurface):
    """In-memory surface that replays navigations produced by a script

    The script receives the URL the surface is opened at and returns the
    navigation URLs the "browser" then reports, in order, or CLOSE.
    """

    def __init__(self, options, on_navigation, on_closed, script: Script):
        super().__init__(options, on_navigation, on_closed)
        self.script = script
        self.opened_url: Optional[str] = None
        self.decisions: List[NavigationDecision] = []
        self.closed = False
        self.close_calls = 0

    async def open(self, url: str) -> None:
        self.opened_url = url
        result = self.script(url)
        if result is CLOSE:
            self.on_closed()
            return
        for navigation in result:
            self.decisions.append(self.on_navigation(navigation))

    async def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class SurfaceRecorder:
    """SurfaceFactory that picks a script by surface label and keeps every surface"""

    def __init__(self, scripts: Dict[str, Script]):
        self.scripts = scripts
        self.surfaces: List[ScriptedSurface] = []

    def __call__(self, options, on_navigation, on_closed) -> ScriptedSurface:
        surface = ScriptedSurface(options, on_navigation, on_closed, self.scripts[options.label])
        self.surfaces.append(surface)
        return surface

    def by_label(self, label: str) -> ScriptedSurface:
        return next(s for s in self.surfaces if s.options.label == label)


@pytest.fixture
def metadata() -> ProviderMetadata:
    return ProviderMetadata.model_validate(METADATA)


@pytest.fixture
def surfaces() -> Callable[[Dict[str, Script]], SurfaceRecorder]:
    return SurfaceRecorder
