"""Tests for redirect interception on browser surfaces."""

import asyncio
import threading

import pytest

from conftest import CLOSE, ScriptedSurface, query_param
from jagex_oauth.authorization import create_authorization_flow
from jagex_oauth.errors import FlowCancelledError, InvalidRedirectError, OAuthProviderError
from jagex_oauth.interceptor import (
    CompletionSlot,
    ParamSource,
    RedirectInterceptor,
    RedirectMatcher,
    authorize,
    parse_redirect_params,
)
from jagex_oauth.models import AuthFlow
from jagex_oauth.surface import NavigationDecision, SurfaceOptions, WindowGeometry
from settings import AUTH_WINDOW_OFFSET

REDIRECT = "https://game.test/launcher-redirect"
OPTIONS = SurfaceOptions(label="test", title="Test", width=100, height=100)


def _interceptor(recorder, source=ParamSource.QUERY, required=("code", "state"), prefix=REDIRECT):
    return RedirectInterceptor(recorder, RedirectMatcher(prefix=prefix, source=source, required=required), OPTIONS)


class TestParseRedirectParams:
    def test_query_is_form_decoded(self):
        params = parse_redirect_params(f"{REDIRECT}?code=a%2Bb&state=x+y", ParamSource.QUERY)
        assert params == {"code": "a+b", "state": "x y"}

    def test_fragment_is_percent_decoded(self):
        params = parse_redirect_params("http://localhost#id_token=a+b&state=%41", ParamSource.FRAGMENT)
        assert params == {"id_token": "a+b", "state": "A"}

    def test_query_ignored_for_fragment_source(self):
        params = parse_redirect_params("http://localhost?code=q#code=f", ParamSource.FRAGMENT)
        assert params == {"code": "f"}

    def test_first_occurrence_wins_and_bare_keys_dropped(self):
        params = parse_redirect_params(f"{REDIRECT}?code=1&flag&code=2", ParamSource.QUERY)
        assert params == {"code": "1"}


class TestRedirectMatcher:
    @pytest.mark.parametrize("url", [
        "http://localhost",
        "http://localhost/",
        "http://localhost#id_token=x",
        "HTTP://LOCALHOST?code=1",
    ])
    def test_matches(self, url):
        assert RedirectMatcher("http://localhost", ParamSource.FRAGMENT).matches(url)

    @pytest.mark.parametrize("url", [
        "http://localhost.example.com/#id_token=x",
        "http://localhost:8080#id_token=x",
        "https://account.example.test/login",
    ])
    def test_does_not_match(self, url):
        assert not RedirectMatcher("http://localhost", ParamSource.FRAGMENT).matches(url)

    def test_empty_value_counts_as_missing(self):
        matcher = RedirectMatcher(REDIRECT, ParamSource.QUERY, ("code", "state"))
        assert matcher.missing({"code": "", "state": "s"}) == ("code",)


class TestRedirectInterceptor:
    @pytest.mark.asyncio
    async def test_completes_with_params_and_closes(self, surfaces):
        recorder = surfaces({"test": lambda url: [
            "https://account.example.test/login",
            f"{REDIRECT}?code=ABC&state=XYZ",
        ]})

        params = await _interceptor(recorder).intercept("https://account.example.test/auth")

        surface = recorder.surfaces[0]
        assert params == {"code": "ABC", "state": "XYZ"}
        assert surface.opened_url == "https://account.example.test/auth"
        assert surface.decisions == [NavigationDecision.ALLOW, NavigationDecision.CANCEL]
        assert surface.closed

    @pytest.mark.asyncio
    async def test_duplicate_redirect_completes_once(self, surfaces):
        redirect = f"{REDIRECT}?code=ABC&state=XYZ"
        recorder = surfaces({"test": lambda url: [redirect, f"{REDIRECT}?code=OTHER&state=XYZ"]})

        params = await _interceptor(recorder).intercept("https://account.example.test/auth")

        assert params["code"] == "ABC"
        assert recorder.surfaces[0].decisions == [NavigationDecision.CANCEL, NavigationDecision.ALLOW]

    @pytest.mark.asyncio
    async def test_missing_state_raises_with_url(self, surfaces):
        redirect = f"{REDIRECT}?code=ABC"
        recorder = surfaces({"test": lambda url: [redirect]})

        with pytest.raises(InvalidRedirectError) as exc_info:
            await _interceptor(recorder).intercept("https://account.example.test/auth")

        assert exc_info.value.url == redirect
        assert exc_info.value.missing == ("state",)
        assert recorder.surfaces[0].closed

    @pytest.mark.asyncio
    async def test_error_redirect_raises_provider_error(self, surfaces):
        recorder = surfaces({"test": lambda url: [
            f"{REDIRECT}?error=access_denied&error_description=User+denied&state=XYZ",
        ]})

        with pytest.raises(OAuthProviderError) as exc_info:
            await _interceptor(recorder).intercept("https://account.example.test/auth")

        assert exc_info.value.error == "access_denied"
        assert exc_info.value.error_description == "User denied"
        assert recorder.surfaces[0].closed

    @pytest.mark.asyncio
    async def test_user_close_cancels_flow(self, surfaces):
        recorder = surfaces({"test": lambda url: CLOSE})

        with pytest.raises(FlowCancelledError):
            await _interceptor(recorder).intercept("https://account.example.test/auth")

        assert recorder.surfaces[0].closed

    @pytest.mark.asyncio
    async def test_close_after_redirect_is_ignored(self, surfaces):
        class CloseAfterRedirect(ScriptedSurface):
            async def open(self, url):
                await super().open(url)
                self.on_closed()

        def factory(options, on_navigation, on_closed):
            return CloseAfterRedirect(options, on_navigation, on_closed, lambda url: [f"{REDIRECT}?code=A&state=S"])

        params = await _interceptor(factory).intercept("https://account.example.test/auth")

        assert params == {"code": "A", "state": "S"}

    @pytest.mark.asyncio
    async def test_surface_closed_when_open_fails(self):
        class Broken(ScriptedSurface):
            async def open(self, url):
                raise RuntimeError("no browser")

        created = []

        def factory(options, on_navigation, on_closed):
            created.append(Broken(options, on_navigation, on_closed, lambda url: []))
            return created[0]

        with pytest.raises(RuntimeError):
            await _interceptor(factory).intercept("https://account.example.test/auth")

        assert created[0].closed

    @pytest.mark.asyncio
    async def test_concurrent_navigation_threads_complete_once(self, surfaces):
        interceptor = _interceptor(surfaces({}))
        slot = CompletionSlot(asyncio.get_running_loop())
        decisions = []
        start = threading.Barrier(8)

        def fire(index):
            start.wait()
            decisions.append(interceptor.handle_navigation(slot, f"{REDIRECT}?code=C{index}&state=S"))

        threads = [threading.Thread(target=fire, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        params = await asyncio.wait_for(slot.wait(), timeout=1)

        assert params["state"] == "S"
        assert decisions.count(NavigationDecision.CANCEL) == 1
        assert decisions.count(NavigationDecision.ALLOW) == 7
        assert slot.taken


@pytest.mark.asyncio
async def test_authorize_returns_code_and_state(metadata, surfaces):
    flow: AuthFlow = create_authorization_flow(metadata, redirect_uri=REDIRECT)
    recorder = surfaces({"auth": lambda url: [f"{REDIRECT}?code=ABC&state={query_param(url, 'state')}"]})

    code, state = await authorize(flow, recorder, WindowGeometry(x=100, y=50, width=800, height=600))

    surface = recorder.surfaces[0]
    assert (code, state) == ("ABC", flow.csrf_token)
    assert surface.opened_url == flow.authorization_url
    assert surface.options.visible
    assert surface.options.position == (100 + 800 + AUTH_WINDOW_OFFSET, 50)
