"""Tests for in-process dispatch."""
import logging

import pytest

from conftest import StaticRouter
from newsdesk.trust import (
    AssembledRequest,
    CapturedResponse,
    CollaboratorError,
    DispatchError,
    Dispatcher,
    Router,
    TrustSettings,
    WsgiRouter,
)


class ExplodingRouter(Router):
    async def handle(self, request):
        raise RuntimeError("router exploded")


class TestValidation:
    """Malformed requests never reach the router."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize('request_', [
        AssembledRequest('GE T', '/'),
        AssembledRequest('', '/'),
        AssembledRequest('GET', 'account'),
        AssembledRequest('GET', '/a b'),
        AssembledRequest('GET', '/', (('X-Test', 'a\r\nSet-Cookie: x=1'),)),
        AssembledRequest('GET', '/', (('X-Test', 'a\x00'),)),
        AssembledRequest('GET', '/', (('Bad Name', 'a'),)),
    ])
    async def test_malformed_request_raises(self, request_):
        router = StaticRouter(CapturedResponse(200))

        with pytest.raises(DispatchError):
            await Dispatcher(router).dispatch(request_)

        assert router.requests == []

    @pytest.mark.asyncio
    async def test_valid_request_dispatched_once(self):
        router = StaticRouter(CapturedResponse(204))
        request = AssembledRequest('POST', '/login?next=%2F', (('Content-Type', 'text/plain'),), b'x')

        response = await Dispatcher(router).dispatch(request)

        assert response.status == 204
        assert router.requests == [request]


class TestOutcomes:
    @pytest.mark.asyncio
    async def test_server_error_is_returned_not_raised(self):
        router = StaticRouter(CapturedResponse(500, body=b'boom'))

        response = await Dispatcher(router).dispatch(AssembledRequest('GET', '/'))

        assert response.status == 500
        assert response.text == 'boom'

    @pytest.mark.asyncio
    async def test_router_failure_is_wrapped(self):
        with pytest.raises(CollaboratorError) as exc_info:
            await Dispatcher(ExplodingRouter()).dispatch(AssembledRequest('GET', '/'))

        assert isinstance(exc_info.value.cause, RuntimeError)
        assert exc_info.value.__cause__ is exc_info.value.cause

    @pytest.mark.asyncio
    @pytest.mark.parametrize('excerpt, logged', [(0, 'abcdefghij'), (4, 'abcd...')])
    async def test_body_log_honours_excerpt(self, caplog, excerpt, logged):
        caplog.set_level(logging.DEBUG, logger='newsdesk.trust.dispatcher')
        settings = TrustSettings(log_bodies=True, body_excerpt=excerpt)
        router = StaticRouter(CapturedResponse(200, body=b'abcdefghij'))

        await Dispatcher(router, settings).dispatch(AssembledRequest('GET', '/'))

        assert f'Response body: {logged!r}' in caplog.messages


class TestCapturedResponse:
    def test_header_lookup_is_case_insensitive(self):
        response = CapturedResponse(303, (('Location', '/account'), ('Set-Cookie', 'a=1'), ('set-cookie', 'b=2')))

        assert response.header('location') == '/account'
        assert response.header_all('Set-Cookie') == ['a=1', 'b=2']
        assert response.header('X-Missing') is None
        assert response.is_redirect
        assert not response.is_success


class TestWsgiRouter:
    """The Flask app answers through the WSGI adapter."""

    @pytest.mark.asyncio
    async def test_health_endpoint(self, app):
        response = await Dispatcher(WsgiRouter(app)).dispatch(AssembledRequest('GET', '/health'))

        assert response.status == 200
        assert response.header('Content-Type') == 'application/json'
        assert b'"ok"' in response.body

    @pytest.mark.asyncio
    async def test_redirects_are_not_followed(self, app):
        response = await Dispatcher(WsgiRouter(app)).dispatch(AssembledRequest('GET', '/account'))

        assert response.status == 303
        assert response.header('Location') == '/login'

    @pytest.mark.asyncio
    async def test_unknown_route_is_404(self, app):
        response = await Dispatcher(WsgiRouter(app)).dispatch(AssembledRequest('GET', '/no/such/page'))

        assert response.status == 404
