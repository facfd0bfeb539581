"""Tests for AiohttpTransport against a local aiohttp server."""

import json

import pytest
from aiohttp import test_utils, web
from reqchain import (
    AiohttpTransport,
    Header,
    HttpClient,
    Method,
    Request,
    TransportError,
)


async def echo_handler(request: web.Request) -> web.Response:
    body = await request.read()
    return web.Response(body=body, content_type=request.content_type)


async def headers_handler(request: web.Request) -> web.Response:
    return web.json_response({"x-token": request.headers.get("X-Token"), "method": request.method})


async def redirect_handler(request: web.Request) -> web.Response:
    raise web.HTTPFound("/echo")


async def large_handler(request: web.Request) -> web.Response:
    return web.Response(body=b"x" * 4096)


def make_app() -> web.Application:
    app = web.Application()
    app.router.add_route("*", "/echo", echo_handler)
    app.router.add_route("*", "/headers", headers_handler)
    app.router.add_get("/redirect", redirect_handler)
    app.router.add_get("/large", large_handler)
    return app


class TestAiohttpTransport:
    """Tests for AiohttpTransport."""

    @pytest.mark.asyncio
    async def test_round_trip(self):
        """Test a JSON body through a real server."""
        async with test_utils.TestServer(make_app()) as server:
            async with AiohttpTransport() as transport:
                client = HttpClient(transport=transport)

                result = await client.fetch(str(server.make_url("/echo")), Method.POST, {"a": [1, 2]})

        assert result == {"a": [1, 2]}

    @pytest.mark.asyncio
    async def test_headers_and_method(self):
        async with test_utils.TestServer(make_app()) as server:
            async with AiohttpTransport() as transport:
                request = Request(
                    str(server.make_url("/headers")),
                    Method.PUT,
                    headers=(Header("X-Token", "abc"),),
                )

                response = await transport.send(request.prepare(), timeout=5)

        assert response.status_code == 200
        assert json.loads(response.body) == {"x-token": "abc", "method": "PUT"}
        assert response.headers

    @pytest.mark.asyncio
    async def test_follow_redirects(self):
        """Test redirects are followed unless disabled."""
        async with test_utils.TestServer(make_app()) as server:
            async with AiohttpTransport() as transport:
                url = str(server.make_url("/redirect"))

                followed = await transport.send(Request(url).prepare(), timeout=5)
                stopped = await transport.send(Request(url, follow_redirects=False).prepare(), timeout=5)

        assert followed.status_code == 200
        assert followed.url.endswith("/echo")
        assert stopped.status_code == 302
        assert stopped.url.endswith("/redirect")

    @pytest.mark.asyncio
    async def test_content_size_limit(self):
        async with test_utils.TestServer(make_app()) as server:
            async with AiohttpTransport(max_content_size=1024) as transport:
                client = HttpClient(transport=transport)

                with pytest.raises(TransportError) as exc_info:
                    await client.send(Request(str(server.make_url("/large"))))

        assert isinstance(exc_info.value.cause, ValueError)

    @pytest.mark.asyncio
    async def test_connection_refused(self):
        """Test an unreachable host becomes a TransportError."""
        server = test_utils.TestServer(make_app())
        await server.start_server()
        url = str(server.make_url("/echo"))
        await server.close()

        async with HttpClient() as client:
            with pytest.raises(TransportError):
                await client.send(Request(url))

    @pytest.mark.asyncio
    async def test_owned_session_closed(self):
        transport = AiohttpTransport()
        session = transport._ensure_session()

        await transport.close()

        assert session.closed
