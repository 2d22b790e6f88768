import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from imagegen_hub.core.classifier import classify
from imagegen_hub.core.errors import ErrorKind
from imagegen_hub.core.transport import AiohttpTransport, NativeRequest


async def _generations(request: web.Request) -> web.Response:
    body = await request.json()
    if request.headers.get("Authorization") != "Bearer good":
        return web.json_response({"error": {"message": "invalid api key"}}, status=401)
    return web.json_response({"created": 1, "data": [{"url": f"https://img/{body['prompt']}.png"}]})


async def _plain(request: web.Request) -> web.Response:
    return web.Response(text="upstream exploded", status=502)


async def _slow(request: web.Request) -> web.Response:
    await asyncio.sleep(2)
    return web.json_response({})


def _app() -> web.Application:
    app = web.Application()
    app.router.add_post("/v1/images/generations", _generations)
    app.router.add_post("/plain", _plain)
    app.router.add_post("/slow", _slow)
    return app


@pytest.mark.asyncio
async def test_json_round_trip():
    async with TestServer(_app()) as server:
        transport = AiohttpTransport(timeout=5)
        try:
            response = await transport.call(
                NativeRequest(
                    url=str(server.make_url("/v1/images/generations")),
                    payload={"prompt": "cat"},
                    headers={"Authorization": "Bearer good"},
                )
            )
        finally:
            await transport.close()

    assert response.ok
    assert response.payload["data"][0]["url"] == "https://img/cat.png"


@pytest.mark.asyncio
async def test_error_status_is_returned_not_raised():
    async with TestServer(_app()) as server:
        transport = AiohttpTransport(timeout=5)
        try:
            rejected = await transport.call(
                NativeRequest(
                    url=str(server.make_url("/v1/images/generations")),
                    payload={"prompt": "cat"},
                    headers={"Authorization": "Bearer bad"},
                )
            )
            plain = await transport.call(NativeRequest(url=str(server.make_url("/plain"))))
        finally:
            await transport.close()

    assert rejected.status == 401
    assert rejected.payload == {"error": {"message": "invalid api key"}}
    assert plain.status == 502
    assert plain.payload is None
    assert plain.text == "upstream exploded"


@pytest.mark.asyncio
async def test_timeout_propagates_and_classifies_as_transport():
    async with TestServer(_app()) as server:
        transport = AiohttpTransport(timeout=0.2)
        try:
            with pytest.raises(asyncio.TimeoutError) as exc_info:
                await transport.call(NativeRequest(url=str(server.make_url("/slow"))))
        finally:
            await transport.close()

    assert classify(exc_info.value, "local").kind is ErrorKind.TRANSPORT


@pytest.mark.asyncio
async def test_close_is_idempotent():
    transport = AiohttpTransport()
    await transport.close()
    await transport.close()
