from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator

import aiohttp
import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from eesadmin._constants import AUTH_FAILED_MESSAGE, STORAGE_KEY_TOKEN
from eesadmin._transport import HttpTransport
from eesadmin.config import EesConfig
from eesadmin.credentials import CredentialContext, Credentials
from eesadmin.storage import MemoryStorage


async def _echo(request: web.Request) -> web.Response:
    return web.json_response(
        {
            "success": True,
            "method": request.method,
            "auth": request.headers.get("x-admin-auth"),
            "contentType": request.headers.get("Content-Type"),
            "query": dict(request.query),
            "body": await request.text() if request.can_read_body else None,
        }
    )


async def _upload(request: web.Request) -> web.Response:
    form = await request.post()
    image = form.get("mapImage")
    return web.json_response(
        {
            "success": True,
            "data": {
                "fields": sorted(form.keys()),
                "nodes": form.get("nodes"),
                "filename": getattr(image, "filename", None),
                "contentType": request.headers.get("Content-Type"),
            },
        }
    )


async def _floors(_request: web.Request) -> web.Response:
    return web.json_response({"success": True, "data": [{"id": "f1", "name": "Lobby"}]})


async def _floor(_request: web.Request) -> web.Response:
    return web.json_response({"success": True, "data": {"data": {"id": "f1"}, "message": "Floor found"}})


async def _records(_request: web.Request) -> web.Response:
    return web.json_response(
        {"success": True, "data": {"data": [{"_id": "r1"}], "totalCount": 1, "page": 1, "totalPages": 1}}
    )


async def _forbidden(_request: web.Request) -> web.Response:
    return web.json_response({"success": False, "message": "token mismatch"}, status=403)


async def _server_error(_request: web.Request) -> web.Response:
    return web.json_response({"success": False, "data": {"message": "database unavailable"}}, status=500)


async def _bad_gateway(_request: web.Request) -> web.Response:
    return web.Response(text="upstream exploded", status=502)


async def _slow(_request: web.Request) -> web.Response:
    await asyncio.sleep(1.0)
    return web.json_response({"success": True})


async def _unavailable(_request: web.Request) -> web.Response:
    return web.json_response({"ready": False, "reason": "database_disconnected"}, status=503)


@pytest_asyncio.fixture
async def server() -> AsyncIterator[TestServer]:
    app = web.Application()
    app.router.add_route("*", "/echo", _echo)
    app.router.add_post("/upload", _upload)
    app.router.add_get("/api/floors", _floors)
    app.router.add_get("/api/floors/f1", _floor)
    app.router.add_get("/api/records", _records)
    app.router.add_get("/forbidden", _forbidden)
    app.router.add_get("/error", _server_error)
    app.router.add_get("/bad-gateway", _bad_gateway)
    app.router.add_get("/slow", _slow)
    app.router.add_get("/unavailable", _unavailable)
    async with TestServer(app) as srv:
        yield srv


@pytest_asyncio.fixture
async def http_session() -> AsyncIterator[aiohttp.ClientSession]:
    async with aiohttp.ClientSession() as session:
        yield session


def _base_url(server: TestServer) -> str:
    return str(server.make_url("")).rstrip("/")


def _transport(
    http_session: aiohttp.ClientSession,
    base_url: str,
    *,
    token: str | None = "secret",
    timeout: float = 5.0,
) -> tuple[HttpTransport, CredentialContext, MemoryStorage]:
    storage = MemoryStorage({STORAGE_KEY_TOKEN: token} if token else None)
    credentials = CredentialContext(storage, default_base_url=base_url)
    config = EesConfig(base_url=base_url, timeout=timeout)
    return HttpTransport(config, http_session, credentials), credentials, storage


@pytest.mark.asyncio
async def test_attaches_token_and_json_content_type(server: TestServer, http_session: aiohttp.ClientSession) -> None:
    transport, _, _ = _transport(http_session, _base_url(server))

    result = await transport.request("POST", "/echo", body={"floorId": "f1"})

    assert result.success is True
    assert result.error is None
    assert result.status == 200
    assert result.data["auth"] == "secret"
    assert result.data["contentType"] == "application/json"
    assert result.data["body"] == '{"floorId": "f1"}'


@pytest.mark.asyncio
async def test_token_is_read_on_every_call(server: TestServer, http_session: aiohttp.ClientSession) -> None:
    transport, credentials, _ = _transport(http_session, _base_url(server))

    first = await transport.request("GET", "/echo")
    credentials.set(token="rotated")
    second = await transport.request("GET", "/echo")

    assert first.data["auth"] == "secret"
    assert second.data["auth"] == "rotated"


@pytest.mark.asyncio
async def test_none_query_values_are_omitted(server: TestServer, http_session: aiohttp.ClientSession) -> None:
    transport, _, _ = _transport(http_session, _base_url(server))

    result = await transport.request("GET", "/echo", query={"floorId": "f1", "cameraId": None, "page": 2})

    assert result.data["query"] == {"floorId": "f1", "page": "2"}


@pytest.mark.asyncio
async def test_multipart_body_keeps_boundary_content_type(
    server: TestServer,
    http_session: aiohttp.ClientSession,
) -> None:
    transport, _, _ = _transport(http_session, _base_url(server))
    form = aiohttp.FormData()
    form.add_field("id", "f1")
    form.add_field("nodes", '[{"id": "N1"}]')
    form.add_field("mapImage", b"\xff\xd8jpeg", filename="f1.jpg", content_type="image/jpeg")

    result = await transport.request("POST", "/upload", body=form, binary_body=True)

    assert result.success is True
    assert result.data["contentType"].startswith("multipart/form-data")
    assert result.data["fields"] == ["id", "mapImage", "nodes"]
    assert result.data["nodes"] == '[{"id": "N1"}]'
    assert result.data["filename"] == "f1.jpg"


@pytest.mark.asyncio
async def test_success_envelopes_are_normalized(server: TestServer, http_session: aiohttp.ClientSession) -> None:
    transport, _, _ = _transport(http_session, _base_url(server))

    floors = await transport.request("GET", "/api/floors")
    floor = await transport.request("GET", "/api/floors/f1")
    records = await transport.request("GET", "/api/records")

    assert floors.data == [{"id": "f1", "name": "Lobby"}]
    assert floors.message == "Success"
    assert floor.data == {"id": "f1"}
    assert floor.message == "Floor found"
    assert records.data["totalCount"] == 1
    assert records.data["data"] == [{"_id": "r1"}]


@pytest.mark.asyncio
async def test_forbidden_purges_token_and_uses_fixed_message(
    server: TestServer,
    http_session: aiohttp.ClientSession,
) -> None:
    transport, credentials, storage = _transport(http_session, _base_url(server))

    result = await transport.request("GET", "/forbidden")

    assert result.success is False
    assert result.status == 403
    assert result.error == AUTH_FAILED_MESSAGE
    assert credentials.get().token is None
    assert storage.get(STORAGE_KEY_TOKEN) is None
    assert credentials.auth_failure == AUTH_FAILED_MESSAGE


@pytest.mark.asyncio
async def test_server_error_uses_nested_message(server: TestServer, http_session: aiohttp.ClientSession) -> None:
    transport, credentials, _ = _transport(http_session, _base_url(server))

    result = await transport.request("GET", "/error")

    assert result.success is False
    assert result.status == 500
    assert result.error == "database unavailable"
    assert credentials.get().token == "secret"


@pytest.mark.asyncio
async def test_non_json_error_falls_back_to_status_line(
    server: TestServer,
    http_session: aiohttp.ClientSession,
) -> None:
    transport, _, _ = _transport(http_session, _base_url(server))

    result = await transport.request("GET", "/bad-gateway")

    assert result.success is False
    assert result.status == 502
    assert result.error == "HTTP 502: Bad Gateway"
    assert result.data is None


@pytest.mark.asyncio
async def test_timeout_resolves_to_status_zero(server: TestServer, http_session: aiohttp.ClientSession) -> None:
    transport, _, _ = _transport(http_session, _base_url(server), timeout=0.1)

    result = await transport.request("GET", "/slow")

    assert result.success is False
    assert result.status == 0
    assert "timed out" in result.error


@pytest.mark.asyncio
async def test_connection_failure_resolves_to_status_zero(http_session: aiohttp.ClientSession) -> None:
    transport, _, _ = _transport(http_session, "http://127.0.0.1:1")

    result = await transport.request("GET", "/api/floors")

    assert result.success is False
    assert result.status == 0
    assert result.error
    assert result.message == result.error


@pytest.mark.asyncio
async def test_flat_error_body_is_kept_as_data(server: TestServer, http_session: aiohttp.ClientSession) -> None:
    transport, _, _ = _transport(http_session, _base_url(server))

    result = await transport.request("GET", "/unavailable")

    assert result.success is False
    assert result.status == 503
    assert result.error == "HTTP 503: Service Unavailable"
    assert result.data == {"ready": False, "reason": "database_disconnected"}


@pytest.mark.asyncio
async def test_pasted_token_is_trimmed_before_use(server: TestServer, http_session: aiohttp.ClientSession) -> None:
    transport, credentials, _ = _transport(http_session, _base_url(server))

    credentials.set(token="pasted\n")
    result = await transport.request("GET", "/echo")

    assert credentials.get().token == "pasted"
    assert result.success is True
    assert result.data["auth"] == "pasted"


class _RawCredentials:
    def __init__(self, base_url: str, token: str) -> None:
        self._credentials = Credentials.model_construct(base_url=base_url, token=token)
        self.invalidated = False

    def get(self) -> Credentials:
        return self._credentials

    def invalidate_token(self) -> None:
        self.invalidated = True


@pytest.mark.asyncio
async def test_unsendable_header_resolves_to_status_zero(
    server: TestServer,
    http_session: aiohttp.ClientSession,
) -> None:
    base_url = _base_url(server)
    credentials = _RawCredentials(base_url, "abc\n")
    transport = HttpTransport(EesConfig(base_url=base_url, timeout=5.0), http_session, credentials)

    result = await transport.request("GET", "/echo")

    assert result.success is False
    assert result.status == 0
    assert result.error
    assert credentials.invalidated is False
