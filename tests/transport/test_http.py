"""Tests for the HTTP and console transports."""

import json

import httpx
import pytest
import respx

from conftest import settle
from events_svc.service import EventsService
from events_svc.storage.memory import InMemoryStore
from events_svc.telemetry.events import Event, EventBatch
from events_svc.transport.console import ConsoleTransport
from events_svc.transport.http import HttpTransport


COLLECTOR_URL = "https://collector.example.com/events"


def _payload(*events: tuple[str, str]) -> str:
    return EventBatch.of(Event(t, d) for t, d in events).to_json()


class TestHttpTransport:
    @pytest.mark.asyncio
    async def test_success(self):
        payload = _payload(("login", "{}"), ("название", "значение"))

        with respx.mock:
            route = respx.post(COLLECTOR_URL).mock(return_value=httpx.Response(200))
            transport = HttpTransport(server_url=COLLECTOR_URL)
            assert await transport.send(payload) is True
            await transport.close()

        request = route.calls.last.request
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/json"
        assert request.content == payload.encode("utf-8")
        assert json.loads(request.content) == {
            "events": [
                {"type": "login", "data": "{}"},
                {"type": "название", "data": "значение"},
            ]
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [201, 202, 204])
    async def test_any_2xx_is_success(self, status):
        with respx.mock:
            respx.post(COLLECTOR_URL).mock(return_value=httpx.Response(status))
            transport = HttpTransport(server_url=COLLECTOR_URL)
            assert await transport.send(_payload(("a", ""))) is True
            await transport.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 400, 404, 500, 503])
    async def test_non_2xx_is_failure(self, status, caplog):
        with respx.mock:
            respx.post(COLLECTOR_URL).mock(return_value=httpx.Response(status))
            transport = HttpTransport(server_url=COLLECTOR_URL)
            assert await transport.send(_payload(("a", ""))) is False
            await transport.close()

        assert str(status) in caplog.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [httpx.ConnectError, httpx.ReadTimeout])
    async def test_network_error_is_failure(self, error):
        with respx.mock:
            respx.post(COLLECTOR_URL).mock(side_effect=error)
            transport = HttpTransport(server_url=COLLECTOR_URL)
            assert await transport.send(_payload(("a", ""))) is False
            await transport.close()

    @pytest.mark.asyncio
    async def test_close_leaves_external_client_open(self):
        client = httpx.AsyncClient()
        transport = HttpTransport(server_url=COLLECTOR_URL, client=client)

        await transport.close()

        assert not client.is_closed
        await client.aclose()

    @pytest.mark.asyncio
    async def test_close_owned_client(self):
        transport = HttpTransport(server_url=COLLECTOR_URL)
        client = transport._get_client()

        await transport.close()

        assert client.is_closed
        assert transport.client is None


class TestServiceOverHttp:
    @pytest.mark.asyncio
    async def test_outage_then_recovery(self, clock):
        store = InMemoryStore()

        with respx.mock:
            route = respx.post(COLLECTOR_URL).mock(side_effect=[
                httpx.Response(503),
                httpx.ConnectError("connection refused"),
                httpx.Response(200),
            ])
            service = EventsService(
                transport=HttpTransport(server_url=COLLECTOR_URL),
                store=store,
                sleep=clock,
            )
            await service.initialize()

            service.track_event("open", "")
            await settle()
            await clock.advance()
            assert store.keys() == ["EVENTS_CACHE"]

            service.track_event("close", "")
            await clock.advance()
            await clock.advance()

            await service.shutdown()

        assert route.call_count == 3
        bodies = [json.loads(call.request.content) for call in route.calls]
        assert bodies[0] == {"events": [{"type": "open", "data": ""}]}
        assert bodies[2] == {
            "events": [{"type": "open", "data": ""}, {"type": "close", "data": ""}]
        }
        assert store.keys() == []


class TestConsoleTransport:
    @pytest.mark.asyncio
    async def test_prints_payload(self, capsys):
        transport = ConsoleTransport()
        payload = _payload(("login", "{}"))

        assert await transport.send(payload) is True

        out = capsys.readouterr().out
        assert out == f"[EVENTS] {payload}\n"

    @pytest.mark.asyncio
    async def test_pretty_to_stderr(self, capsys):
        transport = ConsoleTransport(stream="stderr", format="pretty", prefix="")

        await transport.send(_payload(("login", "{}")))

        err = capsys.readouterr().err
        assert json.loads(err) == {"events": [{"type": "login", "data": "{}"}]}
