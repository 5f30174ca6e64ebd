"""Tests for the knowledge service client."""

import asyncio
import json

import httpx
import pytest

from mnemos.memory import Fact, FactStoreClient

BASE_URL = "http://zep.test"


def memory_payload(facts=None, summary=None) -> dict:
    data: dict = {"relevant_facts": facts if facts is not None else []}
    if summary is not None:
        data["summary"] = {"content": summary}
    return data


def make_client(handler, api_key: str | None = "secret") -> FactStoreClient:
    return FactStoreClient(BASE_URL, api_key=api_key, transport=httpx.MockTransport(handler))


class TestFetchFacts:
    """Tests for fetch_facts."""

    @pytest.mark.asyncio
    async def test_returns_facts_in_order(self):
        """Facts are decoded and kept in the order received."""
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v2/sessions/s-1/memory"
            return httpx.Response(200, json=memory_payload([
                {"uuid": "1", "fact": "B fact", "rating": 0.2},
                {"uuid": "2", "fact": "A fact", "rating": 0.9},
            ]))

        facts = await make_client(handler).fetch_facts("s-1")

        assert [f.text for f in facts] == ["B fact", "A fact"]
        assert all(isinstance(f, Fact) for f in facts)

    @pytest.mark.asyncio
    async def test_sends_api_key_header(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=memory_payload())

        await make_client(handler, api_key="k-123").fetch_facts("s-1")
        assert seen["auth"] == "Api-Key k-123"

    @pytest.mark.asyncio
    async def test_no_auth_header_without_key(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json=memory_payload())

        await make_client(handler, api_key=None).fetch_facts("s-1")
        assert seen["auth"] is None

    @pytest.mark.asyncio
    async def test_base_url_trailing_slash(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v2/sessions/s-9/memory"
            return httpx.Response(200, json=memory_payload([{"fact": "x"}]))

        client = FactStoreClient(BASE_URL + "/", transport=httpx.MockTransport(handler))
        assert client.base_url == BASE_URL
        assert len(await client.fetch_facts("s-9")) == 1

    @pytest.mark.asyncio
    async def test_session_id_escaped(self):
        """Reserved characters in a session id stay inside one path segment."""
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["raw_path"] = request.url.raw_path
            return httpx.Response(200, json=memory_payload([{"fact": "x"}]))

        facts = await make_client(handler).fetch_facts("team/42?x=1#frag")

        assert len(facts) == 1
        raw_path = seen["raw_path"]
        assert raw_path.startswith(b"/api/v2/sessions/team%2F42%3F")
        assert raw_path.endswith(b"%23frag/memory")

    @pytest.mark.asyncio
    async def test_timeout_returns_empty(self):
        """A timeout yields no facts instead of an error."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        assert await make_client(handler).fetch_facts("s-1") == []

    @pytest.mark.asyncio
    async def test_connection_error_returns_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        assert await make_client(handler).fetch_facts("s-1") == []

    @pytest.mark.asyncio
    async def test_server_error_returns_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500, text="boom")

        assert await make_client(handler).fetch_facts("s-1") == []

    @pytest.mark.asyncio
    async def test_not_found_returns_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"message": "not found"})

        assert await make_client(handler).fetch_facts("unknown") == []

    @pytest.mark.asyncio
    async def test_invalid_json_returns_empty(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>not json</html>")

        assert await make_client(handler).fetch_facts("s-1") == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [[], "text", {"relevant_facts": "nope"}, {"relevant_facts": None}, {}])
    async def test_unexpected_shapes_return_empty(self, body):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=json.dumps(body).encode())

        assert await make_client(handler).fetch_facts("s-1") == []

    @pytest.mark.asyncio
    async def test_skips_non_object_items(self):
        """Malformed entries are skipped, valid ones kept."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=memory_payload(["junk", 3, {"fact": "kept"}]))

        facts = await make_client(handler).fetch_facts("s-1")
        assert [f.text for f in facts] == ["kept"]

    @pytest.mark.asyncio
    async def test_unavailable_skips_request(self):
        """No request is issued while the service is marked unavailable."""
        calls: list = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json=memory_payload([{"fact": "x"}]))

        client = make_client(handler)
        client.mark_unavailable()

        assert await client.fetch_facts("s-1") == []
        assert calls == []

        client.mark_available()
        assert len(await client.fetch_facts("s-1")) == 1
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_cancellation_propagates(self):
        """Cancellation is not converted into an empty result."""
        async def handler(request: httpx.Request) -> httpx.Response:
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await make_client(handler).fetch_facts("s-1")


class TestCheckConnection:
    """Tests for check_connection."""

    @pytest.mark.asyncio
    async def test_success_marks_available(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/v2/sessions-ordered"
            assert request.url.params["limit"] == "1"
            return httpx.Response(200, json={"sessions": []})

        client = make_client(handler)
        client.mark_unavailable()

        assert await client.check_connection() is True
        assert client.available is True

    @pytest.mark.asyncio
    async def test_http_error_marks_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, json={"message": "unauthorized"})

        client = make_client(handler)
        assert await client.check_connection() is False
        assert client.available is False

    @pytest.mark.asyncio
    async def test_timeout_marks_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("slow", request=request)

        client = make_client(handler)
        assert await client.check_connection() is False
        assert client.available is False

    @pytest.mark.asyncio
    async def test_transport_error_marks_unavailable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = make_client(handler)
        assert await client.check_connection() is False

    def test_available_by_default(self):
        client = FactStoreClient(BASE_URL)
        assert client.available is True


class TestFetchSummary:
    """Tests for fetch_summary."""

    @pytest.mark.asyncio
    async def test_returns_summary_content(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=memory_payload(summary="They discussed invoices."))

        assert await make_client(handler).fetch_summary("s-1") == "They discussed invoices."

    @pytest.mark.asyncio
    async def test_missing_summary(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=memory_payload())

        assert await make_client(handler).fetch_summary("s-1") is None

    @pytest.mark.asyncio
    async def test_blank_summary(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=memory_payload(summary="   "))

        assert await make_client(handler).fetch_summary("s-1") is None

    @pytest.mark.asyncio
    async def test_failure_returns_none(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        assert await make_client(handler).fetch_summary("s-1") is None
