# tests/test_gemini_client.py
"""Tests for lexisnap.services.gemini_client"""

import json

import httpx
import pytest

from lexisnap.config.settings import AppSettings
from lexisnap.services.exceptions import GeminiAPIError
from lexisnap.services.gemini_client import (
    GeminiClient,
    candidate_text,
    describe_http_error,
    get_httpx_timeout,
)


def _settings(**overrides) -> AppSettings:
    values = {"api_key": "test-key", "model": "gemini-test", "api_base_url": "https://gemini.test/v1beta"}
    values.update(overrides)
    return AppSettings(**values)


def _text_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _sse(*payloads) -> bytes:
    return "".join(f"data: {json.dumps(p)}\r\n\r\n" for p in payloads).encode("utf-8")


def _client(handler, **overrides) -> GeminiClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GeminiClient(_settings(**overrides), http_client=http_client)


class TestHelpers:
    def test_timeout_from_number(self):
        timeout = get_httpx_timeout(30)
        assert timeout.read == 30.0
        assert timeout.connect == 10.0

    def test_timeout_from_dict(self):
        timeout = get_httpx_timeout({"read": 5, "connect": 1})
        assert timeout.read == 5
        assert timeout.connect == 1

    def test_describe_http_error_json(self):
        response = httpx.Response(400, json={"error": {"message": "API key not valid"}})
        assert describe_http_error(response) == "Gemini API error (400): API key not valid"

    def test_describe_http_error_text(self):
        response = httpx.Response(502, text="Bad gateway")
        assert describe_http_error(response) == "Gemini API error (502): Bad gateway"


class TestCandidateText:
    def test_joins_parts(self):
        payload = {"candidates": [{"content": {"parts": [{"text": "a"}, {"text": "b"}]}}]}
        assert candidate_text(payload) == "ab"

    def test_error_payload(self):
        with pytest.raises(GeminiAPIError, match="quota"):
            candidate_text({"error": {"message": "quota exceeded"}})

    def test_blocked_prompt(self):
        with pytest.raises(GeminiAPIError, match="SAFETY"):
            candidate_text({"promptFeedback": {"blockReason": "SAFETY"}})

    def test_missing_candidates_strict(self):
        with pytest.raises(GeminiAPIError):
            candidate_text({"usageMetadata": {}})

    def test_missing_candidates_lenient(self):
        assert candidate_text({"usageMetadata": {}}, strict=False) == ""

    def test_not_a_dict(self):
        with pytest.raises(GeminiAPIError):
            candidate_text([])


class TestGenerateContent:
    @pytest.mark.asyncio
    async def test_sends_key_and_body(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["key"] = request.headers.get("x-goog-api-key")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_text_payload("hello"))

        client = _client(handler)
        text = await client.generate_content([{"text": "prompt"}], generation_config={"temperature": 0})
        assert text == "hello"
        assert seen["url"] == "https://gemini.test/v1beta/models/gemini-test:generateContent"
        assert seen["key"] == "test-key"
        assert seen["body"] == {
            "contents": [{"parts": [{"text": "prompt"}]}],
            "generationConfig": {"temperature": 0},
        }

    @pytest.mark.asyncio
    async def test_http_error_maps_to_gemini_error(self):
        def handler(request):
            return httpx.Response(403, json={"error": {"message": "denied"}})

        with pytest.raises(GeminiAPIError) as exc_info:
            await _client(handler).generate_content([{"text": "p"}])
        assert exc_info.value.status_code == 403
        assert "denied" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_transport_error_maps_to_gemini_error(self):
        def handler(request):
            raise httpx.ConnectError("offline", request=request)

        with pytest.raises(GeminiAPIError):
            await _client(handler).generate_content([{"text": "p"}])

    @pytest.mark.asyncio
    async def test_timeout_maps_to_gemini_error(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(GeminiAPIError, match="timeout"):
            await _client(handler).generate_content([{"text": "p"}])

    @pytest.mark.asyncio
    async def test_invalid_json_maps_to_gemini_error(self):
        def handler(request):
            return httpx.Response(200, text="<html>")

        with pytest.raises(GeminiAPIError):
            await _client(handler).generate_content([{"text": "p"}])

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(GeminiAPIError, match="API key"):
            await _client(handler, api_key="").generate_content([{"text": "p"}])


class TestStreamGenerateContent:
    @pytest.mark.asyncio
    async def test_yields_text_per_event(self):
        seen = {}

        def handler(request):
            seen["url"] = request.url
            body = _sse(_text_payload("one"), _text_payload("two"), {"usageMetadata": {"totalTokenCount": 3}})
            return httpx.Response(200, content=body, headers={"content-type": "text/event-stream"})

        chunks = [c async for c in _client(handler).stream_generate_content([{"text": "p"}])]
        assert chunks == ["one", "two"]
        assert seen["url"].path.endswith("/models/gemini-test:streamGenerateContent")
        assert seen["url"].params["alt"] == "sse"

    @pytest.mark.asyncio
    async def test_undecodable_event_is_skipped(self):
        def handler(request):
            body = b"data: {broken\r\n\r\n" + _sse(_text_payload("ok"))
            return httpx.Response(200, content=body)

        chunks = [c async for c in _client(handler).stream_generate_content([{"text": "p"}])]
        assert chunks == ["ok"]

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        def handler(request):
            return httpx.Response(429, json={"error": {"message": "rate limited"}})

        with pytest.raises(GeminiAPIError) as exc_info:
            async for _ in _client(handler).stream_generate_content([{"text": "p"}]):
                pass
        assert exc_info.value.status_code == 429
        assert "rate limited" in exc_info.value.message


class TestClientLifecycle:
    @pytest.mark.asyncio
    async def test_injected_client_is_not_closed(self):
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        client = GeminiClient(_settings(), http_client=http_client)
        await client.aclose()
        assert http_client.is_closed is False
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_is_closed(self):
        client = GeminiClient(_settings())
        http_client = client.client
        await client.aclose()
        assert http_client.is_closed is True
