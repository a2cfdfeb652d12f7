# lexisnap/services/gemini_client.py
"""
Async Gemini REST client.

Wraps the two endpoints LexiSnap needs:
- models/{model}:generateContent          (single JSON response)
- models/{model}:streamGenerateContent    (Server-Sent Events, alt=sse)

Every failure surfaces as GeminiAPIError so callers only handle one type.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Optional

import httpx

from lexisnap.config.settings import AppSettings
from lexisnap.services.exceptions import GeminiAPIError

logger = logging.getLogger(__name__)


def get_httpx_timeout(timeout_config: Any) -> httpx.Timeout:
    """
    Convert timeout configuration to httpx.Timeout object.

    Args:
        timeout_config: Either a number (read timeout) or a dict with
            connect, write, read, pool keys
    """
    if isinstance(timeout_config, dict):
        return httpx.Timeout(
            connect=timeout_config.get('connect', 10.0),
            write=timeout_config.get('write', 60.0),
            read=timeout_config.get('read', 120.0),
            pool=timeout_config.get('pool', 10.0),
        )
    timeout_value = float(timeout_config) if timeout_config else 120.0
    return httpx.Timeout(connect=10.0, write=60.0, read=timeout_value, pool=10.0)


def describe_http_error(response: httpx.Response) -> str:
    """Build a short message from an error response body."""
    error_text = "Unknown error"
    try:
        error_json = response.json()
        if isinstance(error_json, dict) and "error" in error_json:
            error_detail = error_json["error"]
            if isinstance(error_detail, dict):
                error_text = error_detail.get("message", str(error_detail))
            else:
                error_text = str(error_detail)
    except (ValueError, httpx.ResponseNotRead):
        error_text = response.text[:500] if response.content else "No details"
    return f"Gemini API error ({response.status_code}): {error_text}"


def candidate_text(payload: Any, *, strict: bool = True) -> str:
    """Concatenate the text parts of the first candidate.

    With strict=False (streaming), events without candidates (e.g. a trailing
    usage-metadata event) yield "" instead of raising.
    """
    if not isinstance(payload, dict):
        raise GeminiAPIError("Unexpected Gemini API response format")
    if "error" in payload:
        error = payload["error"]
        message = error.get("message", str(error)) if isinstance(error, dict) else str(error)
        raise GeminiAPIError(f"Gemini API error: {message}")

    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        block_reason = (payload.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise GeminiAPIError(f"Request blocked by Gemini ({block_reason})")
        if strict:
            raise GeminiAPIError("Unexpected Gemini API response format (no candidates)")
        return ""

    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        if strict:
            raise GeminiAPIError("Unexpected Gemini API response format (no content parts)")
        return ""
    return "".join(
        part["text"] for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    )


class GeminiClient:
    """Thin async wrapper over the Gemini REST API."""

    def __init__(self, settings: AppSettings, http_client: Optional[httpx.AsyncClient] = None):
        self.settings = settings
        self._client = http_client
        self._owns_client = http_client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=get_httpx_timeout(self.settings.request_timeout))
        return self._client

    def _endpoint(self, method: str) -> str:
        return f"{self.settings.api_base_url}/models/{self.settings.model}:{method}"

    def _headers(self) -> dict[str, str]:
        if not self.settings.has_api_key:
            raise GeminiAPIError("Gemini API key not configured. Set GEMINI_API_KEY and restart.")
        return {
            "x-goog-api-key": self.settings.api_key,
            "Content-Type": "application/json",
        }

    @staticmethod
    def _body(parts: list[dict], generation_config: Optional[dict]) -> dict:
        body: dict[str, Any] = {"contents": [{"parts": parts}]}
        if generation_config:
            body["generationConfig"] = generation_config
        return body

    async def generate_content(
        self,
        parts: list[dict],
        *,
        generation_config: Optional[dict] = None,
    ) -> str:
        """Send one request and return the response text."""
        headers = self._headers()
        logger.debug("Calling Gemini generateContent: %s", self.settings.model)
        try:
            response = await self.client.post(
                self._endpoint("generateContent"),
                headers=headers,
                json=self._body(parts, generation_config),
            )
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Gemini API HTTP error: %s", e.response.status_code)
            raise GeminiAPIError(describe_http_error(e.response), status_code=e.response.status_code) from e
        except httpx.TimeoutException as e:
            raise GeminiAPIError("Gemini API request timeout") from e
        except httpx.HTTPError as e:
            raise GeminiAPIError(f"Gemini API call failed: {e}") from e
        except ValueError as e:
            raise GeminiAPIError(f"Gemini API returned invalid JSON: {e}") from e

        usage = result.get("usageMetadata") if isinstance(result, dict) else None
        if usage:
            logger.debug("Gemini usageMetadata: %s", usage)
        return candidate_text(result)

    async def stream_generate_content(
        self,
        parts: list[dict],
        *,
        generation_config: Optional[dict] = None,
    ) -> AsyncIterator[str]:
        """Stream the response text chunk by chunk (SSE)."""
        headers = self._headers()
        logger.debug("Calling Gemini streamGenerateContent: %s", self.settings.model)
        try:
            async with self.client.stream(
                "POST",
                self._endpoint("streamGenerateContent"),
                params={"alt": "sse"},
                headers=headers,
                json=self._body(parts, generation_config),
            ) as response:
                if response.is_error:
                    await response.aread()
                    logger.error("Gemini API HTTP error: %s", response.status_code)
                    raise GeminiAPIError(describe_http_error(response), status_code=response.status_code)
                async for line in response.aiter_lines():
                    text = self._parse_sse_line(line)
                    if text:
                        yield text
        except httpx.TimeoutException as e:
            raise GeminiAPIError("Gemini API stream timed out") from e
        except httpx.HTTPError as e:
            raise GeminiAPIError(f"Gemini API stream interrupted: {e}") from e

    @staticmethod
    def _parse_sse_line(line: str) -> str:
        """Return the text carried by one SSE line ("" for non-data lines)."""
        line = line.strip()
        if not line.startswith("data:"):
            return ""
        data = line[len("data:"):].strip()
        if not data or data == "[DONE]":
            return ""
        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            logger.warning("Skipping undecodable SSE event: %r", data[:200])
            return ""
        return candidate_text(payload, strict=False)

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None
