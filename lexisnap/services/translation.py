# lexisnap/services/translation.py
"""
Snippet translation via Gemini.

Two delivery variants share the same translate(texts, on_result) seam:
- TranslationStreamConsumer: streams JSON Lines and hands every record to
  on_result as soon as its line is complete (arrival order, not input order)
- BatchTranslator: one request, one JSON array, then every record in turn
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional, Sequence

from lexisnap.models.types import RecordCallback, TranslationRecord
from lexisnap.services.exceptions import (
    InvalidResponseFormatError,
    LexiSnapError,
    TranslationStreamFailedError,
)
from lexisnap.services.gemini_client import GeminiClient
from lexisnap.services.prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)


_RE_CODE_FENCE = re.compile(r"^\s*```(?:json|jsonl)?\s*$", re.IGNORECASE)

TRANSLATION_FAILED_MESSAGE = "Translation failed. Please try again."
INVALID_FORMAT_MESSAGE = "The translation service returned an invalid format. Please try again."


class RecordStreamAssembler:
    """
    Reassembles newline-delimited JSON records from arbitrary text chunks.

    Every line but the last of the buffer is complete; the last one is kept
    until the next chunk (or finish()) completes it. Lines that fail to parse
    are logged and dropped without affecting their neighbours.
    """

    def __init__(self) -> None:
        self._buffer = ""

    @property
    def pending(self) -> str:
        """Text received but not yet terminated by a newline"""
        return self._buffer

    def feed(self, chunk: str) -> list[Any]:
        """Append chunk and return the records completed by it."""
        self._buffer += chunk
        lines = self._buffer.split("\n")
        self._buffer = lines.pop()
        return self._parse_lines(lines)

    def finish(self) -> list[Any]:
        """Parse whatever is left once the stream has ended."""
        remainder, self._buffer = self._buffer, ""
        return self._parse_lines([remainder])

    def _parse_lines(self, lines: list[str]) -> list[Any]:
        records = []
        for line in lines:
            record = parse_record_line(line)
            if record is not None:
                records.append(record)
        return records


def parse_record_line(line: str) -> Optional[Any]:
    """Decode one line; None for blank, fence or malformed lines."""
    stripped = line.strip()
    if not stripped or _RE_CODE_FENCE.match(stripped):
        return None
    # Tolerate array-style output ("{...},") from models ignoring the format
    candidate = stripped.rstrip(",").rstrip()
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning("Discarding malformed record line %r: %s", stripped[:200], e)
        return None


def to_translation_record(raw: Any) -> Optional[TranslationRecord]:
    """Validate a decoded record; None (logged) when it is structurally invalid."""
    try:
        return TranslationRecord.from_dict(raw)
    except ValueError as e:
        logger.warning("Discarding invalid translation record %r: %s", raw, e)
        return None


def parse_record_array(raw_content: str) -> list[TranslationRecord]:
    """Parse a batch response holding one JSON array of records.

    Raises:
        InvalidResponseFormatError: no array delimiters, or undecodable array.
    """
    start = raw_content.find("[")
    end = raw_content.rfind("]")
    if start == -1 or end <= start:
        logger.error("No JSON array in translation response: %r", raw_content[:200])
        raise InvalidResponseFormatError(INVALID_FORMAT_MESSAGE)

    try:
        items = json.loads(raw_content[start : end + 1])
    except json.JSONDecodeError as e:
        logger.error("Failed to parse translation JSON array: %s", e)
        raise InvalidResponseFormatError(INVALID_FORMAT_MESSAGE) from e
    if not isinstance(items, list):
        raise InvalidResponseFormatError(INVALID_FORMAT_MESSAGE)

    records = []
    for item in items:
        record = to_translation_record(item)
        if record is not None:
            records.append(record)
    return records


class TranslationStreamConsumer:
    """Requests translations and delivers each record as soon as it arrives."""

    def __init__(self, gemini: GeminiClient, prompt_builder: PromptBuilder):
        self.gemini = gemini
        self.prompt_builder = prompt_builder

    async def translate(self, texts: Sequence[str], on_result: RecordCallback) -> int:
        """Stream translations for texts into on_result.

        Returns:
            Number of records delivered.

        Raises:
            TranslationStreamFailedError: transport failure. Records delivered
                before the failure are not rolled back.
        """
        if not texts:
            return 0

        prompt = self.prompt_builder.build_stream_translation_prompt(texts)
        logger.info("Streaming translation of %d snippets", len(texts))
        logger.debug("Translation prompt:\n%s", prompt)

        assembler = RecordStreamAssembler()
        delivered = 0
        try:
            async for chunk in self.gemini.stream_generate_content([{"text": prompt}]):
                for raw in assembler.feed(chunk):
                    delivered += self._deliver(raw, on_result)
        except LexiSnapError as e:
            logger.error("Translation stream failed after %d records: %s", delivered, e)
            raise TranslationStreamFailedError(f"{TRANSLATION_FAILED_MESSAGE} ({e.message})") from e

        for raw in assembler.finish():
            delivered += self._deliver(raw, on_result)

        if delivered != len(texts):
            logger.warning("Expected %d records, received %d", len(texts), delivered)
        else:
            logger.info("Received %d records", delivered)
        return delivered

    @staticmethod
    def _deliver(raw: Any, on_result: RecordCallback) -> int:
        record = to_translation_record(raw)
        if record is None:
            return 0
        on_result(record)
        return 1

    async def translate_batch(self, texts: Sequence[str]) -> list[TranslationRecord]:
        """Request all translations at once as a JSON array.

        Raises:
            TranslationStreamFailedError: transport failure
            InvalidResponseFormatError: the payload holds no decodable array
        """
        if not texts:
            return []

        prompt = self.prompt_builder.build_batch_translation_prompt(texts)
        generation_config = {
            "responseMimeType": "application/json",
            "responseSchema": self.prompt_builder.build_batch_response_schema(),
        }
        logger.info("Batch translation of %d snippets", len(texts))
        try:
            raw_content = await self.gemini.generate_content(
                [{"text": prompt}], generation_config=generation_config
            )
        except LexiSnapError as e:
            logger.error("Batch translation request failed: %s", e)
            raise TranslationStreamFailedError(f"{TRANSLATION_FAILED_MESSAGE} ({e.message})") from e

        records = parse_record_array(raw_content)
        logger.info("Received %d records (batch)", len(records))
        return records


class BatchTranslator:
    """Adapts translate_batch() to the translate(texts, on_result) seam."""

    def __init__(self, consumer: TranslationStreamConsumer):
        self.consumer = consumer

    async def translate(self, texts: Sequence[str], on_result: RecordCallback) -> int:
        records = await self.consumer.translate_batch(texts)
        for record in records:
            on_result(record)
        return len(records)
