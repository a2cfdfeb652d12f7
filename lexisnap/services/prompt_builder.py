# lexisnap/services/prompt_builder.py
"""
Builds the Gemini prompts used by LexiSnap.

- extraction: OCR / text extraction from an inline image or PDF
- stream translation: one JSON object per line (JSON Lines), so rows can be
  shown as soon as each line completes
- batch translation: a single JSON array, constrained by a response schema
"""

import json
from typing import Sequence


EXTRACTION_INSTRUCTION = (
    "Extract all text from this document. "
    "Respond only with the extracted text, preserving formatting and line breaks."
)

# Sentinel the model must use when no dictionary transcription exists
PHONETIC_NOT_AVAILABLE = "not available"

PHONETIC_RULES = f"""Phonetic rules:
- Take the IPA transcription from the Cambridge Dictionary (https://dictionary.cambridge.org).
- For multi-word phrases, join the transcription of each word with spaces.
- If the Cambridge Dictionary has no transcription, write "{PHONETIC_NOT_AVAILABLE}". Never invent one."""

STREAM_TEMPLATE = """For each of the following English phrases (one per line), provide the Vietnamese translation and the IPA phonetic transcription.

Phrases:
{phrases}

{phonetic_rules}

Output format:
- Write exactly one JSON object per input phrase, each on its own line (JSON Lines).
- Do not wrap the output in an array or in Markdown code fences. Write nothing else.
- Each object has the keys {keys}.
- The "english" value must exactly match the input phrase.
{detail_rules}"""

BATCH_TEMPLATE = """For the following list of English phrases, provide the Vietnamese translation and the IPA phonetic transcription for each phrase.

Phrases:
{phrases}

{phonetic_rules}

Return the result as a valid JSON array of objects. Each object must have the keys {keys}. The 'english' key must exactly match the input phrase.
{detail_rules}"""

DETAIL_RULES = """- "wordType" is the part of speech in Vietnamese (e.g. "danh từ", "động từ", "cụm từ").
- "example" is one short English example sentence using the phrase, followed by its Vietnamese translation in parentheses."""

_BASE_KEYS = ("english", "phonetic", "vietnamese")
_DETAIL_KEYS = ("wordType", "example")


class PromptBuilder:
    """Builds extraction and translation prompts."""

    def __init__(self, include_word_details: bool = True):
        self.include_word_details = include_word_details

    @property
    def record_keys(self) -> tuple[str, ...]:
        if self.include_word_details:
            return _BASE_KEYS + _DETAIL_KEYS
        return _BASE_KEYS

    def build_extraction_prompt(self) -> str:
        return EXTRACTION_INSTRUCTION

    @staticmethod
    def _format_phrases(texts: Sequence[str]) -> str:
        # json.dumps quotes and escapes embedded quotes/newlines
        return "\n".join(f"- {json.dumps(text, ensure_ascii=False)}" for text in texts)

    def _format_keys(self) -> str:
        return ", ".join(f'"{key}"' for key in self.record_keys)

    def build_stream_translation_prompt(self, texts: Sequence[str]) -> str:
        return STREAM_TEMPLATE.format(
            phrases=self._format_phrases(texts),
            phonetic_rules=PHONETIC_RULES,
            keys=self._format_keys(),
            detail_rules=DETAIL_RULES if self.include_word_details else "",
        ).rstrip() + "\n"

    def build_batch_translation_prompt(self, texts: Sequence[str]) -> str:
        return BATCH_TEMPLATE.format(
            phrases=self._format_phrases(texts),
            phonetic_rules=PHONETIC_RULES,
            keys=self._format_keys(),
            detail_rules=DETAIL_RULES if self.include_word_details else "",
        ).rstrip() + "\n"

    def build_batch_response_schema(self) -> dict:
        """Gemini responseSchema for the batch variant"""
        descriptions = {
            "english": "The original English phrase.",
            "phonetic": "The IPA phonetic transcription of the English phrase.",
            "vietnamese": "The Vietnamese translation of the phrase.",
            "wordType": "The part of speech, in Vietnamese.",
            "example": "A short example sentence with its Vietnamese translation.",
        }
        return {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    key: {"type": "STRING", "description": descriptions[key]}
                    for key in self.record_keys
                },
                "required": list(_BASE_KEYS),
            },
        }
