# tests/test_prompt_builder.py
"""Tests for lexisnap.services.prompt_builder"""

from lexisnap.services.prompt_builder import (
    EXTRACTION_INSTRUCTION,
    PHONETIC_NOT_AVAILABLE,
    PromptBuilder,
)


class TestExtractionPrompt:
    def test_extraction_prompt(self):
        prompt = PromptBuilder().build_extraction_prompt()
        assert prompt == EXTRACTION_INSTRUCTION
        assert "preserving formatting and line breaks" in prompt


class TestStreamTranslationPrompt:
    def test_lists_every_phrase_in_order(self):
        prompt = PromptBuilder().build_stream_translation_prompt(["first", "second"])
        assert prompt.index('- "first"') < prompt.index('- "second"')

    def test_requests_json_lines(self):
        prompt = PromptBuilder().build_stream_translation_prompt(["apple"])
        assert "one JSON object per input phrase" in prompt
        assert "code fences" in prompt

    def test_phonetic_rules(self):
        prompt = PromptBuilder().build_stream_translation_prompt(["apple"])
        assert "Cambridge Dictionary" in prompt
        assert f'"{PHONETIC_NOT_AVAILABLE}"' in prompt

    def test_phrases_are_escaped(self):
        prompt = PromptBuilder().build_stream_translation_prompt(['say "hi"\nnow'])
        assert '- "say \\"hi\\"\\nnow"' in prompt

    def test_non_ascii_kept(self):
        prompt = PromptBuilder().build_stream_translation_prompt(["café"])
        assert '"café"' in prompt

    def test_word_details_toggle(self):
        with_details = PromptBuilder(include_word_details=True).build_stream_translation_prompt(["a"])
        without = PromptBuilder(include_word_details=False).build_stream_translation_prompt(["a"])
        assert '"wordType"' in with_details
        assert '"example"' in with_details
        assert '"wordType"' not in without
        assert '"example"' not in without


class TestBatchTranslationPrompt:
    def test_requests_array(self):
        prompt = PromptBuilder().build_batch_translation_prompt(["apple"])
        assert "JSON array" in prompt
        assert '- "apple"' in prompt

    def test_response_schema_requires_base_keys(self):
        schema = PromptBuilder().build_batch_response_schema()
        assert schema["type"] == "ARRAY"
        items = schema["items"]
        assert items["type"] == "OBJECT"
        assert items["required"] == ["english", "phonetic", "vietnamese"]
        assert set(items["properties"]) == {"english", "phonetic", "vietnamese", "wordType", "example"}

    def test_response_schema_without_details(self):
        schema = PromptBuilder(include_word_details=False).build_batch_response_schema()
        assert set(schema["items"]["properties"]) == {"english", "phonetic", "vietnamese"}
