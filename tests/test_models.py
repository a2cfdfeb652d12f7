# tests/test_models.py
"""Tests for lexisnap.models.types"""

import pytest

from lexisnap.models.types import SelectedSnippet, TranslationRecord, UploadedFile


class TestUploadedFile:
    """Tests for UploadedFile"""

    def test_guesses_mime_type_from_name(self):
        file = UploadedFile(name="scan.png", content=b"\x89PNG")
        assert file.mime_type == "image/png"

    def test_explicit_mime_type_wins(self):
        file = UploadedFile(name="scan.bin", content=b"%PDF", mime_type="application/pdf")
        assert file.mime_type == "application/pdf"

    def test_unknown_extension_falls_back_to_octet_stream(self):
        file = UploadedFile(name="notes", content=b"abc")
        assert file.mime_type == "application/octet-stream"

    @pytest.mark.parametrize("name,supported", [
        ("photo.jpg", True),
        ("photo.gif", True),
        ("doc.pdf", True),
        ("doc.docx", False),
        ("notes.txt", False),
    ])
    def test_is_supported(self, name, supported):
        assert UploadedFile(name=name, content=b"x").is_supported is supported

    def test_size_display(self):
        assert UploadedFile(name="a.png", content=b"x" * 10).size_display == "10 B"
        assert UploadedFile(name="a.png", content=b"x" * 2048).size_display == "2.0 KB"
        assert UploadedFile(name="a.png", content=b"x" * (3 * 1024 * 1024)).size_display == "3.0 MB"

    def test_is_immutable(self):
        file = UploadedFile(name="a.png", content=b"x")
        with pytest.raises(AttributeError):
            file.name = "b.png"


class TestSelectedSnippet:
    def test_fields(self):
        snippet = SelectedSnippet(id="1-hello", text="hello")
        assert snippet.id == "1-hello"
        assert snippet.text == "hello"


class TestTranslationRecord:
    """Tests for TranslationRecord.from_dict / to_dict"""

    def test_from_dict_required_fields_only(self):
        record = TranslationRecord.from_dict(
            {"english": "apple", "phonetic": "/ˈæp.əl/", "vietnamese": "quả táo"}
        )
        assert record.english == "apple"
        assert record.phonetic == "/ˈæp.əl/"
        assert record.vietnamese == "quả táo"
        assert record.word_type == ""
        assert record.example == ""

    def test_from_dict_with_details(self):
        record = TranslationRecord.from_dict({
            "english": "run",
            "phonetic": "/rʌn/",
            "vietnamese": "chạy",
            "wordType": "động từ",
            "example": "I run every day. (Tôi chạy mỗi ngày.)",
        })
        assert record.word_type == "động từ"
        assert record.example.startswith("I run")

    def test_from_dict_missing_required_field(self):
        with pytest.raises(ValueError):
            TranslationRecord.from_dict({"english": "apple", "phonetic": "/ˈæp.əl/"})

    def test_from_dict_non_string_field(self):
        with pytest.raises(ValueError):
            TranslationRecord.from_dict({"english": "apple", "phonetic": 1, "vietnamese": "táo"})

    def test_from_dict_not_an_object(self):
        with pytest.raises(ValueError):
            TranslationRecord.from_dict(["apple"])

    def test_optional_non_string_values_are_stringified(self):
        record = TranslationRecord.from_dict({
            "english": "a", "phonetic": "b", "vietnamese": "c", "wordType": None, "example": 3,
        })
        assert record.word_type == ""
        assert record.example == "3"

    def test_to_dict_uses_camel_case(self):
        record = TranslationRecord("a", "b", "c", word_type="d", example="e")
        assert record.to_dict() == {
            "english": "a",
            "phonetic": "b",
            "vietnamese": "c",
            "wordType": "d",
            "example": "e",
        }
