# lexisnap/models/types.py
"""
Core data types for LexiSnap.
"""

import mimetypes
from dataclasses import dataclass
from typing import Any, Callable, Optional


SUPPORTED_MIME_PREFIXES = ("image/",)
SUPPORTED_MIME_TYPES = ("application/pdf",)


@dataclass(frozen=True)
class UploadedFile:
    """
    A file chosen by the user, held in memory.
    """
    name: str
    content: bytes
    mime_type: str = ""

    def __post_init__(self):
        if not self.mime_type:
            guessed, _ = mimetypes.guess_type(self.name)
            object.__setattr__(self, "mime_type", guessed or "application/octet-stream")

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def is_supported(self) -> bool:
        """Images and PDFs only (advisory; checked at the UI boundary)"""
        return (
            self.mime_type.startswith(SUPPORTED_MIME_PREFIXES)
            or self.mime_type in SUPPORTED_MIME_TYPES
        )

    @property
    def size_display(self) -> str:
        """Human-readable file size"""
        if self.size_bytes < 1024:
            return f"{self.size_bytes} B"
        elif self.size_bytes < 1024 * 1024:
            return f"{self.size_bytes / 1024:.1f} KB"
        else:
            return f"{self.size_bytes / (1024 * 1024):.1f} MB"


@dataclass(frozen=True)
class SelectedSnippet:
    """
    A piece of extracted text highlighted by the user.
    """
    id: str                          # "<submission ms>-<first 10 chars>"
    text: str                        # Trimmed, non-empty


@dataclass(frozen=True)
class TranslationRecord:
    """
    One translation row returned by the model.

    Only english/phonetic/vietnamese are required; word_type and example are
    requested when word details are enabled and default to "".
    """
    english: str
    phonetic: str
    vietnamese: str
    word_type: str = ""
    example: str = ""

    REQUIRED_FIELDS = ("english", "phonetic", "vietnamese")

    @classmethod
    def from_dict(cls, data: Any) -> "TranslationRecord":
        """Build a record from a decoded JSON object.

        Raises:
            ValueError: if data is not an object or a required field is
                missing or not a string.
        """
        if not isinstance(data, dict):
            raise ValueError(f"record must be a JSON object, got {type(data).__name__}")
        for key in cls.REQUIRED_FIELDS:
            if not isinstance(data.get(key), str):
                raise ValueError(f"record field {key!r} missing or not a string")
        return cls(
            english=data["english"],
            phonetic=data["phonetic"],
            vietnamese=data["vietnamese"],
            word_type=_optional_str(data.get("wordType")),
            example=_optional_str(data.get("example")),
        )

    def to_dict(self) -> dict[str, str]:
        """Wire representation (camelCase keys, as the model emits them)"""
        return {
            "english": self.english,
            "phonetic": self.phonetic,
            "vietnamese": self.vietnamese,
            "wordType": self.word_type,
            "example": self.example,
        }


def _optional_str(value: Optional[Any]) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# Receives each translation record as soon as it is parsed
RecordCallback = Callable[[TranslationRecord], None]
