# lexisnap/models/__init__.py
"""
Data models for LexiSnap.
"""

from .types import (
    UploadedFile,
    SelectedSnippet,
    TranslationRecord,
    RecordCallback,
)

__all__ = [
    'UploadedFile',
    'SelectedSnippet',
    'TranslationRecord',
    'RecordCallback',
]
