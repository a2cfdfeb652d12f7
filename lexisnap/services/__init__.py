# lexisnap/services/__init__.py
"""
Service layer for LexiSnap.

Gemini access, extraction, translation, snippet selection and Excel export.
"""

from .exceptions import (
    LexiSnapError,
    GeminiAPIError,
    ExtractionFailedError,
    TranslationStreamFailedError,
    InvalidResponseFormatError,
    ExportUnavailableError,
)
from .selection import SelectionSet

__all__ = [
    'LexiSnapError',
    'GeminiAPIError',
    'ExtractionFailedError',
    'TranslationStreamFailedError',
    'InvalidResponseFormatError',
    'ExportUnavailableError',
    'SelectionSet',
]
