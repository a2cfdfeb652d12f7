# lexisnap/services/exceptions.py
"""
Exception types shared by the LexiSnap services.

Every error carries a message that is safe to show to the user; the lower-level
cause, when there is one, is chained with ``raise ... from``.
"""

from typing import Optional


class LexiSnapError(Exception):
    """Base class for user-facing LexiSnap errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GeminiAPIError(LexiSnapError):
    """A Gemini request failed (transport, HTTP status or response shape)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ExtractionFailedError(LexiSnapError):
    """Text could not be extracted from the uploaded file."""

    pass


class TranslationStreamFailedError(LexiSnapError):
    """The translation request failed at the transport level."""

    pass


class InvalidResponseFormatError(LexiSnapError):
    """The batch translation response held no decodable JSON array."""

    pass


class ExportUnavailableError(LexiSnapError):
    """The spreadsheet could not be written."""

    pass
