# lexisnap/services/extraction.py
"""
Text extraction from uploaded images and PDFs via Gemini.
"""

import base64
import logging

from lexisnap.models.types import UploadedFile
from lexisnap.services.exceptions import ExtractionFailedError, LexiSnapError
from lexisnap.services.gemini_client import GeminiClient
from lexisnap.services.prompt_builder import PromptBuilder

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_MESSAGE = "Failed to extract text from the file. Please try a different file."


class ExtractionClient:
    """Sends one file to Gemini and returns the extracted text (single attempt)."""

    def __init__(self, gemini: GeminiClient, prompt_builder: PromptBuilder):
        self.gemini = gemini
        self.prompt_builder = prompt_builder

    @staticmethod
    def _file_part(file: UploadedFile) -> dict:
        return {
            "inlineData": {
                "mimeType": file.mime_type,
                "data": base64.b64encode(file.content).decode("ascii"),
            }
        }

    async def extract_text(self, file: UploadedFile) -> str:
        """Extract the text of file.

        Raises:
            ExtractionFailedError: on any failure; the cause is chained.
        """
        logger.info(
            "Extracting text from %s (%s, %s)", file.name, file.mime_type, file.size_display
        )
        parts = [
            self._file_part(file),
            {"text": self.prompt_builder.build_extraction_prompt()},
        ]
        try:
            text = await self.gemini.generate_content(parts)
        except LexiSnapError as e:
            logger.error("Error extracting text from %s: %s", file.name, e)
            raise ExtractionFailedError(f"{EXTRACTION_FAILED_MESSAGE} ({e.message})") from e
        except Exception as e:
            logger.exception("Unexpected error extracting text from %s", file.name)
            detail = str(e)
            message = f"{EXTRACTION_FAILED_MESSAGE} ({detail})" if detail else EXTRACTION_FAILED_MESSAGE
            raise ExtractionFailedError(message) from e

        logger.info("Extracted %d chars from %s", len(text), file.name)
        return text
