# lexisnap/ui/workflow.py
"""
Workflow orchestration: upload -> extract -> select -> translate -> export.

Remote operations are never cancelled. Each one captures the generation that
was current when it started; reset() bumps the generation, so anything that
completes afterwards is dropped instead of touching the newer state.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Sequence

from lexisnap.models.types import RecordCallback, SelectedSnippet, TranslationRecord, UploadedFile
from lexisnap.services.exceptions import LexiSnapError
from lexisnap.services.export import SpreadsheetExporter
from lexisnap.services.extraction import ExtractionClient
from lexisnap.ui.state import WorkflowState

logger = logging.getLogger(__name__)

UNKNOWN_EXTRACTION_ERROR = "An unknown error occurred during text extraction."
UNKNOWN_TRANSLATION_ERROR = "An unknown error occurred during translation."
UNKNOWN_EXPORT_ERROR = "An unknown error occurred during export."
NO_MATCHING_RESULTS = "None of the translation results match the current selection."


class StateChange(Enum):
    """What a transition changed (passed to listeners)"""
    RESET = "reset"
    FILE_SET = "file_set"
    TEXT_EXTRACTED = "text_extracted"
    SELECTION_CHANGED = "selection_changed"
    TRANSLATION_STARTED = "translation_started"
    RESULT_ADDED = "result_added"
    TRANSLATION_FINISHED = "translation_finished"
    ERROR = "error"


StateListener = Callable[[StateChange], None]


def _error_message(error: Exception, fallback: str) -> str:
    if isinstance(error, LexiSnapError):
        return error.message
    return str(error) or fallback


class WorkflowOrchestrator:
    """
    Owns the WorkflowState and every transition on it.

    The translator is any object with
    ``async translate(texts, on_result) -> int`` (TranslationStreamConsumer or
    BatchTranslator).
    """

    def __init__(
        self,
        extractor: ExtractionClient,
        translator,
        exporter: SpreadsheetExporter,
        *,
        export_filename_prefix: str = "translation_export",
        today: Callable[[], date] = date.today,
        state: Optional[WorkflowState] = None,
    ):
        self.extractor = extractor
        self.translator = translator
        self.exporter = exporter
        self.export_filename_prefix = export_filename_prefix
        self._today = today
        self.state = state if state is not None else WorkflowState()
        self._generation = 0
        self._listeners: list[StateListener] = []

    # --- listeners ---

    def add_listener(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StateListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, change: StateChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.warning("State listener failed on %s", change.value, exc_info=True)

    # --- supersession ---

    @property
    def generation(self) -> int:
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    # --- transitions ---

    def reset(self) -> None:
        """Return to the initial state. In-flight operations become stale."""
        self._generation += 1
        self.state.reset()
        logger.info("Workflow reset (generation %d)", self._generation)
        self._notify(StateChange.RESET)

    def dismiss_error(self) -> None:
        if self.state.last_error is None:
            return
        self.state.last_error = None
        self._notify(StateChange.ERROR)

    async def set_file(self, file: UploadedFile) -> None:
        """Replace the current file (implicit reset) and extract its text."""
        self.reset()
        generation = self._generation
        self.state.file = file
        self.state.is_extracting = True
        self._notify(StateChange.FILE_SET)

        try:
            text = await self.extractor.extract_text(file)
        except asyncio.CancelledError:
            if self._is_current(generation):
                self.state.is_extracting = False
                self._notify(StateChange.FILE_SET)
            raise
        except Exception as e:
            if not self._is_current(generation):
                logger.debug("Discarding stale extraction failure for %s: %s", file.name, e)
                return
            if not isinstance(e, LexiSnapError):
                logger.exception("Unexpected extraction error for %s", file.name)
            self.state.last_error = _error_message(e, UNKNOWN_EXTRACTION_ERROR)
            self.state.is_extracting = False
            self._notify(StateChange.ERROR)
            return

        if not self._is_current(generation):
            logger.debug("Discarding stale extraction result for %s", file.name)
            return
        self.state.extracted_text = text
        self.state.is_extracting = False
        self._notify(StateChange.TEXT_EXTRACTED)

    def add_selection(self, text: str) -> Optional[SelectedSnippet]:
        """Select a snippet. Blank or duplicate text is ignored."""
        text = text.strip()
        if not text:
            return None
        snippet = self.state.selection.add(text)
        if snippet is not None:
            self._notify(StateChange.SELECTION_CHANGED)
        return snippet

    def remove_selection(self, snippet_id: str) -> None:
        if self.state.selection.remove(snippet_id):
            self._notify(StateChange.SELECTION_CHANGED)

    async def translate(self) -> None:
        """Translate the selection, appending each record as it arrives."""
        if not self.state.can_translate():
            return

        generation = self._generation
        texts = self.state.selection.texts()
        self.state.is_translating = True
        self.state.results = []
        self.state.last_error = None
        self._notify(StateChange.TRANSLATION_STARTED)

        on_result = self._make_result_handler(generation)
        error: Optional[str] = None
        try:
            await self.translator.translate(texts, on_result)
        except asyncio.CancelledError:
            if self._is_current(generation):
                self.state.is_translating = False
                self._notify(StateChange.TRANSLATION_FINISHED)
            raise
        except LexiSnapError as e:
            error = e.message
        except Exception as e:
            logger.exception("Unexpected translation error")
            error = _error_message(e, UNKNOWN_TRANSLATION_ERROR)

        if not self._is_current(generation):
            logger.debug("Discarding stale translation completion (generation %d)", generation)
            return
        self.state.is_translating = False
        if error:
            self.state.last_error = error
            self._notify(StateChange.ERROR)
        else:
            self._notify(StateChange.TRANSLATION_FINISHED)

    def _make_result_handler(self, generation: int) -> RecordCallback:
        def on_result(record: TranslationRecord) -> None:
            if not self._is_current(generation):
                logger.debug("Discarding stale translation record %r", record.english)
                return
            self.state.results.append(record)
            self._notify(StateChange.RESULT_ADDED)

        return on_result

    def ordered_results(self) -> list[TranslationRecord]:
        """Results in selection order: first exact english match per snippet."""
        return reconcile_results(self.state.selection.texts(), self.state.results)

    def export_file_stem(self) -> str:
        return f"{self.export_filename_prefix}_{self._today().isoformat()}"

    async def export(self) -> Optional[Path]:
        """Write the ordered results to a workbook; None when nothing was written."""
        if not self.state.results:
            return None

        generation = self._generation
        records = self.ordered_results()
        if not records:
            logger.warning("No results match the selection; nothing to export")
            self.state.last_error = NO_MATCHING_RESULTS
            self._notify(StateChange.ERROR)
            return None

        try:
            path = await asyncio.to_thread(self.exporter.write, records, self.export_file_stem())
        except Exception as e:
            if not isinstance(e, LexiSnapError):
                logger.exception("Unexpected export error")
            if self._is_current(generation):
                self.state.last_error = _error_message(e, UNKNOWN_EXPORT_ERROR)
                self._notify(StateChange.ERROR)
            return None

        if not self._is_current(generation):
            logger.debug("Discarding stale export %s", path)
            return None
        return path


def reconcile_results(
    texts: Sequence[str],
    results: Sequence[TranslationRecord],
) -> list[TranslationRecord]:
    """For each text in order, the first result whose english equals it exactly.

    Texts without a matching result are skipped.
    """
    ordered = []
    for text in texts:
        match = next((record for record in results if record.english == text), None)
        if match is not None:
            ordered.append(match)
    return ordered
