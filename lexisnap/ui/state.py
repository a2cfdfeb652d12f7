# lexisnap/ui/state.py
"""
Workflow state for LexiSnap.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from lexisnap.models.types import TranslationRecord, UploadedFile
from lexisnap.services.selection import SelectionSet


class WorkflowPhase(Enum):
    """Workflow phases (derived from WorkflowState fields)"""
    NO_FILE = "no_file"
    EXTRACTING = "extracting"
    TEXT_READY = "text_ready"
    TRANSLATING = "translating"


@dataclass
class WorkflowState:
    """
    Single source of truth for the page.

    Mutated only by WorkflowOrchestrator. Invariant: is_extracting and
    is_translating are never both True.
    """
    file: Optional[UploadedFile] = None
    is_extracting: bool = False
    extracted_text: str = ""
    selection: SelectionSet = field(default_factory=SelectionSet)
    is_translating: bool = False
    results: list[TranslationRecord] = field(default_factory=list)
    last_error: Optional[str] = None

    @property
    def phase(self) -> WorkflowPhase:
        if self.is_extracting:
            return WorkflowPhase.EXTRACTING
        if self.is_translating:
            return WorkflowPhase.TRANSLATING
        if self.file is None:
            return WorkflowPhase.NO_FILE
        return WorkflowPhase.TEXT_READY

    @property
    def has_results(self) -> bool:
        return bool(self.results)

    def can_translate(self) -> bool:
        """Check if translation can start"""
        return len(self.selection) > 0 and not self.is_translating and not self.is_extracting

    def can_export(self) -> bool:
        return self.has_results

    def is_initial(self) -> bool:
        """True when every field holds its initial empty value"""
        return (
            self.file is None
            and not self.is_extracting
            and self.extracted_text == ""
            and len(self.selection) == 0
            and not self.is_translating
            and not self.results
            and self.last_error is None
        )

    def reset(self) -> None:
        """Reset every field to its initial value (in place)"""
        self.file = None
        self.is_extracting = False
        self.extracted_text = ""
        self.selection.clear()
        self.is_translating = False
        self.results = []
        self.last_error = None
