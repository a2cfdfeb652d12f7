# lexisnap/services/export.py
"""
Excel export of translation records (openpyxl).
"""

import logging
from pathlib import Path
from typing import Sequence

import openpyxl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from lexisnap.models.types import TranslationRecord
from lexisnap.services.exceptions import ExportUnavailableError

logger = logging.getLogger(__name__)

SHEET_TITLE = "Translations"

# (header, record attribute, column width hint)
EXPORT_COLUMNS = (
    ("Tiếng Anh", "english", 40),
    ("Loại từ", "word_type", 20),
    ("Phiên âm", "phonetic", 40),
    ("Tiếng Việt", "vietnamese", 40),
    ("Ví dụ", "example", 60),
)


def _cell_value(value: str) -> str:
    # openpyxl refuses control characters in cell strings
    return ILLEGAL_CHARACTERS_RE.sub("", value)


def _force_text(row) -> None:
    # openpyxl stores strings starting with "=" as formulas
    for cell in row:
        if isinstance(cell.value, str) and cell.value.startswith("="):
            cell.data_type = "s"


class SpreadsheetExporter:
    """Writes records to <output_dir>/<file_stem>.xlsx."""

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir

    def write(self, records: Sequence[TranslationRecord], file_stem: str) -> Path:
        """Write records, one row each, in the given order.

        Raises:
            ExportUnavailableError: the workbook could not be written
        """
        output_path = self.output_dir / f"{file_stem}.xlsx"
        workbook = openpyxl.Workbook()
        try:
            sheet = workbook.active
            sheet.title = SHEET_TITLE

            sheet.append([header for header, _, _ in EXPORT_COLUMNS])
            for cell in sheet[1]:
                cell.font = Font(bold=True)

            for record in records:
                sheet.append([_cell_value(getattr(record, attr)) for _, attr, _ in EXPORT_COLUMNS])
                _force_text(sheet[sheet.max_row])

            for index, (_, _, width) in enumerate(EXPORT_COLUMNS, start=1):
                sheet.column_dimensions[get_column_letter(index)].width = width
            sheet.freeze_panes = "A2"

            self.output_dir.mkdir(parents=True, exist_ok=True)
            workbook.save(output_path)
        except OSError as e:
            logger.error("Failed to write %s: %s", output_path, e)
            raise ExportUnavailableError(f"Excel export is not available: {e}") from e
        finally:
            workbook.close()

        logger.info("Exported %d rows to %s", len(records), output_path)
        return output_path
