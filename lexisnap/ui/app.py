# lexisnap/ui/app.py
"""
LexiSnap - NiceGUI application.

Single page with three panels: upload, extracted text, selection/results.
Each browser page gets its own WorkflowOrchestrator; the Gemini HTTP client
is shared for the lifetime of the server.
"""

import logging
import re
import uuid
from pathlib import Path
from typing import Optional

from lexisnap import __app_name__
from lexisnap.config.settings import AppSettings
from lexisnap.models.types import UploadedFile
from lexisnap.services.export import SpreadsheetExporter
from lexisnap.services.extraction import ExtractionClient
from lexisnap.services.gemini_client import GeminiClient
from lexisnap.services.prompt_builder import PromptBuilder
from lexisnap.services.translation import BatchTranslator, TranslationStreamConsumer
from lexisnap.ui.state import WorkflowState
from lexisnap.ui.workflow import StateChange, WorkflowOrchestrator

logger = logging.getLogger(__name__)

# Minimum supported NiceGUI version (major, minor, patch)
MIN_NICEGUI_VERSION = (3, 0, 0)

# NiceGUI imports - deferred to run_app()
# These are set as globals in run_app() before any UI code runs
nicegui = None
ui = None
nicegui_app = None
nicegui_Client = None

_RE_VERSION_NUMBER = re.compile(r'\d+')

APP_TITLE = "AI Text Extractor & Translator"
APP_SUBTITLE = "Powered by Google Gemini"
MISSING_API_KEY_MESSAGE = "API key is not configured. Set GEMINI_API_KEY (or API_KEY) and restart."


def _ensure_nicegui_version() -> None:
    """Validate that the installed NiceGUI version meets the minimum requirement.

    Pre-release suffixes ("3.0.0rc1") are ignored and missing parts count
    as zero. Must be called after NiceGUI is imported (inside run_app()).
    """
    version_str = getattr(nicegui, '__version__', '')
    version_parts = []
    for part in version_str.split('.')[:3]:
        match = _RE_VERSION_NUMBER.match(part)
        if not match:
            break
        version_parts.append(int(match.group()))

    if not version_parts:
        logger.warning(
            "Unable to parse NiceGUI version '%s'; proceeding without check", version_str
        )
        return

    while len(version_parts) < len(MIN_NICEGUI_VERSION):
        version_parts.append(0)

    if tuple(version_parts) < MIN_NICEGUI_VERSION:
        raise RuntimeError(
            f"NiceGUI>={'.'.join(str(p) for p in MIN_NICEGUI_VERSION)} is required; "
            f"found {version_str}. Please upgrade NiceGUI to 3.x or newer."
        )


def create_orchestrator(settings: AppSettings, gemini: GeminiClient) -> WorkflowOrchestrator:
    """Wire services for one page according to settings"""
    prompt_builder = PromptBuilder(include_word_details=settings.include_word_details)
    extractor = ExtractionClient(gemini, prompt_builder)
    translator = TranslationStreamConsumer(gemini, prompt_builder)
    if settings.translation_mode == "batch":
        translator = BatchTranslator(translator)
    # Per-page directory: same-day exports from different pages get distinct paths
    exporter = SpreadsheetExporter(settings.get_output_directory() / uuid.uuid4().hex)
    return WorkflowOrchestrator(
        extractor,
        translator,
        exporter,
        export_filename_prefix=settings.export_filename_prefix,
    )


class LexiSnapApp:
    """Page controller: renders WorkflowState and forwards user actions."""

    def __init__(self, settings: AppSettings, orchestrator: WorkflowOrchestrator):
        self.settings = settings
        self.orchestrator = orchestrator
        self._client = None
        self._upload = None
        self._error_banner = None
        self._upload_panel = None
        self._text_panel = None
        self._results_panel = None
        orchestrator.add_listener(self._on_state_change)

    @property
    def state(self) -> WorkflowState:
        return self.orchestrator.state

    def build(self, client) -> None:
        """Create the page layout (called inside the @ui.page handler)"""
        from lexisnap.ui.components.results_panel import create_results_panel
        from lexisnap.ui.components.text_panel import create_text_panel
        from lexisnap.ui.components.upload_panel import create_upload_panel
        from lexisnap.ui.styles import COMPLETE_CSS

        self._client = client
        ui.add_head_html(f'<style>{COMPLETE_CSS}</style>')

        with ui.column().classes('w-full items-center gap-1 py-6'):
            ui.label(APP_TITLE).classes('app-title')
            ui.label(APP_SUBTITLE).classes('app-subtitle')

        @ui.refreshable
        def error_banner():
            if self.state.last_error:
                with ui.row().classes('error-banner w-full items-center justify-between no-wrap'):
                    ui.label(self.state.last_error)
                    ui.button(icon='close', on_click=self.orchestrator.dismiss_error).props(
                        'flat dense round color=white'
                    )
            elif not self.settings.has_api_key:
                with ui.row().classes('error-banner w-full items-center no-wrap'):
                    ui.label(MISSING_API_KEY_MESSAGE)

        @ui.refreshable
        def upload_panel():
            self._upload = create_upload_panel(
                self.state,
                on_file_select=self._handle_file_select,
                on_reset=self._handle_reset,
                max_file_size_bytes=self.settings.max_file_size_bytes,
            )

        @ui.refreshable
        def text_panel():
            create_text_panel(self.state, on_text_select=self._handle_text_selected)

        @ui.refreshable
        def results_panel():
            create_results_panel(
                self.state,
                on_remove=self._handle_remove_snippet,
                on_translate=self._translate,
                on_export=self._export,
            )

        with ui.column().classes('w-full max-w-7xl mx-auto px-4 gap-4'):
            error_banner()
            with ui.grid(columns=3).classes('w-full gap-6 items-stretch'):
                upload_panel()
                text_panel()
                results_panel()

        self._error_banner = error_banner
        self._upload_panel = upload_panel
        self._text_panel = text_panel
        self._results_panel = results_panel

    def _refresh(self, change: StateChange) -> None:
        # Selection and translation changes only touch the right-hand panel
        if change not in (
            StateChange.SELECTION_CHANGED,
            StateChange.TRANSLATION_STARTED,
            StateChange.RESULT_ADDED,
        ):
            self._upload_panel.refresh()
            self._text_panel.refresh()
        self._results_panel.refresh()
        self._error_banner.refresh()

    def _on_state_change(self, change: StateChange) -> None:
        client = self._client
        if client is None or self._results_panel is None:
            return
        if change == StateChange.RESET and self._upload is not None:
            with client:
                self._upload.reset()
        with client:
            self._refresh(change)

    # --- handlers ---

    async def _handle_file_select(self, file: UploadedFile) -> None:
        logger.info("File selected: %s (%s, %d bytes)", file.name, file.mime_type, file.size_bytes)
        await self.orchestrator.set_file(file)

    def _handle_reset(self) -> None:
        self.orchestrator.reset()

    def _handle_text_selected(self, text: str) -> None:
        self.orchestrator.add_selection(text)

    def _handle_remove_snippet(self, snippet_id: str) -> None:
        self.orchestrator.remove_selection(snippet_id)

    async def _translate(self) -> None:
        await self.orchestrator.translate()

    async def _export(self) -> None:
        path: Optional[Path] = await self.orchestrator.export()
        if path is None:
            return
        client = self._client
        if client is None:
            return
        with client:
            ui.download(path, filename=path.name)
            ui.notify(f'Exported {path.name}', type='positive')

    def detach(self) -> None:
        """Stop receiving state changes (page disconnected)"""
        self.orchestrator.remove_listener(self._on_state_change)
        self._client = None


def run_app(settings: AppSettings) -> None:
    """Import NiceGUI, register the page and start the server"""
    global nicegui, ui, nicegui_app, nicegui_Client
    import nicegui as _nicegui
    from nicegui import Client as _Client
    from nicegui import app as _app
    from nicegui import ui as _ui

    nicegui = _nicegui
    ui = _ui
    nicegui_app = _app
    nicegui_Client = _Client

    _ensure_nicegui_version()

    if not settings.has_api_key:
        logger.warning("No Gemini API key configured; remote operations will fail")

    gemini = GeminiClient(settings)
    nicegui_app.on_shutdown(gemini.aclose)

    @ui.page('/')
    async def main_page(client: nicegui_Client):
        orchestrator = create_orchestrator(settings, gemini)
        lexisnap_app = LexiSnapApp(settings, orchestrator)
        lexisnap_app.build(client)
        client.on_disconnect(lexisnap_app.detach)

    logger.info("Starting %s on http://%s:%d", __app_name__, settings.host, settings.port)
    ui.run(
        host=settings.host,
        port=settings.port,
        title=__app_name__,
        dark=True,
        reload=False,
        show=False,
        uvicorn_logging_level='warning',
    )
