# lexisnap/ui/components/text_panel.py
"""
Extracted text panel. Highlighting text with the mouse selects it as a snippet.
"""

import html
from typing import Callable

from nicegui import events, ui

from lexisnap.ui.state import WorkflowState

# Sends the current browser selection back to Python on mouseup
SELECTION_JS_HANDLER = '() => emit(window.getSelection().toString())'


def selection_from_event(e: events.GenericEventArguments) -> str:
    """Selected text carried by a mouseup event ("" if none)."""
    args = getattr(e, 'args', None)
    if isinstance(args, (list, tuple)):
        args = args[0] if args else None
    return args.strip() if isinstance(args, str) else ""


def create_text_panel(state: WorkflowState, on_text_select: Callable[[str], None]) -> None:
    """Render the extracted text, or a spinner while extraction runs."""

    def handle_mouseup(e: events.GenericEventArguments):
        selected = selection_from_event(e)
        if selected:
            on_text_select(selected)

    with ui.column().classes('panel w-full'):
        ui.label('2. Extracted Text').classes('panel-title')
        if state.is_extracting:
            with ui.column().classes('w-full h-full items-center justify-center'):
                ui.spinner(size='lg')
                ui.label('Extracting text...').classes('placeholder')
            return

        with ui.element('div').classes('extracted-text w-full') as text_box:
            if state.extracted_text:
                ui.html(f'<pre>{html.escape(state.extracted_text)}</pre>', sanitize=False)
            else:
                ui.label('Text from your file will appear here.').classes('placeholder')
        text_box.on('mouseup', handle_mouseup, js_handler=SELECTION_JS_HANDLER)
        ui.label('Highlight text above to add it to the selection panel.').classes('hint w-full')
