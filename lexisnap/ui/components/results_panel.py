# lexisnap/ui/components/results_panel.py
"""
Results panel: selected snippets, translate button, live results table, export.
"""

from typing import Awaitable, Callable

from nicegui import ui

from lexisnap.models.types import TranslationRecord
from lexisnap.ui.state import WorkflowState

RESULT_COLUMNS = [
    {'name': 'english', 'label': 'English', 'field': 'english', 'align': 'left'},
    {'name': 'wordType', 'label': 'Word Type', 'field': 'wordType', 'align': 'left'},
    {'name': 'phonetic', 'label': 'Phonetic', 'field': 'phonetic', 'align': 'left'},
    {'name': 'vietnamese', 'label': 'Vietnamese', 'field': 'vietnamese', 'align': 'left'},
    {'name': 'example', 'label': 'Example', 'field': 'example', 'align': 'left'},
]


def result_rows(results: list[TranslationRecord]) -> list[dict]:
    """Table rows in arrival order (index is the row key; english may repeat)"""
    return [{'id': index, **record.to_dict()} for index, record in enumerate(results)]


def create_results_panel(
    state: WorkflowState,
    on_remove: Callable[[str], None],
    on_translate: Callable[[], Awaitable[None]],
    on_export: Callable[[], Awaitable[None]],
) -> None:
    with ui.column().classes('panel w-full'):
        ui.label('3. Select & Translate').classes('panel-title')

        snippets = state.selection.list()
        with ui.column().classes('snippet-list w-full gap-2'):
            ui.label('Selected Text Snippets:').classes('font-semibold text-gray-400')
            if not snippets:
                ui.label('Text you highlight will be listed here.').classes('placeholder')
            for snippet in snippets:
                with ui.row().classes('snippet-item w-full items-center justify-between no-wrap'):
                    ui.label(snippet.text).classes('truncate')
                    ui.button(
                        icon='cancel',
                        on_click=lambda _, snippet_id=snippet.id: on_remove(snippet_id),
                    ).props('flat dense round size=sm color=grey')

        translate_button = ui.button(on_click=on_translate).classes('w-full my-4').props('color=primary')
        with translate_button:
            if state.is_translating:
                ui.spinner(color='white', size='sm')
                ui.label('Translating...').classes('ml-2')
            else:
                ui.icon('translate')
                ui.label('Translate Selection').classes('ml-2')
        translate_button.set_enabled(state.can_translate())

        with ui.element('div').classes('results-table w-full'):
            ui.table(
                columns=RESULT_COLUMNS,
                rows=result_rows(state.results),
                row_key='id',
            ).props('dense flat dark no-data-label="Translation results will show here."').classes('w-full')

        ui.button('Export to Excel', icon='download', on_click=on_export).props(
            'color=positive'
        ).classes('w-full mt-4').set_enabled(state.can_export())
