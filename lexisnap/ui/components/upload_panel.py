# lexisnap/ui/components/upload_panel.py
"""
Upload panel: pick an image or PDF, reset the workflow.
"""

from typing import Any, Awaitable, Callable, Optional

from nicegui import events, ui

from lexisnap.models.types import UploadedFile
from lexisnap.ui.state import WorkflowState

ACCEPTED_FORMATS = "image/*,application/pdf"


async def read_upload_event(e: events.UploadEventArguments) -> UploadedFile:
    """Read an upload event into memory (NiceGUI 3.x and older event shapes)."""
    file_obj: Any = getattr(e, 'file', None)
    if file_obj is not None:
        content = await file_obj.read()
        name = file_obj.name
        mime_type = getattr(file_obj, 'content_type', '') or ''
    else:
        content = e.content.read()
        name = e.name
        mime_type = getattr(e, 'type', '') or ''
    return UploadedFile(name=name, content=content, mime_type=mime_type)


def create_upload_panel(
    state: WorkflowState,
    on_file_select: Callable[[UploadedFile], Awaitable[None]],
    on_reset: Callable[[], None],
    max_file_size_bytes: int,
) -> Optional[ui.upload]:
    """Render the panel. Returns the upload element (None while a file is held)."""
    max_mb = max_file_size_bytes // (1024 * 1024)

    async def handle_upload(e: events.UploadEventArguments):
        try:
            uploaded = await read_upload_event(e)
        except (OSError, AttributeError) as err:
            ui.notify(f'Failed to read the file: {err}', type='negative')
            return
        if not uploaded.is_supported:
            ui.notify('Please choose an image or a PDF file', type='warning')
            return
        await on_file_select(uploaded)

    def handle_rejected(_event=None):
        ui.notify(f'The file is too large (max {max_mb} MB)', type='warning')

    upload = None
    with ui.column().classes('panel w-full'):
        ui.label('1. Upload File').classes('panel-title')
        with ui.column().classes('drop-zone w-full items-center justify-center'):
            if state.file is None:
                ui.icon('upload_file').classes('text-3xl text-sky-400')
                upload = ui.upload(
                    label='Choose an image or PDF',
                    on_upload=handle_upload,
                    on_rejected=handle_rejected,
                    max_file_size=max_file_size_bytes,
                    auto_upload=True,
                ).props(f'accept="{ACCEPTED_FORMATS}" flat').classes('w-full')
                ui.label('PNG, JPG, GIF, PDF').classes('hint')
            else:
                ui.label('File Selected:').classes('font-semibold text-green-400')
                ui.label(state.file.name).classes('text-sm break-all')
                ui.label(state.file.size_display).classes('hint')

        ui.button('Reset', icon='delete', on_click=on_reset).props('color=negative').classes(
            'w-full mt-4'
        ).set_enabled(state.file is not None or state.is_extracting)
    return upload
