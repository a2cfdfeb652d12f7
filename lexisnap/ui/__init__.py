# lexisnap/ui/__init__.py
"""
UI for LexiSnap.

NiceGUI is only imported by the app module. Use explicit imports like:
    from lexisnap.ui.app import run_app
"""

# Fast imports - state and workflow (no NiceGUI dependency)
from .state import WorkflowState, WorkflowPhase
from .workflow import WorkflowOrchestrator, StateChange

# Lazy-loaded UI entry points via __getattr__
_LAZY_IMPORTS = {
    'LexiSnapApp': 'app',
    'create_orchestrator': 'app',
    'run_app': 'app',
}


def __getattr__(name: str):
    """Lazy-load the NiceGUI app module on first access."""
    import importlib
    if name in _LAZY_IMPORTS:
        module = importlib.import_module(f'.{_LAZY_IMPORTS[name]}', __package__)
        return getattr(module, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'WorkflowState',
    'WorkflowPhase',
    'WorkflowOrchestrator',
    'StateChange',
    'LexiSnapApp',
    'create_orchestrator',
    'run_app',
]
