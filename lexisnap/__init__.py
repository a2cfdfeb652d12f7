# lexisnap/__init__.py
"""
LexiSnap - Snippet extraction + translation workbench

Extract text from an image or PDF with Gemini, pick snippets, translate them to
Vietnamese with IPA transcriptions and export the table to Excel.
"""

from pathlib import Path


def _get_version() -> str:
    """
    Read the version from pyproject.toml so a source checkout always reports
    the version it was built from.

    Returns:
        str: version string (e.g. "0.1.0")
    """
    try:
        import tomllib

        pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
        if pyproject_path.exists():
            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
            return data.get("project", {}).get("version", "0.0.0")
    except (OSError, ValueError):
        pass

    # Fallback when running from an installed wheel
    return "0.1.0"


__version__ = _get_version()
__app_name__ = "LexiSnap"
