# lexisnap/config/settings.py
"""
Application settings management for LexiSnap.

Settings are layered:
- settings.template.json: developer defaults shipped with the app
- user_settings.json: only the keys a user is allowed to change
- environment variables: deployment overrides (API key, model, host, ...)
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

# Module logger
logger = logging.getLogger(__name__)

# Keys that user_settings.json may override
USER_SETTINGS_KEYS = {
    "translation_mode",
    "include_word_details",
    "export_filename_prefix",
    "output_directory",
}

TRANSLATION_MODES = ("stream", "batch")

DEFAULT_REQUEST_TIMEOUT = 120

# env var -> (field name, converter)
_ENV_OVERRIDES = {
    "LEXISNAP_MODEL": ("model", str),
    "LEXISNAP_API_BASE_URL": ("api_base_url", str),
    "LEXISNAP_REQUEST_TIMEOUT": ("request_timeout", int),
    "LEXISNAP_TRANSLATION_MODE": ("translation_mode", str),
    "LEXISNAP_OUTPUT_DIR": ("output_directory", str),
    "LEXISNAP_HOST": ("host", str),
    "LEXISNAP_PORT": ("port", int),
}


@dataclass
class AppSettings:
    """Application settings"""

    # Gemini
    api_key: str = ""
    model: str = "gemini-2.5-flash"
    api_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    request_timeout: int = DEFAULT_REQUEST_TIMEOUT  # Seconds (read timeout per request)

    # Translation
    translation_mode: str = "stream"    # "stream" (NDJSON rows as they arrive) or "batch" (one JSON array)
    include_word_details: bool = True   # Ask for wordType / example columns

    # Export
    export_filename_prefix: str = "translation_export"
    output_directory: Optional[str] = None  # None = system temp dir

    # Upload
    max_file_size_mb: int = 20

    # Server
    host: str = "127.0.0.1"
    port: int = 8080

    @classmethod
    def load(cls, path: Path, environ: Optional[dict[str, str]] = None) -> "AppSettings":
        """Load settings from template, user settings and environment.

        Args:
            path: settings path inside the config directory; the template and
                user settings files are looked up next to it
            environ: environment mapping (defaults to os.environ)
        """
        env = os.environ if environ is None else environ
        config_dir = path.parent
        template_path = config_dir / "settings.template.json"
        user_settings_path = config_dir / "user_settings.json"

        data: dict = {}

        # 1. Developer defaults
        if template_path.exists():
            try:
                with open(template_path, 'r', encoding='utf-8-sig') as f:
                    data = json.load(f)
                    logger.debug("Loaded template settings from: %s", template_path)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("Failed to load template settings: %s", e)

        # 2. User overrides (known keys only)
        if user_settings_path.exists():
            try:
                with open(user_settings_path, 'r', encoding='utf-8-sig') as f:
                    user_data = json.load(f)
                    for key in USER_SETTINGS_KEYS:
                        if key in user_data:
                            data[key] = user_data[key]
                    logger.debug("Loaded user settings from: %s", user_settings_path)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning("Failed to load user settings: %s", e)

        # The credential never comes from a settings file
        data.pop('api_key', None)

        # 3. Environment
        api_key = env.get("GEMINI_API_KEY") or env.get("API_KEY")
        if api_key:
            data["api_key"] = api_key
        for env_name, (field_name, convert) in _ENV_OVERRIDES.items():
            raw = env.get(env_name)
            if raw is None or raw == "":
                continue
            try:
                data[field_name] = convert(raw)
            except ValueError:
                logger.warning("Ignoring invalid %s=%r", env_name, raw)

        known_fields = {f.name for f in fields(cls)}
        filtered_data = {k: v for k, v in data.items() if k in known_fields}

        settings = cls(**filtered_data)
        settings._validate()
        return settings

    def _validate(self) -> None:
        """Normalize setting values. Invalid values are reset to defaults with warnings."""
        if self.translation_mode not in TRANSLATION_MODES:
            logger.warning("Unknown translation_mode %r, using 'stream'", self.translation_mode)
            self.translation_mode = "stream"

        if self.request_timeout <= 0:
            logger.warning(
                "request_timeout must be positive (%d), resetting to %d",
                self.request_timeout, DEFAULT_REQUEST_TIMEOUT,
            )
            self.request_timeout = DEFAULT_REQUEST_TIMEOUT

        if self.max_file_size_mb <= 0:
            self.max_file_size_mb = 20

        self.api_base_url = self.api_base_url.rstrip('/')

        if not self.export_filename_prefix.strip():
            self.export_filename_prefix = "translation_export"

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    def get_output_directory(self) -> Path:
        """Directory that receives exported workbooks."""
        if self.output_directory:
            return Path(self.output_directory)
        return Path(tempfile.gettempdir()) / "lexisnap"


def get_default_settings_path() -> Path:
    """Get default settings file path"""
    return Path(__file__).parent.parent.parent / "config" / "settings.json"
