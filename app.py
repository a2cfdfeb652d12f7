#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
LexiSnap - Extract text from images/PDFs and translate selected snippets

Entry point for the NiceGUI-based application.
"""

import logging
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

LOG_FILE_PATH = Path.home() / ".lexisnap" / "logs" / "lexisnap.log"


def setup_logging():
    """Configure logging to console and file.

    Log file location: ~/.lexisnap/logs/lexisnap.log (truncated on startup)

    Returns:
        tuple: (console_handler, file_handler) to keep references alive
    """
    logs_dir = LOG_FILE_PATH.parent

    # Create console handler first (always works)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%H:%M:%S'
    ))

    file_handler = None
    try:
        logs_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(LOG_FILE_PATH, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
    except OSError as e:
        # Fall back to console-only logging
        print(f"[WARNING] Failed to create log file {LOG_FILE_PATH}: {e}", file=sys.stderr)
        file_handler = None

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.addHandler(console_handler)
    if file_handler:
        root_logger.addHandler(file_handler)

    # Suppress verbose logging from third-party libraries
    # python_multipart: Logs every chunk during file upload (very noisy)
    for name in ['python_multipart', 'python_multipart.multipart', 'multipart',
                 'uvicorn', 'uvicorn.error', 'uvicorn.access',
                 'starlette', 'httpcore', 'httpx',
                 'asyncio', 'concurrent']:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("LexiSnap starting...")
    logger.info("=" * 60)
    logger.debug("sys.argv: %s", sys.argv)
    if file_handler:
        logger.info("Log file: %s", LOG_FILE_PATH)
    else:
        logger.warning("File logging disabled - console only")

    return (console_handler, file_handler)


# Global reference to keep log handlers alive (prevents garbage collection)
_global_log_handlers = None


def main():
    """Main entry point"""
    import asyncio

    global _global_log_handlers
    _global_log_handlers = setup_logging()

    logger = logging.getLogger(__name__)

    from lexisnap.config.settings import AppSettings, get_default_settings_path

    settings = AppSettings.load(get_default_settings_path())
    logger.info("Model: %s, translation mode: %s", settings.model, settings.translation_mode)

    # NiceGUI is imported inside run_app()
    from lexisnap.ui.app import run_app

    try:
        run_app(settings)
    except KeyboardInterrupt:
        logger.debug("Application shutdown via KeyboardInterrupt")
    except asyncio.CancelledError:
        logger.debug("Application shutdown via CancelledError")
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        raise


if __name__ == '__main__':
    main()
