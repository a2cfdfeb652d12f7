# lexisnap/config/__init__.py
"""Configuration for LexiSnap."""

from .settings import AppSettings, get_default_settings_path

__all__ = ['AppSettings', 'get_default_settings_path']
