"""Configuration helpers for the back-office backend."""

from .settings import get_settings, Settings

__all__ = ["get_settings", "Settings"]
