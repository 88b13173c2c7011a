"""
Adapters layer - Sources of organization settings.
"""

from .config_settings_store import ConfigSettingsStore

__all__ = ["ConfigSettingsStore"]
