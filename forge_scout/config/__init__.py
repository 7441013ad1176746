"""Configuration for forge-scout.

Example:
    >>> from forge_scout.config import load_settings
    >>> settings = load_settings()
    >>> settings.cli_timeout
    10.0
"""

from forge_scout.config.settings import ProviderSettings, load_settings, load_settings_lenient

__all__ = ["ProviderSettings", "load_settings", "load_settings_lenient"]
