"""Configuration for tsmend runs."""

from .config_loader import FixerSettings, LimitSettings, SpecialImport, TscSettings, get_settings

__all__ = [
    "FixerSettings",
    "LimitSettings",
    "SpecialImport",
    "TscSettings",
    "get_settings",
]
