"""Export Surface Builder and Named-Export Normalizer."""

from .normalizer import NamedExportNormalizer
from .surface import (
    ExportEntry,
    ExportSurface,
    build_export_surface,
    collect_module_exports,
    default_export_name,
)

__all__ = [
    "ExportEntry",
    "ExportSurface",
    "NamedExportNormalizer",
    "build_export_surface",
    "collect_module_exports",
    "default_export_name",
]
