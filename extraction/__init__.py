"""
Layer 1: Extraction Engine

Regex-based TeX scanner. Extracts used commands, macro definitions and
declared packages from raw document text.
"""

from extraction.models import CatalogEntry, FileExtraction, MacroDefinitionRecord
from extraction.scanner import (
    build_argument_snippet,
    extract_command_usages,
    extract_macro_definitions,
    extract_package_names,
    scan_text,
)
from extraction.extractor import (
    extract_file,
    extract_directory,
    discover_tex_files,
    ExtractionStats,
)

__all__ = [
    # Data models
    "CatalogEntry",
    "FileExtraction",
    "MacroDefinitionRecord",
    "ExtractionStats",
    # Text scanning
    "build_argument_snippet",
    "extract_command_usages",
    "extract_macro_definitions",
    "extract_package_names",
    "scan_text",
    # File orchestration
    "extract_file",
    "extract_directory",
    "discover_tex_files",
]
