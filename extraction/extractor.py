"""
High-level orchestrator for TeX command extraction.

This module provides the entry points for scanning single files or entire
directory trees of TeX sources.
"""

import logging
import os
from typing import Callable, List, Optional, Dict

from extraction.config import TEX_EXTENSIONS, SKIPPED_DIRECTORIES
from extraction.models import FileExtraction
from extraction.scanner import scan_text

logger = logging.getLogger(__name__)


class ExtractionStats:
    """Statistics for an extraction operation."""

    def __init__(self):
        self.files_processed = 0
        self.files_failed = 0
        self.commands_extracted = 0
        self.definitions_found = 0

    def to_dict(self) -> Dict[str, int]:
        """Convert stats to dictionary."""
        return {
            "files_processed": self.files_processed,
            "files_failed": self.files_failed,
            "commands_extracted": self.commands_extracted,
            "definitions_found": self.definitions_found,
        }

    def __str__(self) -> str:
        """String representation of stats."""
        return (
            f"ExtractionStats(processed={self.files_processed}, "
            f"failed={self.files_failed}, commands={self.commands_extracted}, "
            f"definitions={self.definitions_found})"
        )


def read_text_file(file_path: str) -> str:
    """Read a TeX source file as UTF-8, replacing undecodable bytes."""
    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            return f.read()
    except FileNotFoundError:
        logger.error("File not found: %s", file_path)
        raise
    except IOError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise


def is_tex_file(file_path: str) -> bool:
    """Check whether the path has a TeX source extension."""
    return os.path.splitext(file_path)[1].lower() in TEX_EXTENSIONS


def extract_file(
    file_path: str,
    read_file: Optional[Callable[[str], str]] = None,
) -> FileExtraction:
    """Scan a single TeX source file.

    Args:
        file_path: Path to the ``.tex``/``.sty``/``.cls`` file.
        read_file: Optional reader used instead of the local filesystem.

    Returns:
        FileExtraction for the file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a TeX source file.

    Example:
        >>> result = extract_file("thesis/main.tex")
        >>> sorted(result.commands)[:3]
        ['begin', 'cite', 'documentclass']
    """
    if not is_tex_file(file_path):
        raise ValueError(
            f"File {file_path} is not a TeX source file. "
            f"Expected one of: {sorted(TEX_EXTENSIONS)}"
        )

    if read_file is None:
        if not os.path.isfile(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")
        content = read_text_file(file_path)
    else:
        content = read_file(file_path)

    result = scan_text(content, file_path)
    logger.info("Extracted %d commands from %s", len(result.commands), file_path)
    return result


def discover_tex_files(directory: str) -> List[str]:
    """Recursively discover all TeX source files in a directory.

    Args:
        directory: Root directory to search.

    Returns:
        Sorted list of absolute paths to TeX files.
    """
    tex_files = []
    directory = os.path.abspath(directory)

    logger.info("Discovering TeX files in %s", directory)

    for root, dirs, files in os.walk(directory):
        dirs[:] = [d for d in dirs if not d.startswith('.') and d not in SKIPPED_DIRECTORIES]

        for file in files:
            if is_tex_file(file):
                tex_files.append(os.path.join(root, file))

    logger.info("Found %d TeX files", len(tex_files))
    return sorted(tex_files)


def extract_directory(
    directory: str,
    continue_on_error: bool = True,
) -> tuple[List[FileExtraction], ExtractionStats]:
    """Scan all TeX files in a directory tree.

    Args:
        directory: Root directory to process.
        continue_on_error: If True, keep going when a file cannot be read.
            If False, re-raise the first error.

    Returns:
        A tuple of (results, stats).

    Raises:
        FileNotFoundError: If directory does not exist.
    """
    directory = os.path.abspath(directory)

    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Directory not found: {directory}")

    stats = ExtractionStats()
    results: List[FileExtraction] = []

    tex_files = discover_tex_files(directory)
    if not tex_files:
        logger.warning("No TeX files found in %s", directory)
        return results, stats

    for file_path in tex_files:
        try:
            result = extract_file(file_path)
        except (OSError, ValueError) as e:
            logger.error("Failed to scan %s: %s", file_path, e)
            stats.files_failed += 1
            if not continue_on_error:
                raise
            continue
        results.append(result)
        stats.files_processed += 1
        stats.commands_extracted += len(result.commands)
        stats.definitions_found += len(result.macro_definitions)

    logger.info("Extraction complete: %s", stats)
    return results, stats
