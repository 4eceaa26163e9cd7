"""
Heuristic TeX scanner.

This module turns raw document text into command-usage entries, macro
definitions and package names. Every pass is a linear regex scan; partial or
malformed constructs are simply not recorded, nothing here raises on bad input.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from extraction.config import (
    COMMAND_USAGE_RE,
    MACRO_DEFINITION_RE,
    PACKAGE_USAGE_RE,
    MAX_ARGUMENT_GROUPS,
    RETRIGGER_SUBSTRINGS,
    RETRIGGER_NAMES,
    TRIGGER_SUGGEST_ACTION,
)
from extraction.models import CatalogEntry, FileExtraction, MacroDefinitionRecord

logger = logging.getLogger(__name__)


def build_argument_snippet(name: str, argument_count: int) -> str:
    """Build a snippet template with one placeholder per argument group.

    Args:
        name: Command name without the backslash.
        argument_count: Number of recognized brace groups (capped at 3).

    Returns:
        Snippet such as ``frac{${1}}{${2}}``.

    Example:
        >>> build_argument_snippet("textbf", 1)
        'textbf{${1}}'
    """
    count = min(argument_count, MAX_ARGUMENT_GROUPS)
    return name + "".join("{${%d}}" % index for index in range(1, count + 1))


def needs_retrigger(name: str) -> bool:
    """Check whether completing ``name`` should re-open the suggestion list."""
    if name in RETRIGGER_NAMES:
        return True
    return any(part in name for part in RETRIGGER_SUBSTRINGS)


def extract_command_usages(text: str) -> Dict[str, CatalogEntry]:
    """Collect every command used in ``text``.

    The first occurrence of a command name wins; later usages of the same name
    are ignored even if they carry a different number of arguments.

    Args:
        text: Raw document text.

    Returns:
        Mapping of command name to CatalogEntry, in order of first appearance.
    """
    items: Dict[str, CatalogEntry] = {}
    for match in COMMAND_USAGE_RE.finditer(text):
        name = match.group(1)
        if name in items:
            continue
        entry = CatalogEntry(command=name)
        argument_count = sum(1 for group in match.groups()[1:] if group)
        if argument_count:
            entry.snippet = build_argument_snippet(name, argument_count)
            if needs_retrigger(name):
                entry.post_action = TRIGGER_SUGGEST_ACTION
        items[name] = entry
    return items


def extract_macro_definitions(text: str) -> List[Tuple[str, int]]:
    """Find ``\\newcommand``-style definitions.

    Args:
        text: Raw document text.

    Returns:
        List of ``(name, line)`` pairs, first definition per name only.
        Lines are 0-indexed.
    """
    seen = set()
    definitions: List[Tuple[str, int]] = []
    for match in MACRO_DEFINITION_RE.finditer(text):
        name = match.group(1)
        if name in seen:
            continue
        seen.add(name)
        definitions.append((name, text.count("\n", 0, match.start())))
    return definitions


def extract_package_names(text: str, known: Iterable[str] = ()) -> List[str]:
    """Collect package names declared with ``\\usepackage``.

    Args:
        text: Raw document text.
        known: Package names already recorded; these are not returned again.

    Returns:
        Newly discovered package names in order of appearance.
    """
    seen = set(known)
    packages: List[str] = []
    for match in PACKAGE_USAGE_RE.finditer(text):
        for segment in match.group(1).split(","):
            name = segment.strip()
            if not name or name in seen:
                continue
            seen.add(name)
            packages.append(name)
    return packages


def scan_text(text: str, file_path: str) -> FileExtraction:
    """Run all scanner passes over one document.

    Args:
        text: Raw document text.
        file_path: Path recorded on the macro definitions.

    Returns:
        FileExtraction with commands, macro definitions and package names.
    """
    result = FileExtraction(
        file_path=file_path,
        commands=extract_command_usages(text),
        macro_definitions=[
            MacroDefinitionRecord(name=name, line=line, file_path=file_path)
            for name, line in extract_macro_definitions(text)
        ],
        packages=extract_package_names(text),
    )
    logger.debug(
        "Scanned %s: %d commands, %d definitions, %d packages",
        file_path,
        len(result.commands),
        len(result.macro_definitions),
        len(result.packages),
    )
    return result
