"""
Wrap selection ("surround") with a command from the catalog.

Only suggestions that take an argument are offered. The chosen template is
rendered once per selected range, with the range's text (or the explicit
content given by the caller) placed in the template's first slot.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from completion.catalog import CommandCatalog
from completion.config import SURROUND_EXCLUDED_LABELS, SURROUND_PLACEHOLDER
from completion.host import EditorHost, SelectionRange
from completion.suggestion import Suggestion
from completion.templates import SnippetTemplate, unescape_first_backslash
from core.structured_logging import phase_scope

logger = logging.getLogger(__name__)


def flatten_template(template: str) -> str:
    """Single-line display form of a snippet template."""
    flat = template.replace("\n", "").replace("\t", "")
    return unescape_first_backslash(flat)


def list_wrappable_templates(suggestions: Iterable[Suggestion]) -> List[str]:
    """Display strings of all suggestions usable as wrappers.

    Args:
        suggestions: Current catalog snapshot.

    Returns:
        Flattened templates of the suggestions with a ``${N}`` slot, in
        snapshot order. ``\\begin`` is never offered.
    """
    candidates: List[str] = []
    for suggestion in suggestions:
        if suggestion.label in SURROUND_EXCLUDED_LABELS:
            continue
        if not SnippetTemplate.parse(suggestion.insert_template).has_braced_placeholder():
            continue
        candidates.append(flatten_template(suggestion.insert_template))
    return candidates


def apply_wrap(
    chosen: str,
    selections: Sequence[SelectionRange],
    content: Optional[str] = None,
) -> List[str]:
    """Compute the replacement text for every selected range.

    Args:
        chosen: Display string picked from ``list_wrappable_templates``.
        selections: Ranges to wrap, with their current text.
        content: Text to wrap in every range instead of the range's own text.
            An empty string counts as not given. Explicit content is inserted
            as the template renders it; only wrapped selections get the
            leading backslash.

    Returns:
        One replacement string per range, in the same order.
    """
    template = SnippetTemplate.parse(chosen)
    replacements: List[str] = []
    for selection in selections:
        if content:
            replacements.append(template.render_wrapped(content))
        else:
            replacements.append("\\" + template.render_wrapped(selection.text))
    return replacements


class SurroundCommand:
    """Interactive wrap-selection flow over the active editor's selections."""

    def __init__(self, catalog: CommandCatalog, host: Optional[EditorHost] = None):
        self.catalog = catalog
        self.host = host or catalog.host

    async def surround(self, content: Optional[str] = None) -> Optional[List[str]]:
        """Let the user pick a wrapper and apply it to every selection.

        Returns:
            The replacements applied, or None if there is no active editor or
            the picker was dismissed.
        """
        selections = self.host.selections()
        if selections is None:
            return None

        with phase_scope("surround"):
            candidates = list_wrappable_templates(self.catalog.provide())
            selected = await self.host.present_choice(candidates, SURROUND_PLACEHOLDER)
            if selected is None:
                logger.debug("Surround dismissed")
                return None

            replacements = apply_wrap(selected, selections, content)
            self.host.apply_edits(selections, replacements)
            logger.info("Wrapped %d selections with %s", len(replacements), selected)
        return replacements
