"""
Presentation-ready completion suggestions.

``normalize`` is the single place where the backslash prefix and sort-key
rules live; every source of suggestions goes through it.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Dict, Any

from completion.config import ITEMIZED_ENVIRONMENTS
from extraction.models import CatalogEntry


class SuggestionKind(str, Enum):
    FUNCTION = "function"
    SNIPPET = "snippet"


@dataclass(frozen=True)
class Suggestion:
    """A completion candidate.

    Attributes:
        label: Text shown in the completion list, e.g. ``\\textbf``.
        kind: FUNCTION for commands, SNIPPET for environment blocks.
        insert_template: Snippet or plain text inserted on accept.
        sort_key: Key used by the UI for ordering.
        documentation: Optional documentation text.
        detail: Optional detail line.
        triggered_action: Editor action run after insertion, if any.
        filter_text: Text matched against the typed prefix, if not the label.
    """

    label: str
    kind: SuggestionKind
    insert_template: str
    sort_key: str
    documentation: Optional[str] = None
    detail: Optional[str] = None
    triggered_action: Optional[str] = None
    filter_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["kind"] = self.kind.value
        return {key: value for key, value in payload.items() if value is not None}


def normalize(entry: CatalogEntry) -> Suggestion:
    """Turn a raw catalog entry into a Suggestion.

    Args:
        entry: Entry with a non-empty ``command``.

    Returns:
        Suggestion labelled with the backslash prefix, unless the command
        starts with a space.
    """
    prefix = "" if entry.command.startswith(" ") else "\\"
    return Suggestion(
        label=f"{prefix}{entry.command}",
        kind=SuggestionKind.FUNCTION,
        insert_template=entry.snippet if entry.snippet else entry.command,
        sort_key=entry.sort_text or entry.command.lower(),
        documentation=entry.documentation,
        detail=entry.detail,
        triggered_action=entry.post_action,
    )


def environment_snippet(env: str) -> Suggestion:
    """Build the default ``\\begin{env} ... \\end{env}`` snippet."""
    body = "\\item $0" if env in ITEMIZED_ENVIRONMENTS else "$0"
    return Suggestion(
        label=f"\\begin{{{env}}} ... \\end{{{env}}}",
        kind=SuggestionKind.SNIPPET,
        insert_template=f"begin{{{env}}}\n\t{body}\n\\\\end{{{env}}}",
        sort_key=env.lower(),
        filter_text=env,
    )
