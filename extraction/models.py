"""
Data models for extracted TeX records.
"""

from dataclasses import dataclass, asdict, field
from typing import Optional, Dict, Any, List


@dataclass
class CatalogEntry:
    """Raw, source-agnostic description of one command.

    Attributes:
        command: Command name without the leading backslash. A leading space
            marks an entry that is inserted without the backslash prefix.
        snippet: Optional snippet template with ``${N}`` placeholders.
        detail: Short detail line shown next to the suggestion.
        documentation: Longer documentation text.
        sort_text: Explicit sort key; defaults to the lower-cased command.
        post_action: Editor action run after the suggestion is accepted.
        package: Name of the package that contributes the command.
    """

    command: str
    snippet: Optional[str] = None
    detail: Optional[str] = None
    documentation: Optional[str] = None
    sort_text: Optional[str] = None
    post_action: Optional[str] = None
    package: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert the entry to a dictionary, dropping unset fields."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_dict(cls, key: str, payload: Dict[str, Any]) -> "CatalogEntry":
        """Build an entry from a data-table record.

        Args:
            key: Table key, used when the record has no ``command`` field.
            payload: Record using the data-file field names
                (``snippet``, ``detail``, ``documentation``, ``description``,
                ``sortText``, ``postAction``, ``package``).

        Returns:
            The parsed CatalogEntry.

        Raises:
            ValueError: If the record is not a mapping or the command is empty.
        """
        if not isinstance(payload, dict):
            raise ValueError(f"entry '{key}' must be an object")
        command = str(payload.get("command") or key)
        if not command:
            raise ValueError("entry command must not be empty")
        return cls(
            command=command,
            snippet=payload.get("snippet"),
            detail=payload.get("detail"),
            documentation=payload.get("documentation") or payload.get("description"),
            sort_text=payload.get("sortText"),
            post_action=payload.get("postAction"),
            package=payload.get("package"),
        )


@dataclass(frozen=True)
class MacroDefinitionRecord:
    """Location of the first ``\\newcommand``-style definition of a macro.

    Attributes:
        name: Defined macro name without the backslash.
        line: 0-indexed line of the definition.
        file_path: File the definition was found in.
    """

    name: str
    line: int
    file_path: str


@dataclass
class FileExtraction:
    """Everything the scanner recovers from one document."""

    file_path: str
    commands: Dict[str, CatalogEntry] = field(default_factory=dict)
    macro_definitions: List[MacroDefinitionRecord] = field(default_factory=list)
    packages: List[str] = field(default_factory=list)
