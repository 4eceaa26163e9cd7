"""
Layer 2: Completion Catalog

Merges default, symbol, package and scanned commands into a throttled
suggestion list, and wraps selections with catalog commands.
"""

from completion.suggestion import Suggestion, SuggestionKind, normalize, environment_snippet
from completion.templates import Placeholder, SnippetTemplate
from completion.host import DocumentSnapshot, EditorHost, SelectionRange, WorkspaceHost
from completion.package_cache import PackageCommandCache
from completion.catalog import CommandCatalog
from completion.surround import SurroundCommand, apply_wrap, list_wrappable_templates

__all__ = [
    # Suggestions
    "Suggestion",
    "SuggestionKind",
    "normalize",
    "environment_snippet",
    "Placeholder",
    "SnippetTemplate",
    # Host contract
    "DocumentSnapshot",
    "EditorHost",
    "SelectionRange",
    "WorkspaceHost",
    # Catalog
    "PackageCommandCache",
    "CommandCatalog",
    # Wrap selection
    "SurroundCommand",
    "apply_wrap",
    "list_wrappable_templates",
]
