"""
Command catalog aggregator.

Merges every source of command suggestions into one list:

1. default commands and environment snippets,
2. default symbols (when enabled),
3. commands of the packages used by the project,
4. commands scanned from project files,
5. a fresh scan of the focused document.

Earlier sources win; a key already present is never overwritten. The merged
list is recomputed at most once per cooldown window.
"""

import logging
import time
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Union

from completion.config import (
    BRACKET_COMMANDS,
    COMMANDS_FILE,
    ENVIRONMENTS_FILE,
    SYMBOLS_FILE,
)
from completion.host import EditorHost
from completion.package_cache import PackageCommandCache
from completion.suggestion import Suggestion, environment_snippet, normalize
from core.data_files import load_entry_table, load_name_list, resolve_data_path
from core.settings import CatalogSettings, SYMBOLS_ENABLED_KEY
from core.structured_logging import phase_scope
from extraction.models import CatalogEntry, FileExtraction, MacroDefinitionRecord
from extraction.scanner import extract_package_names, scan_text

logger = logging.getLogger(__name__)

EntryLike = Union[CatalogEntry, dict]


def _as_entry(key: str, item: EntryLike) -> CatalogEntry:
    if isinstance(item, CatalogEntry):
        return item
    return CatalogEntry.from_dict(key, item)


class CommandCatalog:
    """Owns the command tables and serves the merged suggestion list.

    Args:
        host: Editor collaborator for file access, flags and the active document.
        data_dir: Directory with the default and package data tables.
        cooldown_seconds: Minimum time between two recomputations.
        strict: Propagate malformed package tables as errors.
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        host: EditorHost,
        data_dir: Union[str, Path] = "data",
        cooldown_seconds: float = 1.0,
        strict: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.host = host
        self.data_dir = Path(data_dir)
        self.cooldown_seconds = cooldown_seconds
        self.clock = clock

        self.default_commands: Dict[str, Suggestion] = {}
        self.default_symbols: Dict[str, Suggestion] = {}
        self.symbols_loaded = False
        self.special_brackets: Dict[str, Suggestion] = {}
        self.commands_in_files: Dict[str, Dict[str, CatalogEntry]] = {}
        self.macro_definitions: Dict[str, MacroDefinitionRecord] = {}
        self.used_packages: List[str] = []
        self.package_cache = PackageCommandCache(
            data_dir=str(self.data_dir),
            get_config=host.get_config,
            file_exists=host.file_exists,
            strict=strict,
        )

        self.suggestions: List[Suggestion] = []
        self.last_refresh: Optional[float] = None

    @classmethod
    def from_data_dir(
        cls,
        host: EditorHost,
        settings: CatalogSettings,
        data_dir: Optional[Union[str, Path]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> "CommandCatalog":
        """Create a catalog and load its default tables from ``data_dir``.

        Raises:
            DataSourceError: If the default commands or environments are
                missing or unparseable.
        """
        directory = Path(data_dir or settings.data_dir)
        catalog = cls(
            host,
            data_dir=directory,
            cooldown_seconds=settings.cooldown_seconds,
            strict=settings.strict,
            clock=clock,
        )
        commands = load_entry_table(resolve_data_path(directory, COMMANDS_FILE))
        environments = load_name_list(resolve_data_path(directory, ENVIRONMENTS_FILE))
        catalog.initialize(commands, environments)
        return catalog

    def initialize(
        self,
        default_commands: Mapping[str, EntryLike],
        default_envs: Iterable[str],
    ) -> None:
        """Build the default table from commands and environment names.

        An environment snippet replaces a default command of the same name.
        """
        for key, item in default_commands.items():
            self.default_commands[key] = normalize(_as_entry(key, item))
        for env in default_envs:
            self.default_commands[env] = environment_snippet(env)
        self.special_brackets = {
            bracket: self.default_commands[key]
            for key, bracket in BRACKET_COMMANDS.items()
            if key in self.default_commands
        }
        logger.info(
            "Initialized catalog with %d default entries", len(self.default_commands)
        )

    def load_symbols(self) -> None:
        """Load the default symbol table.

        Raises:
            DataSourceError: If the symbol table is missing or unparseable.
        """
        table = load_entry_table(resolve_data_path(self.data_dir, SYMBOLS_FILE))
        self.default_symbols = {
            key: normalize(CatalogEntry.from_dict(key, record))
            for key, record in table.items()
        }
        self.symbols_loaded = True
        logger.info("Loaded %d default symbols", len(self.default_symbols))

    def invalidate(self) -> None:
        """Force the next ``provide`` call to recompute."""
        self.last_refresh = None

    def _in_cooldown(self) -> bool:
        if self.last_refresh is None:
            return False
        return self.clock() - self.last_refresh < self.cooldown_seconds

    def provide(self) -> List[Suggestion]:
        """Return the merged suggestion list.

        Within the cooldown window the previous list object is returned as is,
        even if the underlying tables changed.
        """
        if self._in_cooldown():
            return self.suggestions

        with phase_scope("provide"):
            suggestions: Dict[str, Suggestion] = dict(self.default_commands)

            if self.host.get_config(SYMBOLS_ENABLED_KEY):
                if not self.symbols_loaded:
                    self.load_symbols()
                for key, suggestion in self.default_symbols.items():
                    suggestions.setdefault(key, suggestion)

            for package in self.used_packages:
                self.package_cache.ensure_loaded(package, suggestions)

            for file_path in self.host.relevant_file_set():
                for key, entry in self.commands_in_files.get(file_path, {}).items():
                    if key not in suggestions:
                        suggestions[key] = normalize(entry)

            document = self.host.current_document()
            if document is not None:
                scanned = scan_text(document.text, document.path)
                self._record_definitions(scanned.macro_definitions)
                for key, entry in scanned.commands.items():
                    if key not in suggestions:
                        suggestions[key] = normalize(entry)

            self.suggestions = list(suggestions.values())
            self.last_refresh = self.clock()
            logger.debug("Recomputed %d suggestions", len(self.suggestions))
        return self.suggestions

    def _record_definitions(self, records: Iterable[MacroDefinitionRecord]) -> None:
        for record in records:
            self.macro_definitions.setdefault(record.name, record)

    def rescan_file(self, file_path: str) -> Dict[str, CatalogEntry]:
        """Re-extract the commands of one file, replacing its previous table."""
        with phase_scope("rescan"):
            scanned = scan_text(self.host.read_file(file_path), file_path)
            self.commands_in_files[file_path] = scanned.commands
            self._record_definitions(scanned.macro_definitions)
            logger.debug("Rescanned %s: %d commands", file_path, len(scanned.commands))
        return scanned.commands

    def add_extraction(self, result: FileExtraction) -> None:
        """Adopt a file scanned ahead of time.

        Replaces the file's command table, records its macro definitions and
        appends its packages not yet in ``used_packages``.
        """
        self.commands_in_files[result.file_path] = result.commands
        self._record_definitions(result.macro_definitions)
        for package in result.packages:
            if package not in self.used_packages:
                self.used_packages.append(package)

    def forget_file(self, file_path: str) -> None:
        """Drop the extracted commands of a file that no longer exists."""
        self.commands_in_files.pop(file_path, None)

    def record_package_usage(self, file_path: str) -> List[str]:
        """Scan one file for ``\\usepackage`` and extend the used packages.

        Returns:
            The newly discovered package names.
        """
        new_packages = extract_package_names(
            self.host.read_file(file_path), known=self.used_packages
        )
        self.used_packages.extend(new_packages)
        if new_packages:
            logger.debug("Packages used in %s: %s", file_path, ", ".join(new_packages))
        return new_packages

    def find_macro_definition(self, name: str) -> Optional[MacroDefinitionRecord]:
        """Location of the first known definition of ``name``, if any."""
        return self.macro_definitions.get(name.lstrip("\\"))
