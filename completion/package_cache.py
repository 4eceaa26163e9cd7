"""
Per-package command cache.

Package command tables are read lazily, at most once per package name, from
``<data_dir>/packages/<name>_cmd.json``.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Optional

from completion.config import PACKAGES_DIR, PACKAGE_FILE_SUFFIX
from completion.suggestion import Suggestion, normalize
from core.data_files import DataSourceError, load_entry_table
from core.settings import PACKAGES_ENABLED_KEY
from extraction.models import CatalogEntry

logger = logging.getLogger(__name__)


class PackageCommandCache:
    """Lazily loaded command tables keyed by package name.

    Args:
        data_dir: Directory holding the ``packages/`` sub-directory.
        get_config: Flag lookup; ``intellisense.package.enabled`` gates the cache.
        file_exists: Existence check used before loading a package table.
        strict: Raise on unparseable package tables instead of skipping them.
    """

    def __init__(
        self,
        data_dir: str,
        get_config: Callable[[str], object],
        file_exists: Optional[Callable[[str], bool]] = None,
        strict: bool = False,
    ):
        self.data_dir = Path(data_dir)
        self.get_config = get_config
        self.file_exists = file_exists or (lambda path: Path(path).is_file())
        self.strict = strict
        self.tables: Dict[str, Dict[str, Suggestion]] = {}

    def package_path(self, package: str) -> Path:
        return self.data_dir / PACKAGES_DIR / f"{package}{PACKAGE_FILE_SUFFIX}"

    def is_loaded(self, package: str) -> bool:
        return package in self.tables

    def _load(self, package: str) -> Dict[str, Suggestion]:
        path = self.package_path(package)
        if not self.file_exists(str(path)):
            logger.debug("No command table for package %s", package)
            return {}
        try:
            raw = load_entry_table(path)
            table = {
                key: normalize(CatalogEntry.from_dict(key, record))
                for key, record in raw.items()
            }
        except (DataSourceError, ValueError) as exc:
            if self.strict:
                raise DataSourceError(f"Invalid command table for package {package}: {exc}") from exc
            logger.warning("Ignoring command table for package %s: %s", package, exc)
            return {}
        logger.info("Loaded %d commands for package %s", len(table), package)
        return table

    def ensure_loaded(
        self,
        package: str,
        suggestions: Dict[str, Suggestion],
    ) -> Dict[str, Suggestion]:
        """Load ``package`` once and merge its commands into ``suggestions``.

        Keys already present in ``suggestions`` are left untouched. Does
        nothing when package commands are disabled.

        Returns:
            The package's command table (empty if disabled or unavailable).
        """
        if not self.get_config(PACKAGES_ENABLED_KEY):
            return {}
        if package not in self.tables:
            self.tables[package] = self._load(package)
        table = self.tables[package]
        for key, suggestion in table.items():
            suggestions.setdefault(key, suggestion)
        return table
