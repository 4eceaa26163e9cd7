"""Core shared contracts and utilities."""

from core.structured_logging import (
    configure_structured_logging,
    get_session_id,
    phase_scope,
    set_session_id,
)
from core.settings import (
    CatalogSettings,
    ConfigValidationError,
    PACKAGES_ENABLED_KEY,
    SYMBOLS_ENABLED_KEY,
    load_settings,
    resolve_strict_config_validation,
)
from core.data_files import (
    DataSourceError,
    load_data_payload,
    load_entry_table,
    load_name_list,
    resolve_data_path,
)
from core.run_artifacts import build_catalog_report, write_catalog_report

__all__ = [
    "configure_structured_logging",
    "get_session_id",
    "phase_scope",
    "set_session_id",
    "CatalogSettings",
    "ConfigValidationError",
    "PACKAGES_ENABLED_KEY",
    "SYMBOLS_ENABLED_KEY",
    "load_settings",
    "resolve_strict_config_validation",
    "DataSourceError",
    "load_data_payload",
    "load_entry_table",
    "load_name_list",
    "resolve_data_path",
    "build_catalog_report",
    "write_catalog_report",
]
