"""Loading contract for the catalog's read-only data tables."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


class DataSourceError(RuntimeError):
    """Raised when a required data table is missing or unparseable."""


def _expect_dict(payload: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise DataSourceError(f"{ctx} must be an object")
    return payload


def _expect_list(payload: Any, ctx: str) -> list[Any]:
    if not isinstance(payload, list):
        raise DataSourceError(f"{ctx} must be a list")
    return payload


def load_data_payload(path: str | Path) -> Any:
    """Read and parse a JSON or YAML data file.

    Raises:
        DataSourceError: If the file does not exist or cannot be parsed.
    """
    data_path = Path(path)
    if not data_path.is_file():
        raise DataSourceError(f"Data file not found: {data_path}")

    try:
        text = data_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DataSourceError(f"Cannot read data file {data_path}: {exc}") from exc

    suffix = data_path.suffix.lower()
    try:
        if suffix in {".yml", ".yaml"}:
            payload = yaml.safe_load(text)
        else:
            payload = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DataSourceError(f"Failed to parse data file {data_path}: {exc}") from exc

    logger.info("Loaded data file %s", data_path)
    return payload


def load_entry_table(path: str | Path) -> dict[str, dict[str, Any]]:
    """Load a command table: mapping of command name to entry record."""
    payload = _expect_dict(load_data_payload(path), f"command table {path}")
    for key, record in payload.items():
        _expect_dict(record, f"entry '{key}' in {path}")
    return payload


def load_name_list(path: str | Path) -> list[str]:
    """Load a list of names, e.g. the default environments."""
    payload = _expect_list(load_data_payload(path), f"name list {path}")
    names: list[str] = []
    for item in payload:
        name = str(item).strip()
        if not name:
            raise DataSourceError(f"name list {path} contains an empty name")
        names.append(name)
    return names


def resolve_data_path(data_dir: str | Path, name: str) -> Path:
    """Resolve a data file path relative to the data directory if needed."""
    raw = Path(name)
    return raw if raw.is_absolute() else (Path(data_dir) / raw)
