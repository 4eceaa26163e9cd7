"""Catalog settings loading and validation helpers.

Provides strict/non-strict parsing of the settings YAML file holding the
feature flags consulted by the completion catalog.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)

SYMBOLS_ENABLED_KEY = "intellisense.unimathsymbols.enabled"
PACKAGES_ENABLED_KEY = "intellisense.package.enabled"
COOLDOWN_KEY = "intellisense.refresh.cooldown_ms"
DATA_DIR_KEY = "data_dir"

DEFAULT_COOLDOWN_SECONDS = 1.0


class ConfigValidationError(RuntimeError):
    """Raised when strict settings validation fails."""


@dataclass(frozen=True)
class CatalogSettings:
    """Feature flags and tuning knobs for the command catalog."""

    symbols_enabled: bool = False
    packages_enabled: bool = True
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS
    data_dir: str = "data"
    strict: bool = False

    def get(self, key: str, default: Any = None) -> Any:
        """Answer a dotted configuration key."""
        if key == SYMBOLS_ENABLED_KEY:
            return self.symbols_enabled
        if key == PACKAGES_ENABLED_KEY:
            return self.packages_enabled
        if key == COOLDOWN_KEY:
            return int(self.cooldown_seconds * 1000)
        if key == DATA_DIR_KEY:
            return self.data_dir
        return default


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def _lookup(payload: dict[str, Any], dotted_key: str) -> Any:
    """Find ``dotted_key`` either as a flat key or as nested mappings."""
    if dotted_key in payload:
        return payload[dotted_key]
    node: Any = payload
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node


def _fail(msg: str, strict: bool, exc: Optional[Exception] = None) -> None:
    if strict:
        if exc is not None:
            raise ConfigValidationError(msg) from exc
        raise ConfigValidationError(msg)
    logger.warning("%s; continuing with defaults", msg)


def load_settings_payload(settings_path: str, strict: bool = False) -> dict[str, Any]:
    """Load and parse the settings YAML file.

    In non-strict mode this returns an empty dict on parse/read failures.
    In strict mode this raises ``ConfigValidationError``.
    """
    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        _fail(f"Settings file not found: {settings_path}", strict, exc)
        return {}
    except yaml.YAMLError as exc:
        _fail(f"Failed to parse settings YAML at {settings_path}: {exc}", strict, exc)
        return {}

    if payload is None:
        return {}

    if not isinstance(payload, dict):
        _fail(f"Unexpected settings payload type: {type(payload).__name__}", strict)
        return {}

    return payload


def _coerce_bool(value: Any, key: str, default: bool, strict: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"1", "true", "yes", "on", "0", "false", "no", "off"}:
        return value.strip().lower() in {"1", "true", "yes", "on"}
    _fail(f"Setting '{key}' must be a boolean, got {value!r}", strict)
    return default


def _coerce_cooldown(value: Any, strict: bool) -> float:
    if value is None:
        return DEFAULT_COOLDOWN_SECONDS
    try:
        millis = float(value)
    except (TypeError, ValueError):
        _fail(f"Setting '{COOLDOWN_KEY}' must be a number, got {value!r}", strict)
        return DEFAULT_COOLDOWN_SECONDS
    if millis < 0:
        _fail(f"Setting '{COOLDOWN_KEY}' must not be negative", strict)
        return DEFAULT_COOLDOWN_SECONDS
    return millis / 1000.0


def load_settings(
    settings_path: Optional[str] = None,
    strict: Optional[bool] = None,
) -> CatalogSettings:
    """Build catalog settings from an optional YAML file and the environment.

    Environment variables override file values:
    ``TEXCATALOG_SYMBOLS_ENABLED``, ``TEXCATALOG_PACKAGES_ENABLED``,
    ``TEXCATALOG_COOLDOWN_MS`` and ``TEXCATALOG_DATA_DIR``.
    """
    if strict is None:
        strict = resolve_strict_config_validation()

    payload: dict[str, Any] = {}
    if settings_path:
        payload = load_settings_payload(settings_path, strict=strict)

    settings = CatalogSettings(
        symbols_enabled=_coerce_bool(
            _lookup(payload, SYMBOLS_ENABLED_KEY), SYMBOLS_ENABLED_KEY, False, strict
        ),
        packages_enabled=_coerce_bool(
            _lookup(payload, PACKAGES_ENABLED_KEY), PACKAGES_ENABLED_KEY, True, strict
        ),
        cooldown_seconds=_coerce_cooldown(_lookup(payload, COOLDOWN_KEY), strict),
        data_dir=str(payload.get(DATA_DIR_KEY) or "data"),
        strict=strict,
    )

    overrides: dict[str, Any] = {}
    if os.getenv("TEXCATALOG_SYMBOLS_ENABLED") is not None:
        overrides["symbols_enabled"] = _env_flag("TEXCATALOG_SYMBOLS_ENABLED")
    if os.getenv("TEXCATALOG_PACKAGES_ENABLED") is not None:
        overrides["packages_enabled"] = _env_flag("TEXCATALOG_PACKAGES_ENABLED")
    if os.getenv("TEXCATALOG_COOLDOWN_MS") is not None:
        overrides["cooldown_seconds"] = _coerce_cooldown(
            os.getenv("TEXCATALOG_COOLDOWN_MS"), strict
        )
    if os.getenv("TEXCATALOG_DATA_DIR"):
        overrides["data_dir"] = os.environ["TEXCATALOG_DATA_DIR"]

    if overrides:
        settings = replace(settings, **overrides)
    logger.debug("Resolved catalog settings: %s", settings)
    return settings
