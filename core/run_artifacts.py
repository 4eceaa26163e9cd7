"""Catalog run report helpers."""

from __future__ import annotations

import json
import os
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Sequence

REPORT_SCHEMA_VERSION = 1

# Counters every report carries, defaulting to zero.
REPORT_COUNT_KEYS: tuple[str, ...] = (
    "files_processed",
    "files_failed",
    "commands_extracted",
    "definitions_found",
    "suggestions",
    "packages",
    "macro_definitions",
)


def build_catalog_report(
    source_dir: str,
    suggestions: Sequence[Mapping[str, Any]],
    used_packages: Iterable[str],
    macro_definitions: Mapping[str, Mapping[str, Any]],
    extraction_stats: Mapping[str, int] | None = None,
    elapsed_seconds: float | None = None,
) -> dict[str, Any]:
    """Assemble the report of one catalog build.

    Args:
        source_dir: Scanned project directory.
        suggestions: Serialized suggestions (``Suggestion.to_dict`` output).
        used_packages: Package names in discovery order.
        macro_definitions: Macro name -> ``{"file": ..., "line": ...}``.
        extraction_stats: Counters from the directory scan.
        elapsed_seconds: Wall time of the build.

    Returns:
        Report payload with a ``counts`` block, the per-kind breakdown and a
        snapshot of the suggestion labels in catalog order.
    """
    packages = list(used_packages)
    counts = {key: 0 for key in REPORT_COUNT_KEYS}
    for key, value in (extraction_stats or {}).items():
        if key in counts:
            counts[key] = int(value)
    counts["suggestions"] = len(suggestions)
    counts["packages"] = len(packages)
    counts["macro_definitions"] = len(macro_definitions)

    report: dict[str, Any] = {
        "schema_version": REPORT_SCHEMA_VERSION,
        "source_dir": source_dir,
        "counts": counts,
        "suggestions_by_kind": dict(
            sorted(Counter(item.get("kind", "unknown") for item in suggestions).items())
        ),
        "suggestion_labels": [item["label"] for item in suggestions],
        "used_packages": packages,
        "macro_definitions": {name: dict(record) for name, record in macro_definitions.items()},
    }
    if elapsed_seconds is not None:
        report["elapsed_seconds"] = round(elapsed_seconds, 3)
    return report


def write_catalog_report(
    report: dict[str, Any],
    session_id: str,
    output_dir: str = "output/catalog_reports",
) -> str:
    """Write a JSON report of one catalog build and return its path.

    Raises:
        ValueError: If the report carries no ``counts`` mapping.
    """
    if not isinstance(report.get("counts"), dict):
        raise ValueError("catalog report must contain a 'counts' mapping")
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("schema_version", REPORT_SCHEMA_VERSION)
    payload.setdefault("session_id", session_id)
    payload.setdefault("generated_at_utc", datetime.now(timezone.utc).isoformat())
    path = os.path.join(output_dir, f"catalog-{session_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)
    return path
