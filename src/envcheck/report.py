"""Format and export validation reports."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from envcheck.schema.models import DeprecationNotice, ValidationOutcome


def format_report(
    outcome: ValidationOutcome,
    deprecations: list[DeprecationNotice] | None = None,
    *,
    schema_name: str = "",
) -> str:
    """Produce a human-readable text summary listing every failure."""
    deprecations = deprecations or []
    lines: list[str] = []

    lines.append("=" * 64)
    title = "  Environment Validation Report"
    if schema_name:
        title += f" ({schema_name})"
    lines.append(title)
    lines.append("=" * 64)
    overall = "PASS" if outcome.is_valid else "FAIL"
    lines.append(f"  Overall   : {overall}")
    lines.append(f"  Errors    : {len(outcome.errors)}")
    lines.append(f"  Warnings  : {len(deprecations)}")

    if outcome.errors:
        lines.append("-" * 64)
        lines.append("  Field                          Constraint     Message")
        lines.append("-" * 64)
        for violation in outcome.errors:
            lines.append(
                f"  {violation.field:<30} {violation.constraint:<14} {violation.message}"
            )

    if deprecations:
        lines.append("-" * 64)
        lines.append("  Deprecated settings")
        lines.append("-" * 64)
        for notice in deprecations:
            lines.append(f"  {notice.field:<30} {notice.message}")

    lines.append("=" * 64)
    return "\n".join(lines)


def report_data(
    outcome: ValidationOutcome,
    deprecations: list[DeprecationNotice] | None = None,
    *,
    schema_name: str = "",
) -> dict[str, Any]:
    return {
        "schema": schema_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "is_valid": outcome.is_valid,
        "errors": [v.model_dump(mode="json") for v in outcome.errors],
        "deprecations": [n.model_dump(mode="json") for n in deprecations or []],
    }


def export_report(
    outcome: ValidationOutcome,
    path: str | Path,
    deprecations: list[DeprecationNotice] | None = None,
    *,
    schema_name: str = "",
) -> None:
    """Save a validation report to a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = report_data(outcome, deprecations, schema_name=schema_name)
    path.write_text(json.dumps(data, indent=2, default=str), encoding="utf-8")
