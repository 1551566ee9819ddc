"""Advisory text rendering.

Turns classified packages into the single warning message attached to the
approve decision. Input order is kept as-is.
"""

from __future__ import annotations

from typing import Iterable

from packageage.core.domain.models import AgeClassification, Classification

ADVISORY_HEADER = "Package age warnings:"
ADVISORY_FOOTER = "Consider using more actively maintained alternatives."


def describe(classification: Classification) -> list[str]:
    """Warning lines for one package; empty when nothing is worth flagging."""

    name = classification.package_name
    lines: list[str] = []
    if classification.deprecated:
        lines.append(f"{name}: DEPRECATED")

    days = classification.days_since_update
    if classification.age is AgeClassification.ABANDONED:
        lines.append(f"{name}: possibly abandoned (last updated {days} days ago)")
    elif classification.age is AgeClassification.STALE:
        lines.append(f"{name}: stale (last updated {days} days ago)")
    return lines


def collect_warnings(classifications: Iterable[Classification]) -> list[str]:
    warnings: list[str] = []
    for classification in classifications:
        warnings.extend(describe(classification))
    return warnings


def compose_advisory(classifications: Iterable[Classification]) -> str | None:
    """Return the multi-line advisory, or None when no package is flagged."""

    warnings = collect_warnings(classifications)
    if not warnings:
        return None
    body = "\n".join(f"  - {warning}" for warning in warnings)
    return f"{ADVISORY_HEADER}\n{body}\n\n{ADVISORY_FOOTER}"
