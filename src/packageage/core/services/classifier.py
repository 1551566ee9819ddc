"""Risk classification from registry metadata."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from packageage.core.config import AppSettings
from packageage.core.domain.models import (
    AgeClassification,
    Classification,
    RegistryMetadata,
)


@dataclass(frozen=True)
class RiskThresholds:
    """Day thresholds; a package is STALE above `stale_days` and ABANDONED above `abandoned_days`."""

    stale_days: int = 365
    abandoned_days: int = 730

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "RiskThresholds":
        return cls(
            stale_days=settings.stale_threshold_days,
            abandoned_days=settings.abandoned_threshold_days,
        )


def days_since(moment: datetime, *, now: datetime | None = None) -> int:
    """Whole days elapsed since `moment`, floored. Naive datetimes are UTC."""

    now = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - moment) // timedelta(days=1)


def classify_age(days: int, thresholds: RiskThresholds) -> AgeClassification:
    if days > thresholds.abandoned_days:
        return AgeClassification.ABANDONED
    if days > thresholds.stale_days:
        return AgeClassification.STALE
    return AgeClassification.ACTIVE


def classify(
    metadata: RegistryMetadata,
    thresholds: RiskThresholds | None = None,
    *,
    now: datetime | None = None,
) -> Classification:
    """Map metadata to an age bucket plus the independent deprecation flag.

    Without a modification timestamp the package is ACTIVE (age unknown),
    but a deprecation marker is still reported.
    """

    thresholds = thresholds or RiskThresholds()

    age = AgeClassification.ACTIVE
    days: int | None = None
    if metadata.last_modified_at is not None:
        days = days_since(metadata.last_modified_at, now=now)
        age = classify_age(days, thresholds)

    return Classification(
        package_name=metadata.package_name,
        age=age,
        days_since_update=days,
        deprecated=metadata.deprecated,
        deprecation_message=metadata.deprecation_message,
    )
