"""
Tests for risk classification (packageage/core/services/classifier.py).
"""

from datetime import datetime, timedelta, timezone

import pytest

from packageage.core.config import AppSettings
from packageage.core.domain.models import AgeClassification
from packageage.core.services.classifier import (
    RiskThresholds,
    classify,
    classify_age,
    days_since,
)


class TestDaysSince:
    """Tests for whole-day arithmetic."""

    def test_floors_partial_days(self, fixed_now):
        """Test a partial day does not count."""
        moment = fixed_now - timedelta(days=365, hours=23, minutes=59)
        assert days_since(moment, now=fixed_now) == 365

    def test_naive_datetime_is_utc(self, fixed_now):
        """Test naive timestamps are read as UTC."""
        naive = (fixed_now - timedelta(days=3)).replace(tzinfo=None)
        assert days_since(naive, now=fixed_now) == 3

    def test_other_timezone(self, fixed_now):
        """Test aware timestamps in another zone compare correctly."""
        plus_two = timezone(timedelta(hours=2))
        moment = (fixed_now - timedelta(days=10)).astimezone(plus_two)
        assert days_since(moment, now=fixed_now) == 10

    def test_defaults_to_current_time(self):
        """Test `now` defaults to the wall clock."""
        moment = datetime.now(timezone.utc) - timedelta(days=2, hours=1)
        assert days_since(moment) == 2


class TestClassifyAge:
    """Tests for the day thresholds."""

    @pytest.mark.parametrize(
        ("days", "expected"),
        [
            (0, AgeClassification.ACTIVE),
            (365, AgeClassification.ACTIVE),
            (366, AgeClassification.STALE),
            (730, AgeClassification.STALE),
            (731, AgeClassification.ABANDONED),
            (5000, AgeClassification.ABANDONED),
            (-3, AgeClassification.ACTIVE),
        ],
    )
    def test_default_boundaries(self, days, expected):
        """Test the one-year and two-year boundaries are exclusive."""
        assert classify_age(days, RiskThresholds()) is expected

    def test_injected_thresholds(self):
        """Test custom thresholds change the buckets."""
        thresholds = RiskThresholds(stale_days=30, abandoned_days=90)
        assert classify_age(30, thresholds) is AgeClassification.ACTIVE
        assert classify_age(31, thresholds) is AgeClassification.STALE
        assert classify_age(91, thresholds) is AgeClassification.ABANDONED

    def test_thresholds_from_settings(self):
        """Test thresholds come from configuration."""
        settings = AppSettings(_env_file=None, stale_threshold_days=10, abandoned_threshold_days=20)
        assert RiskThresholds.from_settings(settings) == RiskThresholds(stale_days=10, abandoned_days=20)


class TestClassify:
    """Tests for full metadata classification."""

    @pytest.mark.parametrize(
        ("days", "expected"),
        [
            (365, AgeClassification.ACTIVE),
            (366, AgeClassification.STALE),
            (730, AgeClassification.STALE),
            (731, AgeClassification.ABANDONED),
        ],
    )
    def test_age_bucket(self, metadata_factory, fixed_now, days, expected):
        """Test metadata age maps to the expected bucket."""
        result = classify(metadata_factory("pkg", days_ago=days), now=fixed_now)
        assert result.age is expected
        assert result.days_since_update == days
        assert result.package_name == "pkg"

    def test_deprecated_and_recent(self, metadata_factory, fixed_now):
        """Test deprecation is flagged even for an active package."""
        result = classify(metadata_factory("pkg", days_ago=5, deprecated=True), now=fixed_now)
        assert result.age is AgeClassification.ACTIVE
        assert result.deprecated
        assert result.flagged

    def test_missing_timestamp(self, metadata_factory, fixed_now):
        """Test a package without `time.modified` is active with unknown age."""
        result = classify(metadata_factory("pkg"), now=fixed_now)
        assert result.age is AgeClassification.ACTIVE
        assert result.days_since_update is None
        assert not result.flagged

    def test_missing_timestamp_keeps_deprecation(self, metadata_factory, fixed_now):
        """Test deprecation survives a missing timestamp."""
        result = classify(metadata_factory("pkg", deprecated=True, message="use other"), now=fixed_now)
        assert result.deprecated
        assert result.deprecation_message == "use other"
        assert result.flagged

    def test_active_is_not_flagged(self, metadata_factory, fixed_now):
        """Test a fresh, non-deprecated package raises nothing."""
        assert not classify(metadata_factory("pkg", days_ago=1), now=fixed_now).flagged
