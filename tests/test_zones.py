"""
Tests for weekly zone classification

Covers the week-over-week rule, the projection-band rule and the zone
tables for both goal types.
"""
import pytest

from mindfit.services.zones import (
    GoalConfiguration, GoalSubtype, GoalType, WeeklyUpdate, Zone,
    classify_week, classify_week_by_limits, expected_weekly_change, zone_config
)

LOSS = GoalConfiguration(GoalType.WEIGHT_LOSS, initial_weight=100, target_weight=80)
GAIN = GoalConfiguration(GoalType.MUSCLE_GAIN, initial_weight=80, target_weight=90)


class TestExpectedChange:

    def test_loss_is_negative_one_percent_by_default(self):
        assert expected_weekly_change(100, LOSS) == pytest.approx(-1.0)

    def test_gain_is_positive_half_percent_by_default(self):
        assert expected_weekly_change(80, GAIN) == pytest.approx(0.4)

    def test_configured_variation_overrides_default(self):
        goal = GoalConfiguration(GoalType.WEIGHT_LOSS, 100, 80, weekly_variation_percent=2.0)
        assert expected_weekly_change(100, goal) == pytest.approx(-2.0)


class TestClassifyWeek:

    def test_loss_exactly_at_expected_is_green(self):
        # expected -1.0, threshold -0.8
        assert classify_week(99, 100, LOSS) == Zone.GREEN

    def test_loss_gain_instead_of_loss_is_red(self):
        assert classify_week(99.9, 99, LOSS) == Zone.RED

    def test_loss_small_drop_is_red(self):
        assert classify_week(99.5, 100, LOSS) == Zone.RED

    def test_loss_never_yields_yellow(self):
        """The loss yellow threshold is stricter than green, so it never matches"""
        for tenths in range(900, 1020):
            assert classify_week(tenths / 10, 100, LOSS) != Zone.YELLOW

    def test_gain_green(self):
        assert classify_week(80.4, 80, GAIN) == Zone.GREEN

    def test_gain_yellow(self):
        # +0.3 is between 0.6 and 0.8 of the expected +0.4
        assert classify_week(80.3, 80, GAIN) == Zone.YELLOW

    def test_gain_red(self):
        assert classify_week(80.1, 80, GAIN) == Zone.RED
        assert classify_week(79.5, 80, GAIN) == Zone.RED


class TestClassifyByLimits:

    def test_loss_band(self):
        # week 1 of 100kg standard loss: lower 99.75, ideal 99.5, upper 99.25
        args = (99.75, 99.5, 99.25, GoalType.WEIGHT_LOSS)
        assert classify_week_by_limits(99.4, *args) == Zone.GREEN
        assert classify_week_by_limits(99.5, *args) == Zone.GREEN
        assert classify_week_by_limits(99.6, *args) == Zone.YELLOW
        assert classify_week_by_limits(99.8, *args) == Zone.RED
        assert classify_week_by_limits(99.0, *args) == Zone.RED  # too fast

    def test_gain_band(self):
        args = (80.2, 80.28, 80.4, GoalType.MUSCLE_GAIN)
        assert classify_week_by_limits(80.3, *args) == Zone.GREEN
        assert classify_week_by_limits(80.25, *args) == Zone.YELLOW
        assert classify_week_by_limits(80.1, *args) == Zone.RED
        assert classify_week_by_limits(80.5, *args) == Zone.RED

    def test_accepts_plain_strings(self):
        assert classify_week_by_limits(99.4, 99.75, 99.5, 99.25, "weight_loss") == Zone.GREEN


class TestZoneTables:

    def test_loss_standard(self):
        bands = zone_config(GoalType.WEIGHT_LOSS, GoalSubtype.STANDARD)
        assert (bands.yellow_min, bands.green_min, bands.green_max) == (0.25, 0.50, 0.75)

    def test_loss_moderate(self):
        bands = zone_config(GoalType.WEIGHT_LOSS, GoalSubtype.MODERATE)
        assert (bands.yellow_min, bands.green_min, bands.green_max) == (0.25, 0.35, 0.50)

    def test_gain_subtypes_share_a_table(self):
        assert zone_config(GoalType.MUSCLE_GAIN, "standard") == zone_config(GoalType.MUSCLE_GAIN, "moderate")


def test_has_photo_ignores_empty_paths():
    assert not WeeklyUpdate(1, 99, photo_paths=["", ""]).has_photo
    assert WeeklyUpdate(1, 99, photo_paths=["front.jpg"]).has_photo
