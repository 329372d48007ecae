"""
Tests for trend detection over recent check-ins
"""
from mindfit.services.patterns import detect_patterns
from mindfit.services.zones import GoalConfiguration, GoalType, WeeklyUpdate

LOSS = GoalConfiguration(GoalType.WEIGHT_LOSS, initial_weight=100, target_weight=80)
GAIN = GoalConfiguration(GoalType.MUSCLE_GAIN, initial_weight=70, target_weight=80)


def kinds(weights, goal=LOSS):
    updates = [WeeklyUpdate(i + 1, w) for i, w in enumerate(weights)]
    return [p.kind for p in detect_patterns(updates, goal)]


def test_needs_three_updates():
    assert kinds([100, 99]) == []


def test_consistent_progress():
    assert kinds([100, 99, 98, 97]) == ["consistent_progress"]


def test_rapid_change():
    assert kinds([100, 98, 96]) == ["rapid_change", "consistent_progress"]


def test_recurring_red():
    assert "recurring_red" in kinds([100, 101, 100.5, 101.5])


def test_stable_weight():
    assert kinds([100, 100.2, 100.1]) == ["stable_weight"]


def test_direction_follows_goal():
    assert kinds([70, 71, 72], goal=GAIN) == ["consistent_progress"]
    assert "recurring_red" in kinds([72, 71, 70], goal=GAIN)


def test_only_last_four_considered():
    # an early jump drops out of the window
    assert kinds([110, 100, 99, 98, 97]) == ["consistent_progress"]
