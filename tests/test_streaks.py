"""
Tests for streaks, comebacks and weight milestones
"""
from mindfit.services import streaks
from mindfit.services.zones import GoalConfiguration, GoalType, WeeklyUpdate, Zone

LOSS = GoalConfiguration(GoalType.WEIGHT_LOSS, initial_weight=100, target_weight=80)

# All inside the week's green band for a 100kg standard loss
GREEN_RUN = [
    WeeklyUpdate(1, 99.4),
    WeeklyUpdate(2, 98.8),
    WeeklyUpdate(3, 98.2),
    WeeklyUpdate(4, 97.6),
]


class TestWeekStreak:

    def test_contiguous_weeks(self):
        assert streaks.consecutive_week_streak(GREEN_RUN) == 4

    def test_gap_breaks_streak(self):
        updates = [WeeklyUpdate(n, 99) for n in (1, 2, 4, 5)]
        assert streaks.consecutive_week_streak(updates) == 2

    def test_late_start_still_counts(self):
        updates = [WeeklyUpdate(n, 99) for n in (5, 6, 7)]
        assert streaks.consecutive_week_streak(updates) == 3

    def test_input_order_does_not_matter(self):
        assert streaks.consecutive_week_streak(list(reversed(GREEN_RUN))) == 4

    def test_empty(self):
        assert streaks.consecutive_week_streak([]) == 0


class TestGreenStreak:

    def test_all_green_run(self):
        zones = streaks.zone_history(GREEN_RUN, LOSS)
        assert set(zones.values()) == {Zone.GREEN}
        assert streaks.consecutive_green_streak(GREEN_RUN, LOSS) == 4

    def test_red_latest_week_resets(self):
        updates = GREEN_RUN + [WeeklyUpdate(5, 99.9)]
        assert streaks.consecutive_green_streak(updates, LOSS) == 0
        assert streaks.no_red_streak(updates, LOSS) == 0

    def test_never_longer_than_week_streak(self):
        histories = [
            GREEN_RUN,
            GREEN_RUN[:2] + [WeeklyUpdate(4, 97.6)],
            [WeeklyUpdate(1, 100), WeeklyUpdate(2, 101), WeeklyUpdate(3, 98.4)],
        ]
        for updates in histories:
            assert streaks.consecutive_green_streak(updates, LOSS) <= streaks.consecutive_week_streak(updates)

    def test_total_green_weeks(self):
        updates = GREEN_RUN + [WeeklyUpdate(5, 99.9)]
        assert streaks.total_green_weeks(updates, LOSS) == 4


class TestComeback:

    def test_two_red_then_green(self):
        updates = [
            WeeklyUpdate(1, 100.0),
            WeeklyUpdate(2, 100.5),
            WeeklyUpdate(3, 100.5),
            WeeklyUpdate(4, 97.6),
        ]
        assert streaks.has_comeback(updates, LOSS) is True

    def test_needs_three_updates(self):
        assert streaks.has_comeback(GREEN_RUN[:2], LOSS) is False

    def test_all_green_is_no_comeback(self):
        assert streaks.has_comeback(GREEN_RUN, LOSS) is False


class TestMilestones:

    def test_five_kg(self):
        updates = [WeeklyUpdate(1, 97), WeeklyUpdate(2, 94)]
        assert streaks.reached_milestones(updates, LOSS) == [5]

    def test_ten_kg_includes_five(self):
        assert streaks.reached_milestones([WeeklyUpdate(1, 89)], LOSS) == [5, 10]

    def test_delta_uses_latest_weight(self):
        updates = [WeeklyUpdate(2, 96), WeeklyUpdate(1, 90)]
        assert streaks.weight_milestone_delta(updates, LOSS) == 4

    def test_empty(self):
        assert streaks.reached_milestones([], LOSS) == []


def test_photo_completion_count():
    updates = [
        WeeklyUpdate(1, 99, photo_paths=["a.jpg"]),
        WeeklyUpdate(2, 98),
        WeeklyUpdate(3, 97, photo_paths=["b.jpg", "c.jpg"]),
    ]
    assert streaks.photo_completion_count(updates) == 2


class TestNoRedStreak:

    def test_yellow_week_extends_run(self):
        # week 5 sits between the ideal target and the lower limit
        updates = GREEN_RUN + [WeeklyUpdate(5, 98.0)]
        assert streaks.zone_history(updates, LOSS)[5] == Zone.YELLOW
        assert streaks.no_red_streak(updates, LOSS) == 5
        assert streaks.consecutive_green_streak(updates, LOSS) == 0

    def test_red_week_bounds_run(self):
        updates = [
            WeeklyUpdate(1, 100.0),
            WeeklyUpdate(2, 100.5),
            WeeklyUpdate(3, 99.0),
            WeeklyUpdate(4, 98.0),
        ]
        zones = streaks.zone_history(updates, LOSS)
        assert [zones[n] for n in (2, 3, 4)] == [Zone.RED, Zone.YELLOW, Zone.GREEN]
        assert streaks.no_red_streak(updates, LOSS) == 2

    def test_gap_breaks_run(self):
        updates = GREEN_RUN[:2] + [WeeklyUpdate(4, 97.6)]
        assert streaks.no_red_streak(updates, LOSS) == 1
