"""
Tests for badge evaluation
"""
import random

import pytest

from mindfit.services.achievements import BADGE_CATALOG, BADGE_RULES, BadgeType, evaluate, parse_badge
from mindfit.services.zones import GoalConfiguration, GoalType, WeeklyUpdate

LOSS = GoalConfiguration(GoalType.WEIGHT_LOSS, initial_weight=100, target_weight=80)
GAIN = GoalConfiguration(GoalType.MUSCLE_GAIN, initial_weight=70, target_weight=80)

GREEN_RUN = [
    WeeklyUpdate(1, 99.4),
    WeeklyUpdate(2, 98.8),
    WeeklyUpdate(3, 98.2),
    WeeklyUpdate(4, 97.6),
]


class TestCatalog:

    def test_every_badge_has_metadata_and_rule(self):
        assert set(BADGE_CATALOG) == set(BadgeType)
        assert set(BADGE_RULES) == set(BadgeType)

    def test_names_are_unique(self):
        names = [info.name for info in BADGE_CATALOG.values()]
        assert len(names) == len(set(names))


class TestEvaluate:

    def test_first_checkin(self):
        badges = evaluate(GREEN_RUN[:1], LOSS)
        assert BadgeType.FIRST_CHECKIN in badges
        assert BadgeType.FIRST_GREEN in badges

    def test_green_run_of_four(self):
        badges = evaluate(GREEN_RUN, LOSS)
        assert BadgeType.GREEN_STREAK_3 in badges
        assert BadgeType.CONSISTENCY_4WEEKS in badges
        assert BadgeType.PERFECT_STREAK_4 in badges
        assert BadgeType.GREEN_STREAK_5 not in badges
        assert BadgeType.FIRST_CHECKIN not in badges

    def test_already_earned_are_skipped(self):
        first = evaluate(GREEN_RUN, LOSS)
        assert evaluate(GREEN_RUN, LOSS, [b.value for b in first]) == []

    def test_catalog_order(self):
        badges = evaluate(GREEN_RUN, LOSS)
        order = list(BadgeType)
        assert badges == sorted(badges, key=order.index)

    def test_weight_milestones(self):
        badges = evaluate([WeeklyUpdate(1, 97), WeeklyUpdate(2, 89)], LOSS)
        assert BadgeType.WEIGHT_MILESTONE_5KG in badges
        assert BadgeType.WEIGHT_MILESTONE_10KG in badges
        assert BadgeType.HALFWAY_HERO in badges
        assert BadgeType.GOAL_ACHIEVED not in badges

    def test_goal_achieved(self):
        badges = evaluate([WeeklyUpdate(1, 90), WeeklyUpdate(2, 79.5)], LOSS)
        assert BadgeType.GOAL_ACHIEVED in badges

    def test_body_fat_drop(self):
        updates = [
            WeeklyUpdate(1, 99, body_fat_percentage=30.0),
            WeeklyUpdate(2, 98.5),
            WeeklyUpdate(3, 98, body_fat_percentage=24.5),
        ]
        assert BadgeType.BODY_FAT_5PERCENT in evaluate(updates, LOSS)

    def test_photo_champion_needs_ten(self):
        updates = [WeeklyUpdate(n, 99, photo_paths=["front.jpg"]) for n in range(1, 10)]
        assert BadgeType.PHOTO_CHAMPION not in evaluate(updates, LOSS)
        updates.append(WeeklyUpdate(10, 99, photo_paths=["front.jpg"]))
        assert BadgeType.PHOTO_CHAMPION in evaluate(updates, LOSS)

    def test_empty_history_earns_nothing(self):
        assert evaluate([], LOSS) == []


def green_weeks(count):
    """Weights inside the green band of every week for LOSS"""
    return [WeeklyUpdate(n, 100 - 0.6 * n) for n in range(1, count + 1)]


def mixed_weeks(count):
    """Odd weeks green, even weeks yellow, never red"""
    return [
        WeeklyUpdate(n, 100 - 0.6 * n if n % 2 else 100 - 0.4 * n)
        for n in range(1, count + 1)
    ]


def random_history(rng):
    goal = rng.choice([LOSS, GAIN])
    step = -1.0 if goal.is_weight_loss else 0.4
    week = rng.randint(1, 3)
    weight = goal.initial_weight
    updates = []
    for _ in range(rng.randint(0, 14)):
        weight += step * rng.uniform(-0.5, 1.5)
        updates.append(WeeklyUpdate(
            week,
            round(weight, 1),
            body_fat_percentage=rng.choice([None, round(rng.uniform(15, 35), 1)]),
            photo_paths=["front.jpg"] if rng.random() < 0.7 else [],
        ))
        week += rng.choice([1, 1, 1, 2])
    rng.shuffle(updates)
    return goal, updates


class TestLongRunBadges:

    def test_diamond_needs_twelve_green_weeks(self):
        assert BadgeType.DIAMOND_12 not in evaluate(green_weeks(11), LOSS)
        badges = evaluate(green_weeks(12), LOSS)
        assert BadgeType.DIAMOND_12 in badges
        assert BadgeType.GREEN_STREAK_10 in badges

    def test_no_red_needs_eight_weeks(self):
        assert BadgeType.NO_RED_8 not in evaluate(mixed_weeks(7), LOSS)
        badges = evaluate(mixed_weeks(8), LOSS)
        assert BadgeType.NO_RED_8 in badges
        # the latest week is yellow
        assert BadgeType.GREEN_STREAK_3 not in badges

    def test_comeback(self):
        updates = [
            WeeklyUpdate(1, 100.0),
            WeeklyUpdate(2, 100.5),
            WeeklyUpdate(3, 100.5),
            WeeklyUpdate(4, 97.6),
        ]
        assert BadgeType.COMEBACK in evaluate(updates, LOSS)
        assert BadgeType.COMEBACK not in evaluate(GREEN_RUN, LOSS)


class TestStoredBadges:

    def test_unknown_type_is_ignored(self):
        assert evaluate(GREEN_RUN, LOSS, ["green_zone_4weeks"]) == evaluate(GREEN_RUN, LOSS)

    def test_parse_badge(self):
        assert parse_badge("comeback") == BadgeType.COMEBACK
        assert parse_badge("green_zone_4weeks") is None


@pytest.mark.parametrize("seed", range(10))
def test_evaluate_is_idempotent(seed):
    rng = random.Random(seed)
    catalog = [b.value for b in BadgeType] + ["green_zone_4weeks"]
    for _ in range(30):
        goal, updates = random_history(rng)
        earned = set(rng.sample(catalog, rng.randint(0, len(catalog))))

        new = evaluate(updates, goal, earned)
        assert not {b.value for b in new} & earned
        assert evaluate(updates, goal, earned | {b.value for b in new}) == []
