"""
Streaks and milestones over a mentee's check-in history.

Every function accepts the history in any order. Streaks walk the history
most-recent-first and only look at relative contiguity of week numbers, so a
mentee who started at week 5 can still hold a streak.
"""
from typing import Callable, Dict, List, Sequence

from mindfit.services.projection import week_zone
from mindfit.services.zones import GoalConfiguration, WeeklyUpdate, Zone

WEIGHT_MILESTONES_KG = (5, 10)


def most_recent_first(updates: Sequence[WeeklyUpdate]) -> List[WeeklyUpdate]:
    return sorted(updates, key=lambda u: u.week_number, reverse=True)


def zone_history(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration) -> Dict[int, Zone]:
    """week_number -> zone against that week's projection band"""
    if not updates:
        return {}
    first_week = min(u.week_number for u in updates)
    return {u.week_number: week_zone(u, goal, first_week) for u in updates}


def _leading_run(updates: Sequence[WeeklyUpdate], qualifies: Callable[[WeeklyUpdate], bool]) -> int:
    ordered = most_recent_first(updates)
    if not ordered or not qualifies(ordered[0]):
        return 0

    streak = 1
    for current, older in zip(ordered, ordered[1:]):
        if current.week_number - older.week_number != 1:
            break
        if not qualifies(older):
            break
        streak += 1
    return streak


def consecutive_week_streak(updates: Sequence[WeeklyUpdate]) -> int:
    return _leading_run(updates, lambda u: True)


def consecutive_green_streak(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration) -> int:
    zones = zone_history(updates, goal)
    return _leading_run(updates, lambda u: zones[u.week_number] == Zone.GREEN)


def no_red_streak(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration) -> int:
    zones = zone_history(updates, goal)
    return _leading_run(updates, lambda u: zones[u.week_number] != Zone.RED)


def has_comeback(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration) -> bool:
    """Two red weeks followed by a green one, among the three latest check-ins."""
    if len(updates) < 3:
        return False
    zones = zone_history(updates, goal)
    latest_three = list(reversed(most_recent_first(updates)[:3]))
    first, second, last = (zones[u.week_number] for u in latest_three)
    return first == Zone.RED and second == Zone.RED and last == Zone.GREEN


def total_green_weeks(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration) -> int:
    return sum(1 for zone in zone_history(updates, goal).values() if zone == Zone.GREEN)


def weight_milestone_delta(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration) -> float:
    if not updates:
        return 0.0
    return abs(most_recent_first(updates)[0].weight - goal.initial_weight)


def reached_milestones(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration) -> List[int]:
    delta = weight_milestone_delta(updates, goal)
    return [kg for kg in WEIGHT_MILESTONES_KG if delta >= kg]


def photo_completion_count(updates: Sequence[WeeklyUpdate]) -> int:
    return sum(1 for u in updates if u.has_photo)
