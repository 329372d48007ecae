import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Sequence

from mindfit.services.projection import PROGRAM_WEEKS
from mindfit.services.zones import GoalConfiguration, GoalType, WeeklyUpdate


@dataclass(frozen=True)
class CompletionEstimate:
    weeks_remaining: int
    estimated_date: date
    is_on_track: bool
    avg_weekly_change: float
    velocity_weeks: Optional[int]  # None when the average change is zero


@dataclass(frozen=True)
class WeightChangeSummary:
    current_weight: float
    total_change: float
    last_change: Optional[float]
    progress_percent: float


def chronological(updates: Sequence[WeeklyUpdate]) -> list:
    return sorted(updates, key=lambda u: u.week_number)


def overall_progress_percent(
    initial_weight: float, current_weight: float, target_weight: float, goal_type: GoalType
) -> float:
    """% of the way from initial to target weight, clamped to [0, 100]"""
    if initial_weight == target_weight:
        return 0.0
    if GoalType(goal_type) == GoalType.WEIGHT_LOSS:
        progress = (initial_weight - current_weight) / (initial_weight - target_weight) * 100
    else:
        progress = (current_weight - initial_weight) / (target_weight - initial_weight) * 100
    return max(0.0, min(progress, 100.0))


def average_weekly_change(updates: Sequence[WeeklyUpdate]) -> float:
    ordered = chronological(updates)
    if len(ordered) < 2:
        return 0.0
    deltas = [b.weight - a.weight for a, b in zip(ordered, ordered[1:])]
    return sum(deltas) / len(deltas)


def estimate_completion(
    updates: Sequence[WeeklyUpdate], goal: GoalConfiguration, today: date
) -> CompletionEstimate:
    """
    Calendar projection of the end of the 24-week program.

    The date always comes from the weeks left in the program; the velocity
    estimate only decides whether the mentee is on track.
    """
    ordered = chronological(updates)
    weeks_remaining = max(0, PROGRAM_WEEKS - len(ordered))
    estimated_date = today + timedelta(weeks=weeks_remaining)

    if len(ordered) < 2:
        return CompletionEstimate(weeks_remaining, estimated_date, False, 0.0, None)

    avg_change = average_weekly_change(ordered)
    remaining_weight = abs(goal.target_weight - ordered[-1].weight)

    if avg_change == 0:
        return CompletionEstimate(weeks_remaining, estimated_date, False, avg_change, None)

    velocity_weeks = math.ceil(remaining_weight / abs(avg_change))
    right_direction = avg_change < 0 if goal.is_weight_loss else avg_change > 0
    is_on_track = right_direction and velocity_weeks <= weeks_remaining

    return CompletionEstimate(weeks_remaining, estimated_date, is_on_track, avg_change, velocity_weeks)


def weight_change_summary(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration) -> WeightChangeSummary:
    ordered = chronological(updates)
    if not ordered:
        return WeightChangeSummary(goal.initial_weight, 0.0, None, 0.0)

    current = ordered[-1].weight
    last_change = current - ordered[-2].weight if len(ordered) >= 2 else None
    return WeightChangeSummary(
        current_weight=current,
        total_change=current - goal.initial_weight,
        last_change=last_change,
        progress_percent=overall_progress_percent(
            goal.initial_weight, current, goal.target_weight, goal.goal_type
        ),
    )
