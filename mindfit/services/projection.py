from dataclasses import dataclass
from typing import Iterable, List, Optional

from mindfit.services.zones import (
    GoalConfiguration,
    WeeklyUpdate,
    Zone,
    classify_week_by_limits,
)

PROGRAM_WEEKS = 24


@dataclass(frozen=True)
class WeekBand:
    week_number: int
    lower_bound: float
    ideal_target: float
    upper_bound: float
    actual_weight: Optional[float] = None
    zone: Optional[Zone] = None

    @property
    def is_completed(self) -> bool:
        return self.actual_weight is not None

    def display(self) -> dict:
        """Values rounded to one decimal for presentation."""
        return {
            "week_number": self.week_number,
            "lower_bound": round(self.lower_bound, 1),
            "ideal_target": round(self.ideal_target, 1),
            "upper_bound": round(self.upper_bound, 1),
            "actual_weight": round(self.actual_weight, 1) if self.actual_weight is not None else None,
            "zone": self.zone.value if self.zone else None,
        }


def week_band(goal: GoalConfiguration, week_number: int) -> WeekBand:
    """Cumulative band for a week; works past the 24-week horizon too."""
    bands = goal.bands
    initial = goal.initial_weight
    sign = -1 if goal.is_weight_loss else 1

    def _bound(percent: float) -> float:
        return initial + sign * (initial * percent / 100 * week_number)

    return WeekBand(
        week_number=week_number,
        lower_bound=_bound(bands.yellow_min),
        ideal_target=_bound(bands.green_min),
        upper_bound=_bound(bands.green_max),
    )


def zone_in_band(band: WeekBand, weight: float, goal: GoalConfiguration) -> Zone:
    return classify_week_by_limits(
        weight, band.lower_bound, band.ideal_target, band.upper_bound, goal.goal_type
    )


def week_zone(update: WeeklyUpdate, goal: GoalConfiguration, first_week: Optional[int]) -> Zone:
    """Band zone of one update; the first week of a history has no trend yet and is green."""
    if update.week_number == first_week:
        return Zone.GREEN
    return zone_in_band(week_band(goal, update.week_number), update.weight, goal)


def project_24_weeks(goal: GoalConfiguration, updates: Iterable[WeeklyUpdate] = ()) -> List[WeekBand]:
    by_week = {u.week_number: u for u in updates}
    first_week = min(by_week) if by_week else None
    weeks = []
    for n in range(1, PROGRAM_WEEKS + 1):
        band = week_band(goal, n)
        update = by_week.get(n)
        if update is not None:
            band = WeekBand(
                week_number=n,
                lower_bound=band.lower_bound,
                ideal_target=band.ideal_target,
                upper_bound=band.upper_bound,
                actual_weight=update.weight,
                zone=week_zone(update, goal, first_week),
            )
        weeks.append(band)
    return weeks
