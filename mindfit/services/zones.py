import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


class GoalType(str, enum.Enum):
    WEIGHT_LOSS = "weight_loss"
    MUSCLE_GAIN = "muscle_gain"


class GoalSubtype(str, enum.Enum):
    STANDARD = "standard"
    MODERATE = "moderate"


class Zone(str, enum.Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


# Weekly variation (% of the previous weight) expected when none is configured
DEFAULT_WEEKLY_VARIATION = {
    GoalType.WEIGHT_LOSS: 1.0,
    GoalType.MUSCLE_GAIN: 0.5,
}

# Product-tuned multipliers applied to the expected weekly change
LOSS_GREEN_FACTOR = 0.8
LOSS_YELLOW_FACTOR = 1.2
GAIN_GREEN_FACTOR = 0.8
GAIN_YELLOW_FACTOR = 0.6


@dataclass(frozen=True)
class ZoneBandConfig:
    """Percent of the initial weight expected to move per week."""
    yellow_min: float
    green_min: float
    green_max: float


ZONE_TABLES = {
    (GoalType.WEIGHT_LOSS, GoalSubtype.STANDARD): ZoneBandConfig(0.25, 0.50, 0.75),
    (GoalType.WEIGHT_LOSS, GoalSubtype.MODERATE): ZoneBandConfig(0.25, 0.35, 0.50),
    (GoalType.MUSCLE_GAIN, GoalSubtype.STANDARD): ZoneBandConfig(0.25, 0.35, 0.50),
    (GoalType.MUSCLE_GAIN, GoalSubtype.MODERATE): ZoneBandConfig(0.25, 0.35, 0.50),
}


@dataclass(frozen=True)
class GoalConfiguration:
    goal_type: GoalType
    initial_weight: float
    target_weight: float
    goal_subtype: GoalSubtype = GoalSubtype.STANDARD
    weekly_variation_percent: Optional[float] = None

    @property
    def is_weight_loss(self) -> bool:
        return self.goal_type == GoalType.WEIGHT_LOSS

    @property
    def variation_percent(self) -> float:
        if self.weekly_variation_percent is None:
            return DEFAULT_WEEKLY_VARIATION[self.goal_type]
        return self.weekly_variation_percent

    @property
    def bands(self) -> ZoneBandConfig:
        return zone_config(self.goal_type, self.goal_subtype)


@dataclass(frozen=True)
class WeeklyUpdate:
    week_number: int
    weight: float
    created_at: Optional[datetime] = None
    body_fat_percentage: Optional[float] = None
    neck_circumference: Optional[float] = None
    waist_circumference: Optional[float] = None
    hip_circumference: Optional[float] = None
    photo_paths: List[str] = field(default_factory=list)
    notes: str = ""

    @property
    def has_photo(self) -> bool:
        return any(p for p in self.photo_paths)


def zone_config(goal_type: GoalType, goal_subtype: GoalSubtype = GoalSubtype.STANDARD) -> ZoneBandConfig:
    return ZONE_TABLES[(GoalType(goal_type), GoalSubtype(goal_subtype))]


def expected_weekly_change(previous_weight: float, goal: GoalConfiguration) -> float:
    """Signed change expected in one week: negative for loss, positive for gain."""
    expected = previous_weight * goal.variation_percent / 100
    return -expected if goal.is_weight_loss else expected


def classify_week(current_weight: float, previous_weight: float, goal: GoalConfiguration) -> Zone:
    """Zone of a week from its change against the previous check-in."""
    weight_change = current_weight - previous_weight
    expected = expected_weekly_change(previous_weight, goal)

    if goal.is_weight_loss:
        # expected is negative: "<=" means lost at least that much
        if weight_change <= expected * LOSS_GREEN_FACTOR:
            return Zone.GREEN
        if weight_change <= expected * LOSS_YELLOW_FACTOR:
            return Zone.YELLOW
        return Zone.RED

    if weight_change >= expected * GAIN_GREEN_FACTOR:
        return Zone.GREEN
    if weight_change >= expected * GAIN_YELLOW_FACTOR:
        return Zone.YELLOW
    return Zone.RED


def classify_week_by_limits(
    weight: float,
    lower_limit: float,
    ideal_target: float,
    upper_limit: float,
    goal_type: GoalType,
) -> Zone:
    """
    Zone of a week against its projection band.

    For weight loss the band runs downwards (lower_limit > ideal_target >
    upper_limit), for muscle gain upwards. Anything outside the band,
    including a move in the wrong direction, is red.
    """
    if GoalType(goal_type) == GoalType.WEIGHT_LOSS:
        if upper_limit <= weight <= ideal_target:
            return Zone.GREEN
        if ideal_target < weight <= lower_limit:
            return Zone.YELLOW
        return Zone.RED

    if ideal_target <= weight <= upper_limit:
        return Zone.GREEN
    if lower_limit <= weight < ideal_target:
        return Zone.YELLOW
    return Zone.RED
