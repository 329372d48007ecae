import enum
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from mindfit.services.progress import overall_progress_percent
from mindfit.services.streaks import most_recent_first
from mindfit.services.zones import GoalConfiguration, GoalType, WeeklyUpdate, Zone, classify_week

NO_CHECKIN_DAYS = 999
STALE_DAYS = 7
INACTIVE_DAYS = 14
STAGNATION_RANGE_KG = 0.5

REASON_NO_CHECKINS = "no check-ins"
REASON_RED_ZONE = "2+ weeks in red zone"
REASON_STAGNATION = "stagnation"


class AlertPriority(str, enum.Enum):
    URGENT = "urgent"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_ORDER = {
    AlertPriority.URGENT: 0,
    AlertPriority.HIGH: 1,
    AlertPriority.MEDIUM: 2,
    AlertPriority.LOW: 3,
}


@dataclass
class MenteeStatus:
    current_zone: Zone
    days_since_last_update: int
    needs_attention: bool
    attention_reasons: List[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        if self.needs_attention:
            return "needs_attention"
        if self.current_zone == Zone.RED:
            return "danger"
        if self.current_zone == Zone.YELLOW:
            return "warning"
        return "success"


@dataclass
class RosterEntry:
    mentee_id: int
    full_name: str
    goal: Optional[GoalConfiguration]
    updates: Sequence[WeeklyUpdate]
    status: MenteeStatus


@dataclass
class GlobalStats:
    total_mentees: int = 0
    active_mentees: int = 0
    inactive_mentees: int = 0
    green_zone: int = 0
    yellow_zone: int = 0
    red_zone: int = 0
    needs_attention: int = 0
    average_progress: float = 0.0
    weight_loss_count: int = 0
    muscle_gain_count: int = 0


@dataclass(frozen=True)
class Alert:
    mentee_id: int
    mentee_name: str
    priority: AlertPriority
    message: str


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive timestamps
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def days_since(created_at: Optional[datetime], now: datetime) -> int:
    if created_at is None:
        return NO_CHECKIN_DAYS
    return math.floor((_as_utc(now) - _as_utc(created_at)).total_seconds() / 86400)


def recent_week_zones(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration, weeks: int) -> List[Zone]:
    """Week-over-week zones of the latest evaluated weeks, most recent first."""
    ordered = most_recent_first(updates)[:weeks + 1]
    return [classify_week(cur.weight, prev.weight, goal) for cur, prev in zip(ordered, ordered[1:])]


def is_stagnant(updates: Sequence[WeeklyUpdate]) -> bool:
    if len(updates) < 3:
        return False
    weights = [u.weight for u in most_recent_first(updates)[:3]]
    return max(weights) - min(weights) < STAGNATION_RANGE_KG


def compute_mentee_status(
    updates: Sequence[WeeklyUpdate],
    goal: GoalConfiguration,
    now: datetime,
    stale_days: int = STALE_DAYS,
) -> MenteeStatus:
    if not updates:
        return MenteeStatus(
            current_zone=Zone.RED,
            days_since_last_update=NO_CHECKIN_DAYS,
            needs_attention=True,
            attention_reasons=[REASON_NO_CHECKINS],
        )

    ordered = most_recent_first(updates)
    days = days_since(ordered[0].created_at, now)
    reasons = []

    if days > stale_days:
        reasons.append(f"no check-in in {days} days")

    last_two = recent_week_zones(ordered, goal, 2)
    if len(last_two) == 2 and all(z == Zone.RED for z in last_two):
        reasons.append(REASON_RED_ZONE)

    if is_stagnant(ordered):
        reasons.append(REASON_STAGNATION)

    if len(ordered) >= 2:
        current_zone = classify_week(ordered[0].weight, ordered[1].weight, goal)
    else:
        current_zone = Zone.GREEN

    return MenteeStatus(
        current_zone=current_zone,
        days_since_last_update=days,
        needs_attention=bool(reasons),
        attention_reasons=reasons,
    )


def aggregate_roster(entries: Sequence[RosterEntry], inactive_days: int = INACTIVE_DAYS) -> GlobalStats:
    stats = GlobalStats(total_mentees=len(entries))
    total_progress = 0.0
    with_progress = 0

    for entry in entries:
        status = entry.status
        goal = entry.goal

        if goal is not None:
            if goal.goal_type == GoalType.WEIGHT_LOSS:
                stats.weight_loss_count += 1
            else:
                stats.muscle_gain_count += 1

        if status.days_since_last_update <= inactive_days:
            stats.active_mentees += 1
        else:
            stats.inactive_mentees += 1

        if status.current_zone == Zone.GREEN:
            stats.green_zone += 1
        elif status.current_zone == Zone.YELLOW:
            stats.yellow_zone += 1
        else:
            stats.red_zone += 1

        if status.needs_attention:
            stats.needs_attention += 1

        if goal is None or not entry.updates or goal.initial_weight == goal.target_weight:
            continue
        current = most_recent_first(entry.updates)[0].weight
        total_progress += overall_progress_percent(
            goal.initial_weight, current, goal.target_weight, goal.goal_type
        )
        with_progress += 1

    stats.average_progress = total_progress / with_progress if with_progress else 0.0
    return stats


def build_alerts(
    entries: Sequence[RosterEntry],
    inactive_days: int = INACTIVE_DAYS,
    stale_days: int = STALE_DAYS,
) -> List[Alert]:
    alerts = []
    for entry in entries:
        status = entry.status

        def _alert(priority, message):
            alerts.append(Alert(entry.mentee_id, entry.full_name, priority, message))

        if not entry.updates:
            _alert(AlertPriority.LOW, "new mentee, waiting for the first check-in")
            continue

        days = status.days_since_last_update
        if days > inactive_days:
            _alert(AlertPriority.URGENT, f"no check-in in {days} days")

        if entry.goal is not None:
            zones = recent_week_zones(entry.updates, entry.goal, 3)
            if len(zones) == 3 and all(z == Zone.RED for z in zones):
                _alert(AlertPriority.URGENT, "3+ weeks in red zone")

        if stale_days <= days <= inactive_days:
            _alert(AlertPriority.HIGH, f"no check-in in {days} days")

        if REASON_STAGNATION in status.attention_reasons:
            _alert(AlertPriority.MEDIUM, "weight stagnant for 3+ weeks")

    # sorted() is stable: input order is kept within a tier
    return sorted(alerts, key=lambda a: PRIORITY_ORDER[a.priority])
