from dataclasses import dataclass
from typing import List, Sequence

from mindfit.services.progress import chronological
from mindfit.services.zones import GoalConfiguration, WeeklyUpdate

RAPID_CHANGE_KG = 1.5
STABLE_RANGE_KG = 0.5


@dataclass(frozen=True)
class Pattern:
    kind: str
    severity: str  # "warning", "info" or "success"
    title: str
    description: str
    action: str


def detect_patterns(updates: Sequence[WeeklyUpdate], goal: GoalConfiguration) -> List[Pattern]:
    """Trends over the last four check-ins. Needs at least three."""
    if len(updates) < 3:
        return []

    recent = chronological(updates)[-4:]
    changes = [b.weight - a.weight for a, b in zip(recent, recent[1:])]
    patterns = []

    wrong_way = [c for c in changes if (c > 0 if goal.is_weight_loss else c < 0)]
    if len(wrong_way) >= 2:
        patterns.append(Pattern(
            kind="recurring_red",
            severity="warning",
            title="Red zone detected",
            description=f"You moved away from your goal in {len(wrong_way)} of the last weeks.",
            action="Schedule a talk with your mentor to adjust the strategy.",
        ))

    last_three = [u.weight for u in recent[-3:]]
    if max(last_three) - min(last_three) < STABLE_RANGE_KG:
        if goal.is_weight_loss:
            action = "You may need to adjust your diet or train harder."
        else:
            action = "Consider eating more or reviewing your training."
        patterns.append(Pattern(
            kind="stable_weight",
            severity="info",
            title="Stable weight",
            description="Your weight has barely changed over the last 3 weeks.",
            action=action,
        ))

    avg_abs_change = sum(abs(c) for c in changes) / len(changes)
    if avg_abs_change > RAPID_CHANGE_KG:
        patterns.append(Pattern(
            kind="rapid_change",
            severity="warning",
            title="Rapid change detected",
            description=f"You are changing {avg_abs_change:.1f} kg per week on average.",
            action="Very fast changes are hard to sustain. Talk to your mentor about it.",
        ))

    if all((c < 0 if goal.is_weight_loss else c > 0) for c in changes):
        patterns.append(Pattern(
            kind="consistent_progress",
            severity="success",
            title="Consistent progress!",
            description=f"You moved toward your goal for {len(changes)} weeks in a row.",
            action="Keep up the routine that is working.",
        ))

    return patterns
