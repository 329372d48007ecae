"""
Client for the AI insight service.

The service is an OpenAI-compatible chat-completions endpoint. Whatever goes
wrong on the way (no key, transport error, bad status, unexpected body) comes
out as InsightsUnavailable so callers can degrade to "insights unavailable".
"""
import logging
from typing import Dict, List, Optional, Sequence

import httpx

from mindfit.config import settings
from mindfit.services.admin_stats import MenteeStatus
from mindfit.services.progress import chronological, overall_progress_percent
from mindfit.services.zones import GoalConfiguration, WeeklyUpdate

logger = logging.getLogger(__name__)

MENTEE_SYSTEM_PROMPT = (
    "You are a supportive fitness mentor. Comment on the mentee's weekly "
    "check-ins with encouragement and concrete, safe suggestions."
)
ADMIN_SYSTEM_PROMPT = (
    "You are a strategy assistant for fitness program administrators. "
    "Focus on actionable insights and clear prioritisation."
)
COACH_RULES = (
    "Answer questions about training, nutrition, measurements and check-ins. "
    "Explain the green, yellow and red zones when asked. Be direct, practical "
    "and motivating, in at most 150 words. Never give a medical diagnosis and "
    "suggest seeing a professional when needed."
)


class InsightsUnavailable(Exception):
    pass


def _goal_label(goal: GoalConfiguration) -> str:
    return "weight loss" if goal.is_weight_loss else "muscle gain"


def build_progress_prompt(name: str, goal: GoalConfiguration, updates: Sequence[WeeklyUpdate]) -> str:
    ordered = chronological(updates)
    current = ordered[-1].weight if ordered else goal.initial_weight
    progress = overall_progress_percent(goal.initial_weight, current, goal.target_weight, goal.goal_type)
    history = ", ".join(f"week {u.week_number}: {u.weight:.1f} kg" for u in ordered[-8:])
    return (
        f"Mentee: {name}\n"
        f"Goal: {_goal_label(goal)}\n"
        f"Initial weight: {goal.initial_weight} kg -> current: {current} kg -> target: {goal.target_weight} kg\n"
        f"Progress: {progress:.1f}%\n"
        f"Recent check-ins: {history or 'none'}\n\n"
        "Give a short analysis (max 200 words) with what is going well, "
        "what to watch and two concrete actions for next week."
    )


def build_admin_prompt(
    name: str, goal: GoalConfiguration, status: MenteeStatus, updates: Sequence[WeeklyUpdate]
) -> str:
    ordered = chronological(updates)
    current = ordered[-1].weight if ordered else goal.initial_weight
    progress = overall_progress_percent(goal.initial_weight, current, goal.target_weight, goal.goal_type)
    lines = [
        f"Mentee: {name}",
        f"Goal: {_goal_label(goal)}",
        f"Initial weight: {goal.initial_weight} kg -> current: {current} kg -> target: {goal.target_weight} kg",
        f"Progress: {progress:.1f}%",
        f"Last check-in: {status.days_since_last_update} days ago",
        f"Total check-ins: {len(ordered)}",
    ]
    if status.needs_attention:
        lines.append(f"ATTENTION NEEDED: {'; '.join(status.attention_reasons)}")
    lines.append(
        "\nProvide: 1. overall status (1-2 sentences), 2. priority level "
        "(urgent / high / medium / low), 3. two or three concrete actions for "
        "the admin, 4. warning signs, 5. positives. Max 250 words."
    )
    return "\n".join(lines)


def build_coach_prompt(name: str, goal: GoalConfiguration, updates: Sequence[WeeklyUpdate]) -> str:
    """System prompt for the coach chat, carrying the mentee profile and latest check-ins."""
    ordered = chronological(updates)
    history = ", ".join(f"week {u.week_number}: {u.weight:.1f} kg" for u in ordered[-4:])
    return (
        "You are MindFit Coach, an experienced and motivating fitness coach.\n\n"
        f"Mentee: {name}\n"
        f"Goal: {_goal_label(goal)}\n"
        f"Initial weight: {goal.initial_weight} kg\n"
        f"Target weight: {goal.target_weight} kg\n"
        f"Latest check-ins: {history or 'none'}\n\n"
        + COACH_RULES
    )


class InsightClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.AI_GATEWAY_URL
        self.api_key = api_key if api_key is not None else settings.AI_API_KEY
        self.model = model or settings.AI_MODEL
        self.timeout = timeout or settings.AI_TIMEOUT_SECONDS
        self.transport = transport

    async def _post(self, messages: List[Dict[str, str]]) -> str:
        if not self.api_key:
            raise InsightsUnavailable("AI_API_KEY not configured")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.base_url,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={"model": self.model, "messages": messages},
                )
                response.raise_for_status()
                return response.json()["choices"][0]["message"]["content"]
        except (httpx.HTTPError, KeyError, IndexError, TypeError, ValueError) as e:
            logger.warning("AI insight request failed: %s", e)
            raise InsightsUnavailable(str(e)) from e

    async def complete(self, system_prompt: str, prompt: str) -> str:
        return await self._post([
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": prompt},
        ])

    async def chat(self, system_prompt: str, messages: Sequence[Dict[str, str]]) -> str:
        """Reply to a conversation; `messages` is the user/assistant history, oldest first."""
        return await self._post([{"role": "system", "content": system_prompt}] + list(messages))

    async def progress_insights(self, name: str, goal: GoalConfiguration, updates: Sequence[WeeklyUpdate]) -> str:
        return await self.complete(MENTEE_SYSTEM_PROMPT, build_progress_prompt(name, goal, updates))

    async def admin_insights(
        self, name: str, goal: GoalConfiguration, status: MenteeStatus, updates: Sequence[WeeklyUpdate]
    ) -> str:
        return await self.complete(ADMIN_SYSTEM_PROMPT, build_admin_prompt(name, goal, status, updates))

    async def coach_reply(
        self,
        name: str,
        goal: GoalConfiguration,
        updates: Sequence[WeeklyUpdate],
        messages: Sequence[Dict[str, str]],
    ) -> str:
        return await self.chat(build_coach_prompt(name, goal, updates), messages)


def get_insight_client() -> InsightClient:
    return InsightClient()
