"""
Scoring processors for the assigner.

Two criteria are applied, always in this order:
- Rates: cheaper people get a larger weight, equal costs get equal weights.
- Workload: people with enough free hours in the task window get a bonus equal
  to the number of candidates, so availability outweighs cost.
"""

import logging
from datetime import date
from typing import Optional

from teamwork_ai.policy.models import UserScores
from teamwork_ai.tools.teamwork import ProjectMember, TeamworkClient, Workload
from teamwork_ai.triggers.models import TaskEvent

logger = logging.getLogger(__name__)

RATES_CLAUSE = "Concerns over user cost significantly impacted the decision."
WORKLOAD_CLAUSE = "Workload was a key consideration in the decision-making process."

DEFAULT_WORKING_HOURS = 8.0

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def calculate_cost_weights(
    user_ids: list[int],
    members: dict[int, ProjectMember],
) -> dict[int, int]:
    """
    Rank users by cost.

    With D distinct costs the cheapest group gets D and the most expensive
    gets 1. Unknown or zero cost counts as 0. Users that are not project
    members get no weight.

    Args:
        user_ids: Candidate user ids
        members: Project members keyed by user id

    Returns:
        Dict mapping user id to its positive weight
    """
    costs = []
    for user_id in user_ids:
        member = members.get(user_id)
        if member is None:
            continue
        costs.append((member.cost or 0, user_id))
    costs.sort(key=lambda item: item[0])

    weight = len({cost for cost, _ in costs}) + 1
    weights: dict[int, int] = {}
    previous: Optional[int] = None
    for index, (cost, user_id) in enumerate(costs):
        if index == 0 or cost != previous:
            weight -= 1
        weights[user_id] = weight
        previous = cost
    return weights


class RatesProcessor:
    """Adds the cost rank weight of each candidate."""

    name = "processRates"
    clause = RATES_CLAUSE

    def __init__(self, members: dict[int, ProjectMember]):
        self.members = members

    async def __call__(self, scores: UserScores) -> UserScores:
        weights = calculate_cost_weights([s.id for s in scores], self.members)
        result = []
        for user_score in scores:
            weight = weights.get(user_score.id)
            if weight is None:
                result.append(user_score)
                continue
            user_score = user_score.add(weight)
            logger.debug(
                f"{self.name}: user {user_score.id} score changed "
                f"(delta: {weight}, score: {user_score.score})"
            )
            result.append(user_score)
        return result


def resolve_working_hours(workload: Workload, user_id: int, day: date) -> float:
    """
    Working hours of a user on a given day.

    Falls through the weekday entry of the user's working hours profile, the
    user's default length of day, and finally 8 hours.
    """
    included_user = workload.included.users.get(str(user_id))
    if included_user is None:
        return DEFAULT_WORKING_HOURS

    if included_user.working_hour is not None:
        weekday = WEEKDAYS[day.weekday()]
        profile_id = included_user.working_hour.id
        for entry in workload.included.working_hour_entries.values():
            if entry.working_hour.id == profile_id and entry.weekday.lower() == weekday:
                return entry.task_hours

    return included_user.length_of_day or DEFAULT_WORKING_HOURS


def calculate_available_hours(workload: Workload, user_id: int) -> float:
    """Sum of free hours over every reported date the user is not away."""
    user = next((u for u in workload.users if u.id == user_id), None)
    if user is None:
        return 0.0

    available = 0.0
    for day, day_data in user.dates.items():
        if day_data.unavailable_day:
            continue
        available += resolve_working_hours(workload, user_id, day) - day_data.capacity_minutes / 60
    return available


def find_available_user_ids(workload: Workload, estimated_minutes: int) -> set[int]:
    """Users whose free hours exceed the task estimate."""
    required_hours = estimated_minutes / 60
    available = set()
    for user in workload.users:
        hours = calculate_available_hours(workload, user.id)
        if hours > required_hours:
            available.add(user.id)
    return available


class WorkloadProcessor:
    """Rewards candidates with enough free time inside the task window."""

    name = "processWorkload"
    clause = WORKLOAD_CLAUSE

    def __init__(self, event: TaskEvent, client: TeamworkClient):
        self.event = event
        self.client = client

    async def __call__(self, scores: UserScores) -> UserScores:
        task = self.event.task
        if not self.event.has_window:
            # without a window period there is nothing to measure
            return scores
        if not scores:
            return scores

        workload = await self.client.get_workload(
            [s.id for s in scores], task.start_date, task.due_date
        )
        available_ids = find_available_user_ids(workload, task.estimated_minutes)

        bonus = len(scores)
        result = []
        for user_score in scores:
            if user_score.id not in available_ids:
                result.append(user_score)
                continue
            user_score = user_score.add(bonus)
            logger.debug(
                f"{self.name}: user {user_score.id} score changed "
                f"(delta: {bonus}, score: {user_score.score})"
            )
            result.append(user_score)
        return result
