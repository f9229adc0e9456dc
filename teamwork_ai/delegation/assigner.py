"""
Automatic task assignment.

Selects who should work on a task by:
- Asking the agent which skills and job roles the task needs
- Matching those against the people on the project
- Ranking the matches by cost and by free time in the task window
and then assigns the winners and explains the decision in a comment.
"""

import asyncio
import logging
from typing import Awaitable, Optional, TypeVar

from teamwork_ai.agent.base import TaskAgent
from teamwork_ai.delegation.models import (
    AssignmentError,
    AssignmentResult,
    AssignmentStatus,
    AssignOptions,
)
from teamwork_ai.delegation.notifier import post_assignment_comment
from teamwork_ai.policy.models import Processor, UserScores, choose_ids, new_user_scores
from teamwork_ai.policy.scoring import RatesProcessor, WorkloadProcessor
from teamwork_ai.tools.teamwork import JobRole, ProjectMember, Relationship, Skill, TeamworkClient
from teamwork_ai.triggers.gate import InFlightSet, processing
from teamwork_ai.triggers.models import TaskEvent

logger = logging.getLogger(__name__)

ACTION = "autoAssignTask"

T = TypeVar("T")


async def _load(what: str, call: Awaitable[T]) -> T:
    try:
        return await call
    except Exception as e:
        raise AssignmentError(f"failed to load {what}") from e


async def load_catalogs(
    client: TeamworkClient, project_id: int
) -> tuple[list[Skill], list[JobRole], list[ProjectMember]]:
    """
    Read skills, job roles and project people concurrently.

    The first failure aborts the other reads; they are cancelled and awaited
    before the error is raised, so nothing keeps running in the background.

    Args:
        client: Teamwork client
        project_id: Project whose people are loaded

    Returns:
        Tuple of (skills, job roles, project members)
    """
    tasks = [
        asyncio.ensure_future(_load("skills", client.list_skills())),
        asyncio.ensure_future(_load("job roles", client.list_job_roles())),
        asyncio.ensure_future(_load("project users", client.list_project_members(project_id))),
    ]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    errors = [task.exception() for task in tasks if not task.cancelled() and task.exception()]
    if errors:
        for extra in errors[1:]:
            logger.error(f"[{ACTION}] also failed while loading catalogs: {extra}")
        raise errors[0]
    skills, job_roles, members = (task.result() for task in tasks)
    return skills, job_roles, members


def _member_ids(users: list[Relationship], members: dict[int, ProjectMember]) -> set[int]:
    return {user.id for user in users if user.id in members}


def find_candidates(
    skill_ids: list[int],
    job_role_ids: list[int],
    skills: dict[int, Skill],
    job_roles: dict[int, JobRole],
    members: dict[int, ProjectMember],
    task_id: Optional[int] = None,
) -> list[int]:
    """
    Project members matching the suggested skills and job roles.

    People holding both a suggested skill and a suggested job role win; when
    nobody does, everybody matching either is a candidate. Job roles count
    their primary users when they have any. Ids unknown to the catalogs are
    ignored.

    Args:
        skill_ids: Skill ids suggested by the agent
        job_role_ids: Job role ids suggested by the agent
        skills: Skill catalog keyed by id
        job_roles: Job role catalog keyed by id
        members: Project members keyed by user id
        task_id: Task being assigned, for logging only

    Returns:
        Candidate user ids sorted ascending
    """
    with_skills: set[int] = set()
    for skill_id in skill_ids:
        skill = skills.get(skill_id)
        if skill is None:
            logger.debug(f"[{ACTION}] task {task_id}: skill {skill_id} not in catalog, AI hallucination")
            continue
        with_skills |= _member_ids(skill.users, members)

    with_job_roles: set[int] = set()
    for job_role_id in job_role_ids:
        job_role = job_roles.get(job_role_id)
        if job_role is None:
            logger.debug(
                f"[{ACTION}] task {task_id}: job role {job_role_id} not in catalog, AI hallucination"
            )
            continue
        users = job_role.primary_users or job_role.users
        with_job_roles |= _member_ids(users, members)

    candidates = with_skills & with_job_roles
    if not candidates:
        candidates = with_skills | with_job_roles
    return sorted(candidates)


def normalize_reasoning(reasoning: str) -> str:
    """Make sure non-empty reasoning ends with a period."""
    reasoning = reasoning.strip()
    if reasoning and not reasoning.endswith("."):
        reasoning += "."
    return reasoning


def append_clause(reasoning: str, clause: str) -> str:
    if not reasoning:
        return clause
    return f"{reasoning} {clause}"


def build_processors(
    event: TaskEvent,
    client: TeamworkClient,
    members: dict[int, ProjectMember],
    options: AssignOptions,
) -> list[Processor]:
    """Scoring criteria in the order they apply: rates, then workload."""
    processors: list[Processor] = []
    if not options.skip_rates:
        processors.append(RatesProcessor(members))
    if not options.skip_workload:
        processors.append(WorkloadProcessor(event, client))
    return processors


async def score_candidates(
    candidates: list[int],
    processors: list[Processor],
    reasoning: str,
    task_id: int,
) -> tuple[UserScores, str]:
    """Run every processor, extending the reasoning for each one that mattered."""
    scores = new_user_scores(candidates)
    for processor in processors:
        try:
            updated = await processor(scores)
        except Exception as e:
            raise AssignmentError(f"failed to process candidate scores ({processor.name})") from e
        if updated != scores:
            logger.info(f"[{ACTION}] task {task_id}: {processor.name} changed candidate scores")
            reasoning = append_clause(reasoning, processor.clause)
        scores = updated
    return scores, reasoning


async def auto_assign_task(
    event: TaskEvent,
    client: TeamworkClient,
    agent: TaskAgent,
    options: Optional[AssignOptions] = None,
    gate: InFlightSet = processing,
) -> AssignmentResult:
    """
    Assign a freshly created or updated task to the best suited people.

    Only one call per task id runs at a time; concurrent duplicates return
    ALREADY_PROCESSING without touching Teamwork.

    Args:
        event: Task webhook event
        client: Teamwork client used for reads and writes
        agent: Agent suggesting skills and job roles
        options: Service flags switching steps off
        gate: In-flight registry of task ids

    Returns:
        AssignmentResult describing the decision

    Raises:
        AssignmentError: A step failed; the cause is chained
    """
    options = options or AssignOptions()
    task_id = event.task.id

    with gate.hold(task_id) as acquired:
        if not acquired:
            logger.info(f"[{ACTION}] task {task_id}: already being processed, skipping AI assignment")
            return AssignmentResult(status=AssignmentStatus.ALREADY_PROCESSING)

        if event.task.assigned_user_ids:
            logger.info(f"[{ACTION}] task {task_id}: already has assigned users, skipping AI assignment")
            return AssignmentResult(
                status=AssignmentStatus.ALREADY_ASSIGNED,
                user_ids=list(event.task.assigned_user_ids),
            )

        skills, job_roles, members = await load_catalogs(client, event.project.id)
        skills_map = {skill.id: skill for skill in skills}
        job_roles_map = {job_role.id: job_role for job_role in job_roles}
        members_map = {member.id: member for member in members}
        logger.debug(
            f"[{ACTION}] task {task_id}: loaded {len(skills)} skills, "
            f"{len(job_roles)} job roles, {len(members)} project users"
        )

        try:
            suggestion = await agent.find_task_skills_and_job_roles(event, skills, job_roles)
        except Exception as e:
            raise AssignmentError("failed to find task skills and job roles") from e
        logger.info(
            f"[{ACTION}] task {task_id}: agent suggested skills {suggestion.skill_ids} "
            f"and job roles {suggestion.job_role_ids}"
        )

        candidates = find_candidates(
            suggestion.skill_ids,
            suggestion.job_role_ids,
            skills_map,
            job_roles_map,
            members_map,
            task_id=task_id,
        )
        reasoning = normalize_reasoning(suggestion.reasoning)

        processors = build_processors(event, client, members_map, options)
        scores, reasoning = await score_candidates(candidates, processors, reasoning, task_id)

        chosen = choose_ids(scores)
        if not chosen:
            logger.info(
                f"[{ACTION}] task {task_id}: no users found with the AI suggested skills "
                f"or job roles, skipping task assignment"
            )
            return AssignmentResult(status=AssignmentStatus.NO_CANDIDATES, reasoning=reasoning)

        if not options.skip_assignment:
            try:
                await client.update_task_assignees(task_id, chosen)
            except Exception as e:
                raise AssignmentError("failed to assign task to users") from e
            logger.info(f"[{ACTION}] task {task_id}: assigned to users {chosen} based on AI")

        comment = None
        if not options.skip_comment:
            try:
                comment, _ = await post_assignment_comment(
                    client, task_id, chosen, members_map, reasoning
                )
            except Exception as e:
                raise AssignmentError("failed to create comment") from e

        return AssignmentResult(
            status=AssignmentStatus.ASSIGNED,
            user_ids=chosen,
            reasoning=reasoning,
            comment=comment,
        )
