"""
Webhook handler for Teamwork task events.

Teamwork posts the task (with its project and tasklist) whenever a task is
created or updated; each delivery is handed to the assigner.
"""

import logging
from typing import Optional, Union

from teamwork_ai.agent.base import TaskAgent
from teamwork_ai.delegation.assigner import auto_assign_task
from teamwork_ai.delegation.models import AssignmentResult, AssignOptions
from teamwork_ai.tools.teamwork import TeamworkClient
from teamwork_ai.triggers.models import TaskEvent

logger = logging.getLogger(__name__)


def decode_task_event(payload: Union[str, bytes]) -> TaskEvent:
    """
    Decode a raw webhook body.

    Raises pydantic.ValidationError for malformed JSON or a payload that is
    not a task event.
    """
    return TaskEvent.model_validate_json(payload)


async def handle_task_webhook(
    payload: Union[str, bytes],
    client: TeamworkClient,
    agent: TaskAgent,
    options: Optional[AssignOptions] = None,
) -> AssignmentResult:
    """Decode a task webhook delivery and run the assigner on it."""
    event = decode_task_event(payload)
    logger.info(f"Teamwork webhook: task {event.task.id} in project {event.project.id}")
    result = await auto_assign_task(event, client, agent, options)
    logger.info(f"Teamwork webhook: task {event.task.id} handled ({result.status.value})")
    return result
