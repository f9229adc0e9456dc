"""Prompt shared by every agent adapter."""

import json

from teamwork_ai.tools.teamwork import JobRole, Skill
from teamwork_ai.triggers.models import TaskEvent

SYSTEM_INSTRUCTIONS = (
    "You are a project manager expert. You identify the skills and job roles "
    "required to complete a task based on its details."
)

FIND_TASK_SKILLS_AND_JOB_ROLES_PROMPT = """You have access to a list of skills and job
roles that can be used to complete a task. You are given a task with its name,
description, and the project it belongs to. You need to analyze the task and
suggest the best skills and job roles to complete it.

Please send back a JSON object with the skills and job role IDs. The format
MUST be:

{{
  "skillIds": [1, 2],
  "jobRoleIds": [3, 4],
  "reasoning": "The reasoning behind the suggestions"
}}

You MUST NOT send anything else, just the JSON object. If there are no skills or
job roles, send an empty array. Do not hallucinate or make up any skills or job
roles.

---
Project name: {project_name}
---
Project description: {project_description}
---
Tasklist name: {tasklist_name}
---
Tasklist description: {tasklist_description}
---
Task name: {task_name}
---
Task description: {task_description}
---
Available skills: {skills}
---
Available job roles: {job_roles}
"""


def _encode_catalog(items) -> str:
    return ",".join(
        json.dumps({"id": item.id, "name": item.name}, ensure_ascii=False) for item in items
    )


def build_task_prompt(
    event: TaskEvent,
    available_skills: list[Skill],
    available_job_roles: list[JobRole],
) -> str:
    """Render the skills/job roles prompt for a task."""
    return FIND_TASK_SKILLS_AND_JOB_ROLES_PROMPT.format(
        project_name=event.project.name,
        project_description=event.project.description,
        tasklist_name=event.tasklist.name,
        tasklist_description=event.tasklist.description,
        task_name=event.task.name,
        task_description=event.task.description,
        skills=_encode_catalog(available_skills),
        job_roles=_encode_catalog(available_job_roles),
    )
