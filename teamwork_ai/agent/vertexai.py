"""
Gemini via GCP Vertex AI.

DSN format: `project[:location[:model]]`, e.g. `my-project:global:gemini-2.5-flash`.
Credentials come from the environment (GOOGLE_APPLICATION_CREDENTIALS or
`gcloud auth application-default login`).
"""

import logging

from google import genai
from google.genai import errors, types

from teamwork_ai.agent.base import (
    AgentConfigError,
    AgentError,
    SkillsAndJobRoles,
    parse_skills_and_job_roles,
    register,
)
from teamwork_ai.agent.prompts import SYSTEM_INSTRUCTIONS, build_task_prompt
from teamwork_ai.tools.teamwork import JobRole, Skill
from teamwork_ai.triggers.models import TaskEvent

logger = logging.getLogger(__name__)

DEFAULT_LOCATION = "global"
DEFAULT_MODEL = "gemini-2.5-flash"


class VertexAIAgent:
    """Gemini-backed agent using the google-genai SDK."""

    def __init__(self, project_id: str, location: str = DEFAULT_LOCATION, model: str = DEFAULT_MODEL):
        self.project_id = project_id
        self.location = location
        self.model = model
        self.client = genai.Client(vertexai=True, project=project_id, location=location)

    @classmethod
    def from_dsn(cls, dsn: str) -> "VertexAIAgent":
        parts = [part.strip() for part in dsn.split(":")]
        if not parts[0] or len(parts) > 3:
            raise AgentConfigError(f"invalid DSN format: {dsn!r} (expected project[:location[:model]])")
        project_id = parts[0]
        location = parts[1] if len(parts) > 1 and parts[1] else DEFAULT_LOCATION
        model = parts[2] if len(parts) > 2 and parts[2] else DEFAULT_MODEL
        return cls(project_id, location, model)

    async def find_task_skills_and_job_roles(
        self,
        event: TaskEvent,
        available_skills: list[Skill],
        available_job_roles: list[JobRole],
    ) -> SkillsAndJobRoles:
        prompt = build_task_prompt(event, available_skills, available_job_roles)
        logger.info(f"Asking {self.model} for skills and job roles of task {event.task.id}")
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_INSTRUCTIONS,
                    response_mime_type="application/json",
                ),
            )
        except errors.APIError as e:
            raise AgentError(f"failed to find task skills and job roles: {e}") from e

        if not response.text:
            raise AgentError("failed to find task skills and job roles: empty response")
        logger.debug(f"Raw Gemini response: {response.text[:500]}")
        return parse_skills_and_job_roles(response.text)


register("vertexai", VertexAIAgent.from_dsn)
