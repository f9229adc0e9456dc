"""
Agent capability and adapter registry.

An agent reads a task plus the skill and job role catalogs and suggests which
of them the task needs. Vendor adapters register a factory under a name at
import time; the service picks one by configuration at startup.
"""

import json
import logging
import re
from typing import Callable, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from teamwork_ai.tools.teamwork import JobRole, Skill
from teamwork_ai.triggers.models import TaskEvent

logger = logging.getLogger(__name__)


class AgentError(Exception):
    """The agent could not produce a usable answer."""


class AgentConfigError(ValueError):
    """Unknown adapter name or malformed DSN."""


class SkillsAndJobRoles(BaseModel):
    """Agent answer: catalog ids the task needs and why."""
    model_config = ConfigDict(populate_by_name=True)

    skill_ids: list[int] = Field(default=[], alias="skillIds")
    job_role_ids: list[int] = Field(default=[], alias="jobRoleIds")
    reasoning: str = ""


class TaskAgent(Protocol):
    """Capability every adapter implements."""

    async def find_task_skills_and_job_roles(
        self,
        event: TaskEvent,
        available_skills: list[Skill],
        available_job_roles: list[JobRole],
    ) -> SkillsAndJobRoles:
        ...


AgentFactory = Callable[[str], TaskAgent]

_registered: dict[str, AgentFactory] = {}


def register(name: str, factory: AgentFactory) -> None:
    """Register an adapter factory. The factory receives the DSN."""
    _registered[name] = factory


def registered_agents() -> list[str]:
    return sorted(_registered)


def init_agent(name: str, dsn: str) -> Optional[TaskAgent]:
    """
    Build the adapter registered as `name`.

    Returns None when no name is configured.
    """
    if not name:
        return None
    factory = _registered.get(name)
    if factory is None:
        raise AgentConfigError(
            f"unknown agentic implementation: {name} (available: {', '.join(registered_agents())})"
        )
    try:
        agent = factory(dsn)
    except AgentConfigError:
        raise
    except ValueError as e:
        raise AgentConfigError(f"failed to initialize agentic implementation {name}: {e}") from e
    except ImportError as e:
        # vendor SDKs are optional extras
        raise AgentConfigError(
            f"failed to initialize agentic implementation {name}: {e} "
            f"(install it with: pip install teamwork-ai[{name}])"
        ) from e
    logger.info(f"Agent '{name}' initialized")
    return agent


def parse_skills_and_job_roles(raw_response: str) -> SkillsAndJobRoles:
    """Decode the JSON object a model returned, tolerating markdown fences."""
    json_text = raw_response.strip()

    if "```" in json_text:
        json_text = re.sub(r"```(?:json)?\s*", "", json_text)

    json_match = re.search(r"\{.*\}", json_text, re.DOTALL)
    if json_match:
        json_text = json_match.group(0)

    try:
        return SkillsAndJobRoles.model_validate(json.loads(json_text))
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error(f"Failed to decode agent response: {raw_response[:500]}")
        raise AgentError(f"failed to decode task skills and job roles: {e}") from e
