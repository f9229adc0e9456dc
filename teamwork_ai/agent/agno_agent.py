"""
Agno-based adapters for hosted and local LLMs.

Registered names and DSN formats:
- anthropic: `model:token`
- openai: `model:token`
- ollama: `http[s]://host[:port]/model`
"""

import logging
from typing import Any, Callable
from urllib.parse import urlsplit, urlunsplit

from agno.agent import Agent

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


class AgnoTaskAgent:
    """Runs the skills/job roles prompt through an Agno agent."""

    def __init__(self, model: Any, name: str):
        self.name = name
        self.agent = Agent(
            model=model,
            instructions=SYSTEM_INSTRUCTIONS,
            markdown=False,
        )

    async def find_task_skills_and_job_roles(
        self,
        event: TaskEvent,
        available_skills: list[Skill],
        available_job_roles: list[JobRole],
    ) -> SkillsAndJobRoles:
        prompt = build_task_prompt(event, available_skills, available_job_roles)
        logger.info(f"Running {self.name} agent for task {event.task.id}")
        try:
            response = await self.agent.arun(prompt)
        except Exception as e:
            # vendor SDKs raise their own exception hierarchies
            raise AgentError(f"failed to find task skills and job roles: {e}") from e

        content = getattr(response, "content", None)
        if not isinstance(content, str) or not content.strip():
            raise AgentError("failed to find task skills and job roles: empty response")
        return parse_skills_and_job_roles(content)


def parse_model_token_dsn(dsn: str) -> tuple[str, str]:
    """Split a `model:token` DSN."""
    model, sep, token = dsn.partition(":")
    if not sep or not model.strip() or not token.strip():
        raise AgentConfigError("invalid DSN format: expected model:token")
    return model.strip(), token.strip()


def parse_ollama_dsn(dsn: str) -> tuple[str, str]:
    """Split an Ollama DSN into (server, model)."""
    parts = urlsplit(dsn)
    if parts.scheme not in ("http", "https"):
        raise AgentConfigError(f"invalid scheme: {parts.scheme!r}")
    model = parts.path.lstrip("/")
    if not model:
        raise AgentConfigError("missing model name in DSN")
    server = urlunsplit((parts.scheme, parts.netloc, "", "", ""))
    return server, model


def _anthropic(dsn: str) -> AgnoTaskAgent:
    from agno.models.anthropic import Claude

    model, token = parse_model_token_dsn(dsn)
    return AgnoTaskAgent(Claude(id=model, api_key=token, max_tokens=1024), "anthropic")


def _openai(dsn: str) -> AgnoTaskAgent:
    from agno.models.openai import OpenAIChat

    model, token = parse_model_token_dsn(dsn)
    return AgnoTaskAgent(OpenAIChat(id=model, api_key=token), "openai")


def _ollama(dsn: str) -> AgnoTaskAgent:
    from agno.models.ollama import Ollama

    server, model = parse_ollama_dsn(dsn)
    return AgnoTaskAgent(Ollama(id=model, host=server), "ollama")


_FACTORIES: dict[str, Callable[[str], AgnoTaskAgent]] = {
    "anthropic": _anthropic,
    "openai": _openai,
    "ollama": _ollama,
}

for _name, _factory in _FACTORIES.items():
    register(_name, _factory)
