"""Agent capability for teamwork-ai - suggests skills and job roles for a task."""

from teamwork_ai.agent.base import (
    AgentConfigError,
    AgentError,
    SkillsAndJobRoles,
    TaskAgent,
    init_agent,
    register,
    registered_agents,
)

# adapters register themselves on import
from teamwork_ai.agent import agno_agent, vertexai  # noqa: F401,E402

__all__ = [
    "AgentConfigError",
    "AgentError",
    "SkillsAndJobRoles",
    "TaskAgent",
    "init_agent",
    "register",
    "registered_agents",
]
