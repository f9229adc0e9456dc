"""Clients for external services used by teamwork-ai."""

from teamwork_ai.tools.teamwork import (
    JobRole,
    ProjectMember,
    Relationship,
    Skill,
    TeamworkAPIError,
    TeamworkClient,
    Workload,
)

__all__ = [
    "JobRole",
    "ProjectMember",
    "Relationship",
    "Skill",
    "TeamworkAPIError",
    "TeamworkClient",
    "Workload",
]
