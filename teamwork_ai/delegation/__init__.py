"""Assignment orchestrator for teamwork-ai - picks and notifies task assignees."""

from teamwork_ai.delegation.assigner import auto_assign_task, find_candidates
from teamwork_ai.delegation.models import (
    AssignmentError,
    AssignmentResult,
    AssignmentStatus,
    AssignOptions,
)
from teamwork_ai.delegation.notifier import build_comment_body

__all__ = [
    "auto_assign_task",
    "find_candidates",
    "AssignmentError",
    "AssignmentResult",
    "AssignmentStatus",
    "AssignOptions",
    "build_comment_body",
]
