"""Data models for the assignment orchestrator."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class AssignOptions(BaseModel):
    """Service flags that switch parts of the assignment off."""
    skip_rates: bool = False
    skip_workload: bool = False
    skip_assignment: bool = False
    skip_comment: bool = False


class AssignmentStatus(str, Enum):
    ASSIGNED = "assigned"
    ALREADY_PROCESSING = "already_processing"
    ALREADY_ASSIGNED = "already_assigned"
    NO_CANDIDATES = "no_candidates"


class AssignmentResult(BaseModel):
    """What the orchestrator decided for one task event."""
    status: AssignmentStatus
    user_ids: list[int] = []
    reasoning: str = ""
    comment: Optional[str] = None  # body posted, None when skipped


class AssignmentError(Exception):
    """A step of the assignment failed. The cause is chained."""
