"""Data models for webhook events."""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _EventModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @field_validator("name", "description", "status", mode="before", check_fields=False)
    @classmethod
    def _null_text(cls, value):
        # Teamwork sends null for blank text fields
        return "" if value is None else value


class EventProject(_EventModel):
    """Project the task belongs to."""
    id: int
    name: str = ""
    description: str = ""


class EventTask(_EventModel):
    """Task as delivered by the task webhook."""
    id: int
    name: str = ""
    description: str = ""
    status: str = ""
    start_date: Optional[date] = Field(default=None, alias="startDate")
    due_date: Optional[date] = Field(default=None, alias="dueDate")
    estimated_minutes: int = Field(default=0, alias="estimatedMinutes")
    assigned_user_ids: tuple[int, ...] = Field(default=(), alias="assignedUserIds")

    @field_validator("estimated_minutes", mode="before")
    @classmethod
    def _null_minutes(cls, value):
        return 0 if value is None else value

    @field_validator("assigned_user_ids", mode="before")
    @classmethod
    def _null_assignees(cls, value):
        return () if value is None else value


class EventTasklist(_EventModel):
    """Tasklist the task belongs to."""
    id: int = 0
    name: str = ""
    description: str = ""


class TaskEvent(_EventModel):
    """Payload of the Teamwork task created/updated webhook."""
    project: EventProject
    task: EventTask
    tasklist: EventTasklist = Field(default_factory=EventTasklist, alias="taskList")

    @property
    def has_window(self) -> bool:
        """True when the task has both a start and a due date."""
        return self.task.start_date is not None and self.task.due_date is not None
