"""Trigger system for teamwork-ai - webhook events and the in-flight gate."""

from teamwork_ai.triggers.gate import InFlightSet, processing
from teamwork_ai.triggers.models import EventProject, EventTask, EventTasklist, TaskEvent

__all__ = [
    "InFlightSet",
    "processing",
    "EventProject",
    "EventTask",
    "EventTasklist",
    "TaskEvent",
]
