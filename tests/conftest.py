from __future__ import annotations

import json
import re
from typing import Any, Optional

import httpx
import pytest

from teamwork_ai.agent.base import SkillsAndJobRoles
from teamwork_ai.tools.teamwork import TeamworkClient
from teamwork_ai.triggers.models import TaskEvent

SERVER = "https://example.teamwork.com"
TOKEN = "twp_secret"

EXPLANATION = "Some interesting explanation."


def page(key: str, items: list, has_more: bool = False) -> dict:
    return {key: items, "meta": {"page": {"hasMore": has_more}}}


class FakeTeamwork:
    """In-memory Teamwork back end served through httpx.MockTransport."""

    def __init__(
        self,
        skills: Optional[list] = None,
        job_roles: Optional[list] = None,
        members: Optional[list] = None,
        workload: Optional[dict] = None,
        failing: tuple[str, ...] = (),
    ):
        self.skills = skills or []
        self.job_roles = job_roles or []
        self.members = members or []
        self.workload = workload or {"workload": {"users": []}, "included": {}}
        self.failing = failing
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        for fragment in self.failing:
            if fragment in path:
                return httpx.Response(500, text="boom")

        if request.method == "GET" and path == "/projects/api/v3/skills.json":
            return httpx.Response(200, json=page("skills", self.skills))
        if request.method == "GET" and path == "/projects/api/v3/jobroles.json":
            return httpx.Response(200, json=page("jobRoles", self.job_roles))
        if request.method == "GET" and re.fullmatch(r"/projects/api/v3/projects/\d+/people\.json", path):
            return httpx.Response(200, json=page("people", self.members))
        if request.method == "GET" and path == "/projects/api/v3/workload.json":
            return httpx.Response(200, json=self.workload)
        if request.method == "PUT" and re.fullmatch(r"/projects/api/v3/tasks/\d+\.json", path):
            return httpx.Response(200, json={})
        if request.method == "POST" and re.fullmatch(r"/tasks/\d+/comments\.json", path):
            return httpx.Response(201, json={"commentId": "1", "STATUS": "OK"})
        return httpx.Response(404, text=f"unexpected {request.method} {path}")

    def client(self) -> TeamworkClient:
        transport = httpx.MockTransport(self.handler)
        return TeamworkClient(SERVER, TOKEN, http_client=httpx.AsyncClient(transport=transport))

    def calls(self, method: str, fragment: str = "") -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and fragment in r.url.path]

    def writes(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method in ("PUT", "POST")]

    def assigned_ids(self) -> list[int]:
        (request,) = self.calls("PUT")
        return json.loads(request.content)["task"]["assignees"]["userIds"]

    def comment_body(self) -> str:
        (request,) = self.calls("POST", "/comments.json")
        return json.loads(request.content)["comment"]["body"]


class FakeAgent:
    """Returns a canned suggestion and remembers what it was asked."""

    def __init__(
        self,
        skill_ids: tuple[int, ...] = (),
        job_role_ids: tuple[int, ...] = (),
        reasoning: str = EXPLANATION,
        error: Optional[Exception] = None,
    ):
        self.answer = SkillsAndJobRoles(
            skill_ids=list(skill_ids), job_role_ids=list(job_role_ids), reasoning=reasoning
        )
        self.error = error
        self.calls: list[Any] = []

    async def find_task_skills_and_job_roles(self, event, available_skills, available_job_roles):
        self.calls.append((event, available_skills, available_job_roles))
        if self.error is not None:
            raise self.error
        return self.answer


def member(user_id: int, first: str, last: str, cost: Optional[int] = None) -> dict:
    data: dict[str, Any] = {"id": user_id, "firstName": first, "lastName": last}
    if cost is not None:
        data["userCost"] = cost
    return data


def relation(*user_ids: int) -> list[dict]:
    return [{"id": user_id, "type": "users"} for user_id in user_ids]


def task_payload(task_id: int = 42, **task_fields: Any) -> dict:
    task = {"id": task_id, "name": "Build login page", "description": "OAuth flow", "assignedUserIds": []}
    task.update(task_fields)
    return {
        "project": {"id": 10, "name": "Website", "description": "Company website"},
        "task": task,
        "taskList": {"id": 5, "name": "Sprint 1", "description": None},
    }


def task_event(task_id: int = 42, **task_fields: Any) -> TaskEvent:
    return TaskEvent.model_validate(task_payload(task_id, **task_fields))


@pytest.fixture
def two_members() -> list[dict]:
    return [member(1, "James", "Bond"), member(2, "Michael", "Scott")]
