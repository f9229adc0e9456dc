"""
Teamwork.com API client.

Covers the catalog reads (skills, job roles, project people), the workload
report and the two writes the assigner performs (task assignees, comments).
"""

import logging
from datetime import date
from typing import Any, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

PAGE_SIZE = 500
WORKLOAD_INCLUDE = "users.workingHours.workingHoursEntry"


class TeamworkAPIError(Exception):
    """Raised when a Teamwork request fails or returns something unusable."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class _TeamworkModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Relationship(_TeamworkModel):
    """Sideload reference to another entity."""
    id: int
    type: str = ""


class Skill(_TeamworkModel):
    """A skill and the users who hold it."""
    id: int
    name: str
    users: list[Relationship] = []


class JobRole(_TeamworkModel):
    """A job role; primary users are the preferred subset of users."""
    id: int
    name: str
    users: list[Relationship] = []
    primary_users: list[Relationship] = Field(default=[], alias="primaryUsers")


class ProjectMember(_TeamworkModel):
    """A person on a project. Cost is in minor monetary units."""
    id: int
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    cost: Optional[int] = Field(default=None, alias="userCost")


class WorkloadDate(_TeamworkModel):
    capacity: float = 0.0
    capacity_minutes: int = Field(default=0, alias="capacityMinutes")
    unavailable_day: bool = Field(default=False, alias="unavailableDay")


class WorkloadUser(_TeamworkModel):
    id: int = Field(alias="userId")
    dates: dict[date, WorkloadDate] = {}


class WorkloadIncludedUser(_TeamworkModel):
    id: int
    length_of_day: float = Field(default=0.0, alias="lengthOfDay")
    working_hour: Optional[Relationship] = Field(default=None, alias="workingHour")


class WorkingHourEntry(_TeamworkModel):
    id: int
    working_hour: Relationship = Field(alias="workingHour")
    weekday: str
    task_hours: float = Field(default=0.0, alias="taskHours")


class WorkloadIncluded(_TeamworkModel):
    users: dict[str, WorkloadIncludedUser] = {}
    working_hour_entries: dict[str, WorkingHourEntry] = Field(
        default={}, alias="workingHourEntries"
    )


class Workload(_TeamworkModel):
    """Capacity per user and date, with the working-hours sideloads."""
    users: list[WorkloadUser] = []
    included: WorkloadIncluded = Field(default_factory=WorkloadIncluded)


class TeamworkClient:
    """Async client for the subset of the Teamwork API used by the assigner."""

    def __init__(
        self,
        server: str,
        api_token: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
    ):
        self.server = server.rstrip("/")
        self._auth = httpx.BasicAuth(api_token, "")
        self._client = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "TeamworkClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        url = f"{self.server}{path}"
        try:
            response = await self._client.request(
                method,
                url,
                auth=self._auth,
                params=params,
                json=json,
                headers={"Accept": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TeamworkAPIError(
                f"Teamwork API error: {method} {path} returned "
                f"{e.response.status_code}: {e.response.text}",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            raise TeamworkAPIError(
                f"Failed to connect to Teamwork: {method} {path}: {str(e)}"
            ) from e

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise TeamworkAPIError(
                f"Failed to decode Teamwork response for {method} {path}",
                status_code=response.status_code,
            ) from e

    async def _list(
        self,
        path: str,
        key: str,
        model: type[BaseModel],
        params: Optional[dict[str, Any]] = None,
    ) -> list:
        """Fetch every page of a v3 list endpoint."""
        result = []
        page = 1
        while True:
            query = dict(params or {})
            query.update({"page": page, "pageSize": PAGE_SIZE})
            data = await self._request("GET", path, params=query)
            try:
                result.extend(model.model_validate(item) for item in data.get(key) or [])
            except ValidationError as e:
                raise TeamworkAPIError(f"Unexpected {key} payload from {path}: {e}") from e

            has_more = ((data.get("meta") or {}).get("page") or {}).get("hasMore", False)
            if not has_more:
                return result
            page += 1
            logger.debug(f"Fetching page {page} of {key}")

    async def list_skills(self) -> list[Skill]:
        """List all skills with their users."""
        return await self._list(
            "/projects/api/v3/skills.json", "skills", Skill, {"include": "users"}
        )

    async def list_job_roles(self) -> list[JobRole]:
        """List all job roles with their users and primary users."""
        return await self._list(
            "/projects/api/v3/jobroles.json", "jobRoles", JobRole, {"include": "users"}
        )

    async def list_project_members(self, project_id: int) -> list[ProjectMember]:
        """List the people on a project."""
        return await self._list(
            f"/projects/api/v3/projects/{project_id}/people.json", "people", ProjectMember
        )

    async def get_workload(
        self, user_ids: list[int], start_date: date, end_date: date
    ) -> Workload:
        """
        Fetch the workload report for the given users in [start_date, end_date].

        Working hours profiles and their entries are side-loaded so callers can
        resolve the length of each working day.

        Args:
            user_ids: Users to report on; no request is made when empty
            start_date: First day of the window
            end_date: Last day of the window (inclusive)

        Returns:
            Workload with per-date capacity and the working hours sideloads
        """
        if not user_ids:
            return Workload()

        data = await self._request(
            "GET",
            "/projects/api/v3/workload.json",
            params={
                "startDate": start_date.isoformat(),
                "endDate": end_date.isoformat(),
                "userIds": ",".join(str(user_id) for user_id in user_ids),
                "pageSize": len(user_ids),
                "include": WORKLOAD_INCLUDE,
            },
        )
        try:
            return Workload(
                users=(data.get("workload") or {}).get("users") or [],
                included=data.get("included") or {},
            )
        except ValidationError as e:
            raise TeamworkAPIError(f"Unexpected workload payload: {e}") from e

    async def update_task_assignees(self, task_id: int, user_ids: list[int]) -> None:
        """Replace the task assignees with the given users."""
        await self._request(
            "PUT",
            f"/projects/api/v3/tasks/{task_id}.json",
            json={"task": {"assignees": {"userIds": list(user_ids)}}},
        )

    async def create_comment(self, task_id: int, body: str) -> Optional[int]:
        """Post a comment on a task, returning the new comment id when reported."""
        data = await self._request(
            "POST",
            f"/tasks/{task_id}/comments.json",
            json={"comment": {"body": body}},
        )
        comment_id = data.get("commentId") or data.get("id")
        if comment_id is None:
            return None
        try:
            return int(comment_id)
        except (TypeError, ValueError):
            logger.warning(f"Comment posted on task {task_id} with unexpected id {comment_id!r}")
            return None
