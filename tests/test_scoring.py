from __future__ import annotations

import asyncio
from datetime import date

from conftest import FakeTeamwork, task_event
from teamwork_ai.policy import (
    RatesProcessor,
    WorkloadProcessor,
    calculate_cost_weights,
    choose_ids,
    find_available_user_ids,
    new_user_scores,
)
from teamwork_ai.policy.models import UserScore
from teamwork_ai.policy.scoring import calculate_available_hours, resolve_working_hours
from teamwork_ai.tools.teamwork import ProjectMember, Workload


def _members(costs: dict[int, int | None]) -> dict[int, ProjectMember]:
    return {user_id: ProjectMember(id=user_id, cost=cost) for user_id, cost in costs.items()}


def test_cost_weights_favour_cheaper_users_and_share_ties():
    members = _members({1: 30000, 2: 10000, 3: 20000, 4: 10000})

    weights = calculate_cost_weights([1, 2, 3, 4], members)

    assert weights == {2: 3, 4: 3, 3: 2, 1: 1}


def test_cost_weights_are_monotonic():
    costs = {1: 500, 2: None, 3: 0, 4: 9000, 5: 500, 6: 100}
    weights = calculate_cost_weights(list(costs), _members(costs))

    for a, cost_a in costs.items():
        for b, cost_b in costs.items():
            if (cost_a or 0) < (cost_b or 0):
                assert weights[a] >= weights[b]
            if (cost_a or 0) == (cost_b or 0):
                assert weights[a] == weights[b]
    assert min(weights.values()) == 1


def test_cost_weights_skip_non_members():
    weights = calculate_cost_weights([1, 99], _members({1: 100}))

    assert weights == {1: 1}


def test_rates_processor_adds_weights():
    processor = RatesProcessor(_members({1: 20000, 2: 10000}))

    scores = asyncio.run(processor(new_user_scores([1, 2])))

    assert scores == [UserScore(id=1, score=1), UserScore(id=2, score=2)]
    assert choose_ids(scores) == [2]


def test_choose_ids_keeps_every_tie():
    scores = [UserScore(id=3, score=2), UserScore(id=1, score=5), UserScore(id=2, score=5)]

    assert choose_ids(scores) == [1, 2]
    assert choose_ids([]) == []


def _workload(**included) -> Workload:
    return Workload.model_validate({"users": [], "included": included})


def test_working_hours_prefer_weekday_entry():
    workload = _workload(
        users={"1": {"id": 1, "lengthOfDay": 7, "workingHour": {"id": 5}}},
        workingHourEntries={
            "50": {"id": 50, "workingHour": {"id": 5}, "weekday": "monday", "taskHours": 4},
            "51": {"id": 51, "workingHour": {"id": 6}, "weekday": "tuesday", "taskHours": 2},
        },
    )

    assert resolve_working_hours(workload, 1, date(2026, 3, 2)) == 4  # Monday
    assert resolve_working_hours(workload, 1, date(2026, 3, 3)) == 7  # other profile's entry
    assert resolve_working_hours(workload, 2, date(2026, 3, 2)) == 8


def test_working_hours_fall_back_to_default_when_length_missing():
    workload = _workload(users={"1": {"id": 1}})

    assert resolve_working_hours(workload, 1, date(2026, 3, 4)) == 8


def test_available_hours_skip_unavailable_days():
    workload = Workload.model_validate(
        {
            "users": [
                {
                    "userId": 1,
                    "dates": {
                        "2026-03-02": {"capacityMinutes": 420},
                        "2026-03-03": {"capacityMinutes": 0, "unavailableDay": True},
                    },
                },
                {
                    "userId": 2,
                    "dates": {
                        "2026-03-02": {"capacityMinutes": 48},
                        "2026-03-03": {"capacityMinutes": 384},
                    },
                },
            ]
        }
    )

    assert calculate_available_hours(workload, 1) == 1
    assert round(calculate_available_hours(workload, 2), 6) == 8.8
    assert calculate_available_hours(workload, 3) == 0
    assert find_available_user_ids(workload, 120) == {2}


def test_zero_estimate_accepts_any_positive_availability():
    workload = Workload.model_validate(
        {"users": [{"userId": 1, "dates": {"2026-03-02": {"capacityMinutes": 470}}}]}
    )

    assert find_available_user_ids(workload, 0) == {1}


def test_workload_processor_without_window_makes_no_request():
    fake = FakeTeamwork()
    processor = WorkloadProcessor(task_event(startDate="2026-03-02"), fake.client())
    scores = new_user_scores([1, 2])

    assert asyncio.run(processor(scores)) == scores
    assert fake.requests == []


def test_workload_processor_without_candidates_makes_no_request():
    fake = FakeTeamwork()
    processor = WorkloadProcessor(task_event(startDate="2026-03-02", dueDate="2026-03-03"), fake.client())

    assert asyncio.run(processor([])) == []
    assert fake.requests == []


def test_workload_bonus_is_candidate_count():
    fake = FakeTeamwork(
        workload={
            "workload": {
                "users": [
                    {"userId": 1, "dates": {"2026-03-02": {"capacityMinutes": 480}}},
                    {"userId": 2, "dates": {"2026-03-02": {"capacityMinutes": 0}}},
                ]
            },
            "included": {},
        }
    )
    event = task_event(startDate="2026-03-02", dueDate="2026-03-02", estimatedMinutes=60)
    processor = WorkloadProcessor(event, fake.client())

    scores = asyncio.run(processor(new_user_scores([1, 2, 3])))

    assert scores == [UserScore(id=1), UserScore(id=2, score=3), UserScore(id=3)]
