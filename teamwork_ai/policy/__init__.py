"""Scoring engine for teamwork-ai - ranks candidates for a task."""

from teamwork_ai.policy.models import Processor, UserScore, UserScores, choose_ids, new_user_scores
from teamwork_ai.policy.scoring import (
    RATES_CLAUSE,
    WORKLOAD_CLAUSE,
    RatesProcessor,
    WorkloadProcessor,
    calculate_cost_weights,
    find_available_user_ids,
)

__all__ = [
    "Processor",
    "UserScore",
    "UserScores",
    "choose_ids",
    "new_user_scores",
    "RATES_CLAUSE",
    "WORKLOAD_CLAUSE",
    "RatesProcessor",
    "WorkloadProcessor",
    "calculate_cost_weights",
    "find_available_user_ids",
]
