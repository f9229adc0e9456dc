"""Data models for the scoring engine."""

from typing import Iterable, Protocol

from pydantic import BaseModel, ConfigDict, Field


class UserScore(BaseModel):
    """Accumulated score of one candidate. Processors only ever add to it."""
    model_config = ConfigDict(frozen=True)

    id: int
    score: int = Field(default=0, ge=0)

    def add(self, delta: int) -> "UserScore":
        return self.model_copy(update={"score": self.score + delta})


UserScores = list[UserScore]


def new_user_scores(user_ids: Iterable[int]) -> UserScores:
    """Start every candidate at zero."""
    return [UserScore(id=user_id) for user_id in user_ids]


def choose_ids(scores: UserScores) -> list[int]:
    """Return every user tied at the highest score, in candidate order."""
    if not scores:
        return []
    highest = max(user_score.score for user_score in scores)
    return [user_score.id for user_score in scores if user_score.score == highest]


class Processor(Protocol):
    """
    One ranking criterion.

    A processor maps scores to scores. When it changes any score the
    orchestrator appends `clause` to the reasoning shown to users.
    """

    name: str
    clause: str

    async def __call__(self, scores: UserScores) -> UserScores:
        ...
