from pydantic import BaseModel, Field, model_validator
from typing import List, Literal, Optional, Tuple
from datetime import datetime, timezone
from uuid import uuid4

VoteType = Literal["up", "down"]


class Vote(BaseModel):
    id: str = Field(default_factory=lambda: f"vote_{uuid4().hex[:12]}")
    userId: str
    questionId: Optional[str] = None
    answerId: Optional[str] = None
    type: VoteType
    createdAt: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @model_validator(mode="after")
    def check_single_target(self):
        if (self.questionId is None) == (self.answerId is None):
            raise ValueError("A vote targets exactly one question or answer")
        return self

    @property
    def target_id(self) -> str:
        return self.questionId if self.questionId is not None else self.answerId

    @property
    def weight(self) -> int:
        return 1 if self.type == "up" else -1


def apply_vote(
    votes: List[Vote],
    user_id: str,
    vote_type: VoteType,
    question_id: Optional[str] = None,
    answer_id: Optional[str] = None,
) -> Tuple[List[Vote], int]:
    """Toggle a user's vote on one target.

    Returns the new vote list and the change to apply to the target's score:
    a new vote adds its weight, the same type again retracts it, and the
    opposite type replaces it in place.
    """
    target = question_id if question_id is not None else answer_id
    existing = next((v for v in votes if v.userId == user_id and v.target_id == target), None)

    if existing is None:
        vote = Vote(userId=user_id, questionId=question_id, answerId=answer_id, type=vote_type)
        return votes + [vote], vote.weight

    if existing.type == vote_type:
        return [v for v in votes if v.id != existing.id], -existing.weight

    replaced = existing.model_copy(update={"type": vote_type})
    return [replaced if v.id == existing.id else v for v in votes], replaced.weight - existing.weight
