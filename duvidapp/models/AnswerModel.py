from pydantic import AliasChoices, BaseModel, Field, computed_field, field_validator
from typing import List, Optional
from datetime import datetime, timezone

from duvidapp.models.VoteModel import VoteType

MIN_ANSWER_LENGTH = 10


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    # Naive timestamps from the backend are UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _check_content(value: str) -> str:
    value = value.strip()
    if len(value) < MIN_ANSWER_LENGTH:
        raise ValueError(f"A resposta deve ter pelo menos {MIN_ANSWER_LENGTH} caracteres")
    return value


class Answer(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    questionId: str = Field(validation_alias=AliasChoices("questionId", "duvidaId"))
    content: str
    authorId: str
    authorName: str = "Autor Desconhecido"
    authorAvatar: Optional[str] = None
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: Optional[datetime] = None
    isVerified: bool = False
    isCorrect: bool = False
    verificationComment: Optional[str] = None
    likes: List[str] = []  # user ids
    dislikes: List[str] = []

    @field_validator("createdAt", "updatedAt")
    @classmethod
    def make_aware(cls, value):
        return ensure_aware(value)

    @computed_field
    @property
    def votes(self) -> int:
        return len(self.likes) - len(self.dislikes)

    def vote_of(self, user_id: str) -> Optional[VoteType]:
        if user_id in self.likes:
            return "up"
        if user_id in self.dislikes:
            return "down"
        return None

    def with_vote(self, user_id: str, vote_type: VoteType) -> "Answer":
        """Same type again retracts, the other type moves the user across"""
        likes = [u for u in self.likes if u != user_id]
        dislikes = [u for u in self.dislikes if u != user_id]
        if self.vote_of(user_id) != vote_type:
            (likes if vote_type == "up" else dislikes).append(user_id)
        return self.model_copy(update={"likes": likes, "dislikes": dislikes})


def set_verification(
    answers: List[Answer],
    answer_id: str,
    is_verified: bool = True,
    is_correct: Optional[bool] = None,
    comment: Optional[str] = None,
) -> List[Answer]:
    """Set the verification flags of one answer.

    `is_correct` follows `is_verified` when omitted. Marking an answer
    correct demotes any previously correct sibling; un-verifying leaves
    the siblings alone.
    """
    if is_correct is None:
        is_correct = is_verified
    now = utcnow()
    updated = []
    for answer in answers:
        if answer.id == answer_id:
            updated.append(answer.model_copy(update={
                "isVerified": is_verified,
                "isCorrect": is_correct,
                "verificationComment": comment if comment is not None else answer.verificationComment,
                "updatedAt": now,
            }))
        elif is_correct and answer.isCorrect:
            updated.append(answer.model_copy(update={"isCorrect": False}))
        else:
            updated.append(answer)
    return updated


class AnswerCreate(BaseModel):
    questionId: str
    content: str

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        return _check_content(value)

    def to_api(self) -> dict:
        return {"duvidaId": self.questionId, "content": self.content}


class AnswerUpdate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        return _check_content(value)


class AnswerVerify(BaseModel):
    isVerified: bool = True
    isCorrect: Optional[bool] = None  # follows isVerified when omitted
    comment: Optional[str] = None


# Backend request body for POST /resposta
class AnswerPost(BaseModel):
    duvidaId: str
    content: str

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        return _check_content(value)


class AnswerDetail(BaseModel):
    id: str = Field(serialization_alias="_id")
    duvidaId: str
    content: str
    authorId: str
    authorName: str
    authorAvatar: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime
    isVerified: bool
    isCorrect: bool
    verificationComment: Optional[str] = None
    likes: List[str]
    dislikes: List[str]
