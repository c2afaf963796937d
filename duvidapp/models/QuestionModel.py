from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from typing import List, Literal, Optional
from datetime import datetime

from duvidapp.models.AnswerModel import Answer, ensure_aware, utcnow
from duvidapp.models.UserModel import Role, role_from_api

MIN_TITLE_LENGTH = 10
MIN_CONTENT_LENGTH = 20
MAX_TAGS = 5

SortBy = Literal["newest", "oldest", "mostViewed", "mostAnswered"]
StatusFilter = Literal["all", "resolved", "unresolved"]


def normalize_tags(tags: List[str]) -> List[str]:
    """Trim, lower-case and de-duplicate, keeping first-seen order."""
    normalized = []
    for tag in tags:
        tag = tag.strip().lower()
        if tag and tag not in normalized:
            normalized.append(tag)
    return normalized


class QuestionAuthor(BaseModel):
    id: str = "unknown"
    name: str = "Autor Desconhecido"
    avatar: Optional[str] = None
    role: Role = "student"

    @field_validator("role", mode="before")
    @classmethod
    def map_role(cls, value):
        return role_from_api(value)


class Question(BaseModel):
    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    title: str
    content: str
    tags: List[str] = []
    author: QuestionAuthor = Field(default_factory=QuestionAuthor)
    createdAt: datetime = Field(default_factory=utcnow)
    updatedAt: Optional[datetime] = None
    views: int = Field(default=0, ge=0, validation_alias=AliasChoices("views", "viewing"))
    likes: int = 0
    answers: List[Answer] = []

    @field_validator("createdAt", "updatedAt")
    @classmethod
    def make_aware(cls, value):
        return ensure_aware(value)

    @field_validator("author", mode="before")
    @classmethod
    def default_author(cls, value):
        return value if value is not None else QuestionAuthor()

    @model_validator(mode="after")
    def default_updated_at(self):
        if self.updatedAt is None:
            self.updatedAt = self.createdAt
        return self

    @computed_field
    @property
    def isResolved(self) -> bool:
        return any(answer.isVerified for answer in self.answers)

    @property
    def answer_count(self) -> int:
        return len(self.answers)


class QuestionCreate(BaseModel):
    title: str
    content: str
    tags: List[str]

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        value = value.strip()
        if len(value) < MIN_TITLE_LENGTH:
            raise ValueError(f"O título deve ter pelo menos {MIN_TITLE_LENGTH} caracteres")
        return value

    @field_validator("content")
    @classmethod
    def check_content(cls, value: str) -> str:
        value = value.strip()
        if len(value) < MIN_CONTENT_LENGTH:
            raise ValueError(f"A descrição deve ter pelo menos {MIN_CONTENT_LENGTH} caracteres")
        return value

    @field_validator("tags")
    @classmethod
    def check_tags(cls, value: List[str]) -> List[str]:
        value = normalize_tags(value)
        if not value:
            raise ValueError("Adicione pelo menos uma tag")
        if len(value) > MAX_TAGS:
            raise ValueError(f"Use no máximo {MAX_TAGS} tags")
        return value


class QuestionUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    likes: Optional[int] = None


class QuestionDetail(BaseModel):
    id: str = Field(serialization_alias="_id")
    title: str
    content: str
    tags: List[str]
    author: QuestionAuthor
    createdAt: datetime
    updatedAt: datetime
    viewing: int
    likes: int


class QuestionFilters(BaseModel):
    model_config = ConfigDict(frozen=True)

    tags: List[str] = []
    searchTerm: str = ""
    sortBy: SortBy = "newest"
    status: StatusFilter = "all"
    authorId: Optional[str] = None
