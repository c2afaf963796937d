from pydantic import BaseModel, EmailStr, field_validator, model_validator
from typing import Literal, Optional
from datetime import datetime

Role = Literal["student", "teacher"]
ApiRole = Literal["user", "admin"]  # the backend's vocabulary for the same two roles


def role_from_api(value: Optional[str]) -> Role:
    return "teacher" if value in ("admin", "teacher") else "student"


def role_to_api(role: Role) -> ApiRole:
    return "admin" if role == "teacher" else "user"


def _check_password(value: str) -> str:
    if len(value) < 6:
        raise ValueError("A senha deve ter pelo menos 6 caracteres")
    return value


class User(BaseModel):
    id: str
    name: str
    email: str
    role: Role = "student"
    avatar: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def map_role(cls, value):
        return role_from_api(value)

    @classmethod
    def from_claims(cls, claims: dict) -> "User":
        return cls(
            id=str(claims["sub"]),
            name=claims.get("name") or "",
            email=claims.get("email") or "",
            role=claims.get("role"),
            avatar=claims.get("avatar"),
        )

    @property
    def is_teacher(self) -> bool:
        return self.role == "teacher"


# Registration form payload, in domain vocabulary
class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str
    role: Role = "student"

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Informe seu nome")
        return value

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        return _check_password(value)

    def to_api(self) -> dict:
        return {
            "name": self.name,
            "email": self.email,
            "password": self.password,
            "role": role_to_api(self.role),
        }


class UserLogin(BaseModel):
    email: str
    password: str


# Registration body as the backend receives it
class UserRegister(BaseModel):
    name: str
    email: EmailStr
    password: str
    role: ApiRole = "user"


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    currentPassword: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return _check_password(value)

    @model_validator(mode="after")
    def require_current_password(self):
        if self.password is not None and not self.currentPassword:
            raise ValueError("Informe a senha atual para definir uma nova senha")
        return self


class UserProfile(BaseModel):
    id: str
    name: str
    email: EmailStr
    role: ApiRole
    avatar: Optional[str] = None
    createdAt: Optional[datetime] = None


class RegisterResult(BaseModel):
    success: bool
    message: Optional[str] = None
