from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from accounts.domain.entities import User

T = TypeVar("T")


class UserOut(BaseModel):
    id: int = Field(..., description="The id of the user")
    first_name: str
    last_name: str
    email: str = Field(..., description="The email of the user")
    bio: str
    is_active: bool

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            bio=user.bio,
            is_active=user.is_active,
        )


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope for every response, successes and errors alike."""

    code: int
    status: str
    data: Optional[T] = None
