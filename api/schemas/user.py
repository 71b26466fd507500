from uuid import UUID

from pydantic import BaseModel

from database.models import UserRole


class Actor(BaseModel):
    """The authenticated user behind a request."""

    id: UUID
    role: UserRole

    @property
    def is_instructor(self) -> bool:
        return self.role == UserRole.instructor

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.student


class TokenPayload(BaseModel):
    sub: UUID
    role: UserRole
    exp: int
    iat: int
