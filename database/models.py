from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional
from uuid import UUID, uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, Relationship, SQLModel


# Enums
class UserRole(str, Enum):
    instructor = "instructor"
    student = "student"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Course(SQLModel, table=True):
    __tablename__: str = "courses"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    title: str
    description: Optional[str] = None
    duration: Optional[float] = None
    price: Optional[float] = None
    # Users live in the auth provider, so this is a plain id, not a foreign key
    instructor_id: UUID = Field(index=True)

    # Relationships
    enrollments: List["CourseStudent"] = Relationship(
        back_populates="course",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "CourseStudent.enrolled_at",
            "lazy": "selectin",
        },
    )

    @property
    def student_ids(self) -> list[UUID]:
        return [enrollment.student_id for enrollment in self.enrollments]


class CourseStudent(SQLModel, table=True):
    __tablename__: str = "course_students"

    # Composite primary key keeps membership unique per course
    course_id: UUID = Field(foreign_key="courses.id", primary_key=True, ondelete="CASCADE")
    student_id: UUID = Field(primary_key=True)
    enrolled_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
    )

    # Relationships
    course: Optional["Course"] = Relationship(back_populates="enrollments")
