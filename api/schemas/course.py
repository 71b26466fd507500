from pydantic import BaseModel, FiniteFloat
from typing import Optional
from uuid import UUID

from database.models import Course


class CourseCreate(BaseModel):
    title: str
    description: Optional[str] = None
    duration: Optional[FiniteFloat] = None
    price: Optional[FiniteFloat] = None


# Only these fields can be changed after creation, anything else in the body is dropped
class CourseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[FiniteFloat] = None
    price: Optional[FiniteFloat] = None


class CourseGet(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    duration: Optional[float] = None
    price: Optional[float] = None
    instructor: UUID
    students: list[UUID]

    @classmethod
    def from_course(cls, course: Course) -> "CourseGet":
        return cls(
            id=course.id,
            title=course.title,
            description=course.description,
            duration=course.duration,
            price=course.price,
            instructor=course.instructor_id,
            students=course.student_ids,
        )


class CourseMessage(BaseModel):
    message: str
    course: CourseGet


class Message(BaseModel):
    message: str
