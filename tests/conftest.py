"""Shared fixtures for the course enrollment tests."""

import os

# Settings are read at import time and refuse the default signing key outside development
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Any, Optional
from uuid import UUID, uuid4

import pytest

from api.schemas.user import Actor
from database.models import Course, CourseStudent, UserRole
from services.course import CourseService


class InMemoryCourseRepository:
    """Dict-backed stand-in for CourseRepository used by service and route tests.

    ``calls`` counts every repository access so tests can assert that
    rejected requests never reached persistence.
    """

    def __init__(self):
        self.courses: dict[UUID, Course] = {}
        self.calls = 0

    async def find_all(self) -> list[Course]:
        self.calls += 1
        return list(self.courses.values())

    async def find_by_id(self, course_id: UUID, refresh: bool = False) -> Optional[Course]:
        self.calls += 1
        return self.courses.get(course_id)

    async def create(self, course: Course) -> Course:
        self.calls += 1
        self.courses[course.id] = course
        return course

    async def update(self, course: Course, changes: dict[str, Any]) -> Course:
        self.calls += 1
        for field, value in changes.items():
            setattr(course, field, value)
        return course

    async def delete(self, course: Course) -> None:
        self.calls += 1
        del self.courses[course.id]

    async def add_student(self, course_id: UUID, student_id: UUID) -> bool:
        self.calls += 1
        course = self.courses[course_id]
        if student_id in course.student_ids:
            return False
        course.enrollments.append(CourseStudent(course_id=course_id, student_id=student_id))
        return True

    async def remove_student(self, course_id: UUID, student_id: UUID) -> bool:
        self.calls += 1
        course = self.courses[course_id]
        for enrollment in course.enrollments:
            if enrollment.student_id == student_id:
                course.enrollments.remove(enrollment)
                return True
        return False


@pytest.fixture
def repository():
    return InMemoryCourseRepository()


@pytest.fixture
def course_service(repository):
    return CourseService(repository)


@pytest.fixture
def instructor():
    return Actor(id=uuid4(), role=UserRole.instructor)


@pytest.fixture
def other_instructor():
    return Actor(id=uuid4(), role=UserRole.instructor)


@pytest.fixture
def student():
    return Actor(id=uuid4(), role=UserRole.student)


@pytest.fixture
def other_student():
    return Actor(id=uuid4(), role=UserRole.student)


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "api: mark test as an HTTP route test")
