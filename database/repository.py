from typing import Any, Optional
from uuid import UUID
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from database.models import Course, CourseStudent

logger = logging.getLogger(__name__)


class CourseRepository:
    """Persistence operations over the course aggregate.

    Every write commits immediately. A failed commit is rolled back before the
    error propagates, so the session stays usable for the caller.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            raise

    async def find_all(self) -> list[Course]:
        result = await self.session.exec(select(Course))
        return list(result.all())

    async def find_by_id(self, course_id: UUID, refresh: bool = False) -> Optional[Course]:
        # populate_existing reloads enrollments already cached in the identity map
        return await self.session.get(Course, course_id, populate_existing=refresh)

    async def create(self, course: Course) -> Course:
        self.session.add(course)
        await self._commit()
        await self.session.refresh(course)
        return course

    async def update(self, course: Course, changes: dict[str, Any]) -> Course:
        for field, value in changes.items():
            setattr(course, field, value)
        self.session.add(course)
        await self._commit()
        await self.session.refresh(course)
        return course

    async def delete(self, course: Course) -> None:
        await self.session.delete(course)
        await self._commit()

    async def add_student(self, course_id: UUID, student_id: UUID) -> bool:
        """Insert the enrollment row unless it already exists.

        Returns False when the (course, student) key is already taken, which is
        also how a concurrent duplicate enrollment surfaces.
        """
        self.session.add(CourseStudent(course_id=course_id, student_id=student_id))
        try:
            await self._commit()
        except IntegrityError:
            logger.info(f"Enrollment of student {student_id} in course {course_id} already exists")
            return False
        return True

    async def remove_student(self, course_id: UUID, student_id: UUID) -> bool:
        enrollment = await self.session.get(CourseStudent, (course_id, student_id))
        if enrollment is None:
            return False
        await self.session.delete(enrollment)
        await self._commit()
        return True
