from typing import Union
from uuid import UUID
import logging

from sqlalchemy.exc import SQLAlchemyError

from api.schemas.course import CourseCreate, CourseUpdate
from api.schemas.user import Actor
from database.models import Course
from database.repository import CourseRepository
from services.exceptions import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    ForbiddenError,
    InternalServiceError,
    InvalidIdentifierError,
    NotEnrolledError,
)

logger = logging.getLogger(__name__)


def parse_identifier(value: Union[str, UUID]) -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise InvalidIdentifierError()


class CourseService:
    """Business rules for the course aggregate: who may create, change and
    delete courses, and who may join or leave them.

    Identifiers are checked before the repository is touched. Unexpected
    database failures are logged and reported as InternalServiceError.
    """

    def __init__(self, repository: CourseRepository, ownership_required: bool = False):
        self.repository = repository
        self.ownership_required = ownership_required

    async def _get_or_404(self, course_id: UUID, refresh: bool = False) -> Course:
        course = await self.repository.find_by_id(course_id, refresh=refresh)
        if course is None:
            raise CourseNotFoundError()
        return course

    def _check_owner(self, actor: Actor, course: Course) -> None:
        if self.ownership_required and course.instructor_id != actor.id:
            raise ForbiddenError("Only the course instructor can modify this course")

    # Get all courses
    async def list_courses(self) -> list[Course]:
        try:
            return await self.repository.find_all()
        except SQLAlchemyError:
            logger.exception("Error listing courses")
            raise InternalServiceError()

    # Get a course by id
    async def get_course(self, course_id: Union[str, UUID]) -> Course:
        course_uuid = parse_identifier(course_id)
        try:
            return await self._get_or_404(course_uuid)
        except SQLAlchemyError:
            logger.exception(f"Error fetching course {course_uuid}")
            raise InternalServiceError()

    # Create a course owned by the calling instructor
    async def create_course(self, actor: Actor, fields: CourseCreate) -> Course:
        if not actor.is_instructor:
            raise ForbiddenError()

        course = Course(**fields.model_dump(), instructor_id=actor.id)
        try:
            course = await self.repository.create(course)
        except SQLAlchemyError:
            logger.exception("Error creating a course")
            raise InternalServiceError()

        logger.info(f"Course {course.id} created by instructor {actor.id}")
        return course

    async def enroll_student(self, actor: Actor, course_id: Union[str, UUID]) -> Course:
        if not actor.is_student:
            raise ForbiddenError("Only students can enroll in courses")
        course_uuid = parse_identifier(course_id)

        try:
            course = await self._get_or_404(course_uuid)
            if actor.id in course.student_ids:
                raise AlreadyEnrolledError()

            # The insert is the real membership check, it also catches concurrent enrollments
            if not await self.repository.add_student(course_uuid, actor.id):
                raise AlreadyEnrolledError()

            course = await self._get_or_404(course_uuid, refresh=True)
        except SQLAlchemyError:
            logger.exception(f"Error enrolling student {actor.id} in course {course_uuid}")
            raise InternalServiceError()

        logger.info(f"Student {actor.id} enrolled in course {course_uuid}")
        return course

    async def update_course(self, actor: Actor, course_id: Union[str, UUID], fields: CourseUpdate) -> Course:
        if not actor.is_instructor:
            raise ForbiddenError()
        course_uuid = parse_identifier(course_id)

        changes = fields.model_dump(exclude_unset=True)
        # title is required, an explicit null leaves it untouched
        if changes.get("title", "") is None:
            del changes["title"]

        try:
            course = await self._get_or_404(course_uuid)
            self._check_owner(actor, course)
            course = await self.repository.update(course, changes)
        except SQLAlchemyError:
            logger.exception(f"Error updating course {course_uuid}")
            raise InternalServiceError()

        logger.info(f"Course {course_uuid} updated by instructor {actor.id}: {sorted(changes)}")
        return course

    async def delete_course(self, actor: Actor, course_id: Union[str, UUID]) -> str:
        if not actor.is_instructor:
            raise ForbiddenError()
        course_uuid = parse_identifier(course_id)

        try:
            course = await self._get_or_404(course_uuid)
            self._check_owner(actor, course)
            await self.repository.delete(course)
        except SQLAlchemyError:
            logger.exception(f"Error deleting course {course_uuid}")
            raise InternalServiceError()

        logger.info(f"Course {course_uuid} deleted by instructor {actor.id}")
        return "Course deleted successfully"

    async def remove_student(
        self, actor: Actor, course_id: Union[str, UUID], student_id: Union[str, UUID]
    ) -> Course:
        course_uuid = parse_identifier(course_id)
        student_uuid = parse_identifier(student_id)

        # Instructors may remove anyone, students only themselves
        if not (actor.is_instructor or (actor.is_student and actor.id == student_uuid)):
            raise ForbiddenError()

        try:
            course = await self._get_or_404(course_uuid)
            if student_uuid not in course.student_ids:
                raise NotEnrolledError()

            if not await self.repository.remove_student(course_uuid, student_uuid):
                raise NotEnrolledError()

            course = await self._get_or_404(course_uuid, refresh=True)
        except SQLAlchemyError:
            logger.exception(f"Error removing student {student_uuid} from course {course_uuid}")
            raise InternalServiceError()

        logger.info(f"Student {student_uuid} removed from course {course_uuid} by {actor.role.value} {actor.id}")
        return course
