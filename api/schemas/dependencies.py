from typing import Annotated
from fastapi import Depends

from config import settings
from database.repository import CourseRepository
from database.session import SessionDep
from services.course import CourseService


def get_course_service(session: SessionDep):
    return CourseService(
        CourseRepository(session),
        ownership_required=settings.COURSE_OWNERSHIP_REQUIRED,
    )


CourseServiceDep = Annotated[CourseService, Depends(get_course_service)]
