from fastapi import APIRouter, status

from api.auth import ActorDep
from api.schemas.course import CourseCreate, CourseGet, CourseMessage, CourseUpdate, Message
from api.schemas.dependencies import CourseServiceDep

router = APIRouter(prefix="/courses", tags=["courses"])


@router.get("", response_model=list[CourseGet])
async def get_courses(service: CourseServiceDep):
    """Get all courses"""
    courses = await service.list_courses()
    return [CourseGet.from_course(course) for course in courses]


@router.get("/{course_id}", response_model=CourseGet)
async def get_course(course_id: str, service: CourseServiceDep):
    """Get course by ID"""
    course = await service.get_course(course_id)
    return CourseGet.from_course(course)


@router.post("", response_model=CourseMessage, status_code=status.HTTP_201_CREATED)
async def create_course(course: CourseCreate, actor: ActorDep, service: CourseServiceDep):
    """Create a new course (instructors only)"""
    created_course = await service.create_course(actor, course)
    return CourseMessage(
        message="Course created successfully",
        course=CourseGet.from_course(created_course),
    )


@router.post("/{course_id}/enroll", response_model=CourseMessage, status_code=status.HTTP_201_CREATED)
async def enroll_student(course_id: str, actor: ActorDep, service: CourseServiceDep):
    """Enroll the calling student in a course"""
    course = await service.enroll_student(actor, course_id)
    return CourseMessage(
        message="Enrolled successfully",
        course=CourseGet.from_course(course),
    )


@router.patch("/{course_id}", response_model=CourseMessage)
async def update_course(course_id: str, fields: CourseUpdate, actor: ActorDep, service: CourseServiceDep):
    """
    Update a course (instructors only).
    - Only title, description, duration and price can be changed.
    - Fields missing from the body keep their current value.
    """
    course = await service.update_course(actor, course_id, fields)
    return CourseMessage(
        message="Course updated successfully",
        course=CourseGet.from_course(course),
    )


@router.delete("/{course_id}", response_model=Message)
async def delete_course(course_id: str, actor: ActorDep, service: CourseServiceDep):
    """Delete a course (instructors only)"""
    message = await service.delete_course(actor, course_id)
    return Message(message=message)


@router.delete("/{course_id}/students/{student_id}", response_model=CourseMessage)
async def remove_student(course_id: str, student_id: str, actor: ActorDep, service: CourseServiceDep):
    """Remove a student from a course (instructors, or the student themself)"""
    course = await service.remove_student(actor, course_id, student_id)
    return CourseMessage(
        message="Student removed successfully",
        course=CourseGet.from_course(course),
    )
