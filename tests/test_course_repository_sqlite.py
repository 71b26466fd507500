"""CourseRepository and CourseService against a real database engine.

SQLite stands in for Postgres here: the loading strategy, identity-map refresh,
cascade and composite-key behaviour under test all live in the ORM layer.
"""

from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession

from api.schemas.course import CourseCreate, CourseUpdate
from database.models import Course, CourseStudent
from database.repository import CourseRepository
from services.course import CourseService
from services.exceptions import AlreadyEnrolledError, NotEnrolledError


@pytest_asyncio.fixture
async def session_maker(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'courses.db'}")
    async with engine.begin() as connection:
        await connection.run_sync(SQLModel.metadata.create_all)

    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


async def count_enrollments(session_maker) -> int:
    async with session_maker() as session:
        result = await session.exec(select(CourseStudent))
        return len(result.all())


class TestRepository:
    @pytest.mark.asyncio
    async def test_create_and_find(self, session):
        repo = CourseRepository(session)
        course = await repo.create(Course(title="Algebra", price=10, instructor_id=uuid4()))

        found = await repo.find_by_id(course.id)

        assert found is not None
        assert found.title == "Algebra"
        assert found.student_ids == []
        assert [c.id for c in await repo.find_all()] == [course.id]

    @pytest.mark.asyncio
    async def test_enrollments_loaded_in_fresh_session(self, session_maker):
        student_id = uuid4()
        async with session_maker() as session:
            repo = CourseRepository(session)
            course = await repo.create(Course(title="Algebra", instructor_id=uuid4()))
            assert await repo.add_student(course.id, student_id) is True

        async with session_maker() as session:
            courses = await CourseRepository(session).find_all()

        # Read after the session closed: enrollments must already be loaded
        assert courses[0].student_ids == [student_id]

    @pytest.mark.asyncio
    async def test_refresh_picks_up_membership_changes(self, session):
        repo = CourseRepository(session)
        course = await repo.create(Course(title="Algebra", instructor_id=uuid4()))
        first, second = uuid4(), uuid4()

        await repo.add_student(course.id, first)
        await repo.add_student(course.id, second)
        course = await repo.find_by_id(course.id, refresh=True)
        assert course.student_ids == [first, second]

        assert await repo.remove_student(course.id, first) is True
        course = await repo.find_by_id(course.id, refresh=True)
        assert course.student_ids == [second]

        assert await repo.remove_student(course.id, first) is False

    @pytest.mark.asyncio
    async def test_duplicate_enrollment_returns_false(self, session_maker):
        student_id = uuid4()
        async with session_maker() as session:
            repo = CourseRepository(session)
            course = await repo.create(Course(title="Algebra", instructor_id=uuid4()))
            assert await repo.add_student(course.id, student_id) is True

        async with session_maker() as session:
            repo = CourseRepository(session)
            assert await repo.add_student(course.id, student_id) is False

            # The session is usable again after the rollback
            course = await repo.find_by_id(course.id, refresh=True)
            assert course.student_ids == [student_id]

    @pytest.mark.asyncio
    async def test_concurrent_enrollment_only_one_wins(self, session_maker):
        student_id = uuid4()
        async with session_maker() as setup:
            course = await CourseRepository(setup).create(Course(title="Algebra", instructor_id=uuid4()))

        async with session_maker() as first, session_maker() as second:
            first_repo, second_repo = CourseRepository(first), CourseRepository(second)

            # Both requests pass the read-side membership check before either inserts
            assert (await first_repo.find_by_id(course.id)).student_ids == []
            assert (await second_repo.find_by_id(course.id)).student_ids == []

            assert await first_repo.add_student(course.id, student_id) is True
            assert await second_repo.add_student(course.id, student_id) is False

        assert await count_enrollments(session_maker) == 1

    @pytest.mark.asyncio
    async def test_delete_removes_enrollments(self, session_maker):
        async with session_maker() as session:
            repo = CourseRepository(session)
            course = await repo.create(Course(title="Algebra", instructor_id=uuid4()))
            await repo.add_student(course.id, uuid4())
            await repo.add_student(course.id, uuid4())
            course = await repo.find_by_id(course.id, refresh=True)

            await repo.delete(course)

            assert await repo.find_by_id(course.id) is None

        assert await count_enrollments(session_maker) == 0


class TestServiceScenario:
    @pytest.mark.asyncio
    async def test_full_lifecycle(self, session, session_maker, instructor, student, other_student):
        service = CourseService(CourseRepository(session))

        course = await service.create_course(instructor, CourseCreate(title="Algebra", price=10))
        assert course.student_ids == []
        assert course.instructor_id == instructor.id

        course = await service.enroll_student(student, course.id)
        assert course.student_ids == [student.id]

        with pytest.raises(AlreadyEnrolledError):
            await service.enroll_student(student, course.id)

        course = await service.enroll_student(other_student, course.id)
        assert course.student_ids == [student.id, other_student.id]

        course = await service.update_course(instructor, course.id, CourseUpdate(description="Linear equations"))
        assert course.description == "Linear equations"
        assert course.student_ids == [student.id, other_student.id]

        course = await service.remove_student(instructor, course.id, student.id)
        assert course.student_ids == [other_student.id]

        with pytest.raises(NotEnrolledError):
            await service.remove_student(instructor, course.id, student.id)

        await service.delete_course(instructor, course.id)
        assert await service.list_courses() == []
        assert await count_enrollments(session_maker) == 0
