import os
import tempfile
from datetime import date, time
from typing import AsyncGenerator, Dict, Optional

_TMP_DIR = tempfile.mkdtemp(prefix="academic-reporting-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_TMP_DIR, 'import.db')}"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["REPORTS_DIR"] = os.path.join(_TMP_DIR, "reports")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from academic_reporting.auth.models import User  # noqa: E402
from academic_reporting.auth.security import create_access_token, hash_password  # noqa: E402
from academic_reporting.core.enums import UserRole  # noqa: E402
from academic_reporting.core.models import (  # noqa: E402
    ClassCourse,
    Course,
    Enrollment,
    Faculty,
    LecturerClass,
    LecturerCourse,
    LecturerPRL,
    PrincipalLecturerFaculty,
    Report,
    SchoolClass,
    StudentClass,
    Venue,
)
from academic_reporting.db.session import Base, get_db  # noqa: E402
from academic_reporting.main import app  # noqa: E402

DEFAULT_PASSWORD = "Passw0rd!"


@pytest.fixture()
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh file-backed SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False, future=True)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture()
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app, one DB session per request."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class Seeder:
    """Inserts rows straight through the ORM and mints tokens for seeded users."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self._counter = 0

    async def add(self, *objs):
        self.session.add_all(objs)
        await self.session.commit()
        return objs[0] if len(objs) == 1 else objs

    async def user(
        self,
        role: UserRole,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        self._counter += 1
        full_name = full_name or f"{role.value} {self._counter}"
        email = email or f"user{self._counter}@example.com"
        return await self.add(
            User(full_name=full_name, email=email, password_hash=hash_password(password), role=role.value)
        )

    async def faculty(self, name: str = "Faculty of ICT") -> Faculty:
        return await self.add(Faculty(name=name))

    async def course(self, name: str, faculty: Faculty, code: Optional[str] = None, total: int = 0) -> Course:
        return await self.add(
            Course(name=name, faculty_id=faculty.id, code=code, total_registered_students=total)
        )

    async def school_class(self, name: str) -> SchoolClass:
        return await self.add(SchoolClass(name=name))

    async def venue(self, name: str = "Hall 1", capacity: Optional[int] = 100) -> Venue:
        return await self.add(Venue(name=name, capacity=capacity))

    async def prl_faculty(self, prl: User, faculty: Faculty) -> None:
        await self.add(PrincipalLecturerFaculty(prl_id=prl.id, faculty_id=faculty.id))

    async def class_course(self, cl: SchoolClass, course: Course) -> None:
        await self.add(ClassCourse(class_id=cl.id, course_id=course.id))

    async def lecturer_class(self, lecturer: User, cl: SchoolClass) -> None:
        await self.add(LecturerClass(lecturer_id=lecturer.id, class_id=cl.id))

    async def lecturer_course(self, lecturer: User, course: Course) -> None:
        await self.add(LecturerCourse(lecturer_id=lecturer.id, course_id=course.id))

    async def lecturer_prl(self, lecturer: User, prl: User) -> None:
        await self.add(LecturerPRL(lecturer_id=lecturer.id, prl_id=prl.id))

    async def student_class(self, student: User, cl: SchoolClass, faculty: Optional[Faculty] = None) -> None:
        await self.add(
            StudentClass(student_id=student.id, class_id=cl.id, faculty_id=faculty.id if faculty else None)
        )

    async def enrollment(self, student: User, course: Course) -> None:
        await self.add(Enrollment(student_id=student.id, course_id=course.id))

    async def report(
        self,
        lecturer: User,
        cl: SchoolClass,
        course: Course,
        venue: Venue,
        *,
        week: int = 1,
        actual: int = 0,
        total: int = 30,
        lecture_date: date = date(2024, 3, 4),
    ) -> Report:
        return await self.add(
            Report(
                lecturer_id=lecturer.id,
                class_id=cl.id,
                course_id=course.id,
                venue_id=venue.id,
                week_of_reporting=week,
                date_of_lecture=lecture_date,
                scheduled_lecture_time=time(9, 0),
                actual_students_present=actual,
                total_registered_students=total,
                topic_taught="Intro",
                learning_outcomes="Basics",
            )
        )

    @staticmethod
    def headers(user: User) -> Dict[str, str]:
        token = create_access_token(subject={"id": user.id, "role": user.role, "fullName": user.full_name})
        return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
async def seed(db_session: AsyncSession) -> Seeder:
    return Seeder(db_session)
