"""
Sports Registration API - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Set testing environment
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-for-testing"

from app.main import app
from app.core.database import Base, get_db
from app.core.roles import AdminRole, CoordinatorRole
from app.core.security import create_access_token, hash_password
from app.models import Registration, Setting, SettingKey, Sport, Student, User

fake = Faker()

TEST_PASSWORD = "testpassword123"

# Test database setup
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Usuarios ─────────────────────────────────────────────────────────

async def _create_user(db: AsyncSession, role: str, is_active: bool = True) -> User:
    user = User(
        email=f"{fake.unique.user_name()}@college.edu",
        full_name=fake.name(),
        password_hash=hash_password(TEST_PASSWORD),
        role=role,
        is_active=is_active,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "admin")


@pytest.fixture
async def second_year_coordinator(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "second_year_coordinator")


@pytest.fixture
async def third_year_coordinator(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "third_year_coordinator")


def _headers(user: User) -> dict:
    token = create_access_token(user.id, user.email, user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return _headers(admin_user)


@pytest.fixture
def coordinator_headers(second_year_coordinator: User) -> dict:
    return _headers(second_year_coordinator)


@pytest.fixture
def third_year_headers(third_year_coordinator: User) -> dict:
    return _headers(third_year_coordinator)


@pytest.fixture
def admin_role() -> AdminRole:
    return AdminRole()


@pytest.fixture
def second_year_role() -> CoordinatorRole:
    return CoordinatorRole("second")


# ── Datos de dominio ─────────────────────────────────────────────────

@pytest.fixture
def make_student(db_session: AsyncSession):
    """Factory: crea y confirma un estudiante del año indicado."""
    async def _make(year: str = "second", **kwargs) -> Student:
        student = Student(
            name=kwargs.pop("name", fake.name()),
            roll_number=kwargs.pop("roll_number", fake.unique.bothify("R-####-??")),
            department=kwargs.pop("department", "Computer Science"),
            year=year,
            **kwargs,
        )
        db_session.add(student)
        await db_session.commit()
        return student

    return _make


@pytest.fixture
def make_sport(db_session: AsyncSession):
    """Factory: crea y confirma un deporte activo de la categoría indicada."""
    async def _make(category: str = "game", **kwargs) -> Sport:
        sport = Sport(
            name=kwargs.pop("name", f"{fake.unique.word().title()} {category}"),
            category=category,
            **kwargs,
        )
        db_session.add(sport)
        await db_session.commit()
        return sport

    return _make


@pytest.fixture
def make_registration(db_session: AsyncSession):
    """Factory: inscripción ya existente (por defecto pendiente)."""
    async def _make(student: Student, sport: Sport, status: str = "pending") -> Registration:
        registration = Registration(student_id=student.id, sport_id=sport.id, status=status)
        db_session.add(registration)
        await db_session.commit()
        return registration

    return _make


@pytest.fixture
def set_quota(db_session: AsyncSession):
    """Factory: guarda los cupos directamente en la tabla settings."""
    async def _set(game: int | None = 2, athletic: int | None = 2, auto_approve: bool = False) -> None:
        db_session.add_all([
            Setting(key=SettingKey.MAX_GAME_REGISTRATIONS, value={"limit": game}),
            Setting(key=SettingKey.MAX_ATHLETIC_REGISTRATIONS, value={"limit": athletic}),
            Setting(key=SettingKey.AUTO_APPROVE_REGISTRATIONS, value={"enabled": auto_approve}),
        ])
        await db_session.commit()

    return _set
