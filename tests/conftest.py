"""Pytest configuration and fixtures."""
import os
import uuid
from datetime import date, datetime
from pathlib import Path

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

TEST_DB_PATH = Path("test_app.db")
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()

TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("REDIS_URL", "redis://localhost:6399/0")

from timedesk.main import app  # noqa: E402
from timedesk.database import Base, get_db  # noqa: E402
from timedesk.models.user import User, Role  # noqa: E402
from timedesk.models.employee import Employee  # noqa: E402
from timedesk.models.task import Task, TaskStatus, TaskType  # noqa: E402
from timedesk.core.context import ActorContext  # noqa: E402
from timedesk.services.auth_service import AuthService  # noqa: E402
from timedesk.utils.security import create_access_token  # noqa: E402
from timedesk.core.security import ROLE_PERMISSIONS  # noqa: E402


# Create test engine
test_engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = async_sessionmaker(
    test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


@pytest_asyncio.fixture(scope="function")
async def db_session():
    """Create a test database session."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="function")
def client(db_session: AsyncSession):
    """Create a test client overriding database dependency."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


async def _get_or_create_role(db: AsyncSession, name: str) -> Role:
    # Application startup may already have created the default roles.
    result = await db.execute(select(Role).where(Role.name == name))
    role = result.scalar_one_or_none()
    if role is None:
        role = Role(
            id=uuid.uuid4(),
            name=name,
            permissions=[perm.value for perm in ROLE_PERMISSIONS[name]],
            description=f"{name} role",
        )
        db.add(role)
        await db.commit()
        await db.refresh(role)
    return role


async def _create_user_with_profile(
    db: AsyncSession,
    *,
    email: str,
    full_name: str,
    role: Role,
    daily_hours: float = 8.0,
) -> User:
    user = User(
        id=uuid.uuid4(),
        email=email,
        password_hash=AuthService.hash_password("testpassword"),
        full_name=full_name,
        is_active=True,
    )
    user.roles = [role]
    db.add(user)
    await db.flush()
    db.add(
        Employee(
            id=uuid.uuid4(),
            user_id=user.id,
            full_name=full_name,
            email=email,
            department="engineering",
            position="Engineer",
            daily_hours=daily_hours,
        )
    )
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_admin_role(db_session: AsyncSession):
    """Admin role."""
    return await _get_or_create_role(db_session, "admin")


@pytest_asyncio.fixture
async def test_employee_role(db_session: AsyncSession):
    """Employee role."""
    return await _get_or_create_role(db_session, "employee")


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession, test_admin_role: Role):
    """Admin test user with an employee profile."""
    return await _create_user_with_profile(
        db_session, email="test@example.com", full_name="Test User", role=test_admin_role
    )


@pytest_asyncio.fixture
async def employee_user(db_session: AsyncSession, test_employee_role: Role):
    """Regular employee account."""
    return await _create_user_with_profile(
        db_session, email="worker@example.com", full_name="Worker", role=test_employee_role
    )


@pytest_asyncio.fixture
async def employee_profile(db_session: AsyncSession, employee_user: User) -> Employee:
    result = await db_session.execute(select(Employee).where(Employee.user_id == employee_user.id))
    return result.scalar_one()


@pytest.fixture
def actor(employee_user: User, employee_profile: Employee) -> ActorContext:
    """Actor context for the regular employee."""
    return ActorContext(user=employee_user, employee=employee_profile)


@pytest_asyncio.fixture
async def make_task(db_session: AsyncSession):
    """Factory for tasks."""

    async def _make(
        assignee: Employee = None,
        *,
        title: str = "Write report",
        status: TaskStatus = TaskStatus.PENDING,
        task_type: TaskType = TaskType.REGULAR,
        start_date: date = None,
        due_date: date = None,
        archived: bool = False,
        completed_at: datetime = None,
    ) -> Task:
        task = Task(
            id=uuid.uuid4(),
            title=title,
            assignee_id=assignee.id if assignee else None,
            status=status,
            task_type=task_type,
            start_date=start_date,
            due_date=due_date,
            archived=archived,
            completed_at=completed_at,
        )
        db_session.add(task)
        await db_session.commit()
        await db_session.refresh(task)
        return task

    return _make


@pytest.fixture
def auth_headers(client, test_user):
    """Get authentication headers."""
    token = create_access_token(
        {"sub": str(test_user.id), "email": test_user.email}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def employee_headers(client, employee_user):
    """Authentication headers for the regular employee."""
    token = create_access_token(
        {"sub": str(employee_user.id), "email": employee_user.email}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def session_factory(db_session):
    """Factory for extra sessions on the test database."""
    return TestSessionLocal


@pytest_asyncio.fixture
async def profileless_headers(client, db_session: AsyncSession, test_employee_role: Role):
    """Authentication headers for an account without an employee profile."""
    user = User(
        id=uuid.uuid4(),
        email="no.profile@example.com",
        password_hash=AuthService.hash_password("testpassword"),
        full_name="No Profile",
        is_active=True,
    )
    user.roles = [test_employee_role]
    db_session.add(user)
    await db_session.commit()
    token = create_access_token({"sub": str(user.id), "email": user.email})
    return {"Authorization": f"Bearer {token}"}
