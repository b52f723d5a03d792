"""Test configuration."""
import os
from collections.abc import AsyncIterator, Callable, Iterator
from pathlib import Path
from uuid import uuid4

from alembic import command
from alembic.config import Config
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.engine import Connection
from sqlalchemy.orm import Session, sessionmaker

# --- Default env, set before the app reads its settings
os.environ.setdefault("DATABASE_URL", "sqlite:///./petshelter_test.db")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789abcdef0123456789")
os.environ.setdefault("MONITOR_ENABLED", "0")

from petshelter.main import app  # noqa: E402
from petshelter.db import build_engine, get_db  # noqa: E402
from petshelter.models import User, UserRole  # noqa: E402
from petshelter.security import create_access_token, hash_password  # noqa: E402

DB_PATH = Path("./petshelter_test.db")
TEST_PASSWORD = "secret-pass"
TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


def _run_migrations() -> None:
    cfg = Config(str(Path(__file__).resolve().parents[1] / "alembic.ini"))
    cfg.set_main_option("script_location", str(Path(__file__).resolve().parents[1] / "alembic"))
    cfg.set_main_option("sqlalchemy.url", os.environ["DATABASE_URL"])
    command.upgrade(cfg, "head")


# --- (1) Fresh database file for the session, schema built by Alembic only
if DB_PATH.exists():
    DB_PATH.unlink()
_run_migrations()

engine = build_engine(os.environ["DATABASE_URL"])
# Commits and rollbacks in code under test only touch a savepoint of the test transaction.
TestingSessionLocal = sessionmaker(
    autoflush=False,
    autocommit=False,
    future=True,
    expire_on_commit=False,
    join_transaction_mode="create_savepoint",
)


@pytest.fixture
def connection() -> Iterator[Connection]:
    conn = engine.connect()
    transaction = conn.begin()
    try:
        yield conn
    finally:
        if transaction.is_active:
            transaction.rollback()
        conn.close()


@pytest.fixture
def db_session(connection: Connection) -> Iterator[Session]:
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def session_factory(connection: Connection) -> Callable[[], Session]:
    """Factory handing out extra sessions that see the test transaction."""

    return lambda: TestingSessionLocal(bind=connection)


@pytest.fixture(autouse=True)
def override_db_dependency(db_session: Session) -> Iterator[None]:
    def _get_db() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    yield
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    def _factory(
        *,
        name: str = "Test User",
        city: str = "Cluj",
        age: int = 30,
        role: UserRole = UserRole.REGULAR,
        email: str | None = None,
    ) -> User:
        user = User(
            name=name,
            email=email or f"user-{uuid4().hex[:10]}@example.com",
            phone="0744123456",
            city=city,
            age=age,
            password_hash=TEST_PASSWORD_HASH,
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _factory


def headers_for(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def regular_user(make_user: Callable[..., User]) -> User:
    return make_user(name="Regular Rita")


@pytest.fixture
def admin_user(make_user: Callable[..., User]) -> User:
    return make_user(name="Admin Ada", role=UserRole.ADMIN)


@pytest.fixture
def user_headers(regular_user: User) -> dict[str, str]:
    return headers_for(regular_user)


@pytest.fixture
def admin_headers(admin_user: User) -> dict[str, str]:
    return headers_for(admin_user)


@pytest.fixture
def auth_headers_for() -> Callable[[User], dict[str, str]]:
    return headers_for
