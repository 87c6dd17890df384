import os
import tempfile
from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

TEST_DATABASE_URL = os.getenv(
    'TEST_DATABASE_URL',
    f"sqlite+pysqlite:///{os.path.join(tempfile.gettempdir(), 'organization-subscriptions-test.db')}",
)

os.environ.setdefault('DATABASE_URL', TEST_DATABASE_URL)
os.environ.setdefault('JWT_SECRET_KEY', 'test-access-secret-32-chars-min-0001')
os.environ.setdefault('APP_ENV', 'test')
os.environ.setdefault('CORS_ORIGINS', 'http://localhost:3001')
os.environ.setdefault('SEED_PUBLIC_PLANS', 'true')

from app.api.deps import get_clock
from app.core.security import create_access_token
from app.db.base import Base
from app.db.session import engine, get_db
from app.main import app
from app.models.organization import Organization
from app.models.plan import Plan
from app.services.plan_store import PlanStore


TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class FixedClock:
    def __init__(self, current: datetime) -> None:
        self.current = current

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    yield

    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture()
def client(db_session: Session, clock: FixedClock) -> Generator[TestClient, None, None]:
    def _override_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[get_clock] = lambda: clock

    with TestClient(app) as api_client:
        yield api_client

    app.dependency_overrides.clear()


def make_organization(db: Session, name: str = 'Acme', admin_uid: str = 'acme-admin') -> Organization:
    organization = Organization(name=name, admin_uid=admin_uid)
    db.add(organization)
    db.flush()
    return organization


def make_plan(db: Session, name: str = 'Pro', *, is_public: bool = True, max_members: int = 5) -> Plan:
    return PlanStore.create(
        db,
        name=name,
        max_members=max_members,
        max_projects=2,
        shared_storage_per_project=100,
        private_storage_per_user=200,
        price=None,
        currency='EUR',
        is_public=is_public,
    )


def admin_headers(user_id: str = 'platform-admin') -> dict[str, str]:
    return {'Authorization': f'Bearer {create_access_token(user_id, is_admin=True)}'}


def member_headers(organization_id: int, user_id: str = 'org-user') -> dict[str, str]:
    token = create_access_token(user_id, organization_id=organization_id)
    return {'Authorization': f'Bearer {token}'}
