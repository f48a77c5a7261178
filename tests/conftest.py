"""
Alumni Network - Test Configuration and Fixtures
"""
import os
import pytest

# Set testing environment before the app reads its configuration
os.environ['DATABASE_URL'] = 'sqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['LOG_LEVEL'] = 'WARNING'

from fastapi.testclient import TestClient

from alumni_server.main import app
from alumni_server.database import engine, SessionLocal
from alumni_server.models import Base
from alumni_server.core import identity
from alumni_server.core.security import AuthContext, create_access_token


@pytest.fixture(scope='session', autouse=True)
def cleanup_database_file():
    yield
    engine.dispose()
    if os.path.exists('./test.db'):
        os.remove('./test.db')


@pytest.fixture(scope='function')
def db():
    """Fresh schema and session for each test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db) -> TestClient:
    with TestClient(app) as c:
        yield c


def make_user(db, username, admin=False, password='password123'):
    create = identity.create_admin if admin else identity.register
    return create(db, username, f'{username}@example.com', username.title(), 'Tester', password)


def ctx_for(user) -> AuthContext:
    return AuthContext(user_id=user.id, role=user.usertype)


def headers_for(user) -> dict:
    return {'Authorization': f'Bearer {create_access_token(user.id)}'}


@pytest.fixture
def alice(db):
    return make_user(db, 'alice')


@pytest.fixture
def bob(db):
    return make_user(db, 'bob')


@pytest.fixture
def admin(db):
    return make_user(db, 'admin', admin=True)
