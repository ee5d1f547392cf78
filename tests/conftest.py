"""
Test configuration and fixtures.
Each test gets its own SQLite database file.
"""
import os
import tempfile
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

# Configure the app before it is imported
_test_dir = tempfile.mkdtemp(prefix="idcards-tests-")
os.environ['DATABASE_URL'] = f"sqlite:///{_test_dir}/app.db"
os.environ['SEED_DATABASE'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['JWT_SECRET'] = 'test-jwt-secret-for-testing-only'
os.environ['LOG_LEVEL'] = 'WARNING'

from app.main import app
from app.core.auth import AuthUtils
from app.core.database import Base, build_engine, get_db
from app.models import User


@pytest.fixture
def engine(tmp_path):
    """Fresh database with all tables"""
    test_engine = build_engine(f"sqlite:///{tmp_path}/test.db")
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    """Test client whose requests each open a session on the test database"""
    def override_get_db():
        session = session_factory()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def operator(db_session: Session) -> User:
    """Create a superuser operator"""
    user = User(
        username="registrar",
        email="registrar@example.edu",
        name="Registrar",
        hashed_password=AuthUtils.hash_password("registrar-pass"),
        superuser=True,
        is_active=True
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(operator: User) -> dict:
    token = AuthUtils.create_access_token({"sub": operator.username, "user_id": operator.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def college(client, auth_headers) -> dict:
    response = client.post(
        "/api/colleges/",
        json={"name_en": "Faculty of Engineering", "name_ar": "كلية الهندسة", "code": "ENG"},
        headers=auth_headers
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def department(client, auth_headers, college) -> dict:
    response = client.post(
        "/api/departments/",
        json={
            "college_id": college["id"],
            "name_en": "Mechanical Engineering",
            "name_ar": "الهندسة الميكانيكية",
            "code": "ME"
        },
        headers=auth_headers
    )
    assert response.status_code == 201
    return response.json()
