import os
import tempfile
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

# Ensure tests always use SQLite to avoid requiring Postgres drivers
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_jobboard.db")

from app import crud, models
from app.database import Base, get_db
from app.main import app
from app.token import create_access_token


@pytest.fixture(scope="session")
def test_db_url():
    # Use a temporary SQLite file to persist across tests within a session
    db_fd, db_path = tempfile.mkstemp(prefix="test_jobboard_", suffix=".db")
    os.close(db_fd)
    url = f"sqlite:///{db_path}"
    yield url
    try:
        os.remove(db_path)
    except FileNotFoundError:
        pass


@pytest.fixture()
def db_session(test_db_url):
    engine = create_engine(test_db_url, connect_args={"check_same_thread": False})
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
    # Ensure file handles are released on Windows
    engine.dispose()


@pytest.fixture()
def client(db_session):
    # Override the dependency to use the test session
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _make_user(db, username: str, role: str = "user", password: str = "password123") -> models.User:
    return crud.create_user(db, f"{username}@example.com", username, password, role=role).value


def _headers(user: models.User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=str(user.id), role=user.role)}"}


@pytest.fixture()
def admin_user(db_session):
    return _make_user(db_session, "admin", role="Admin")


@pytest.fixture()
def member_user(db_session):
    return _make_user(db_session, "member")


@pytest.fixture()
def admin_headers(admin_user):
    return _headers(admin_user)


@pytest.fixture()
def member_headers(member_user):
    return _headers(member_user)


@pytest.fixture()
def make_user(db_session):
    return lambda username, role="user": _make_user(db_session, username, role)


@pytest.fixture()
def headers_for():
    return _headers


@pytest.fixture()
def category(db_session):
    return crud.create_category(db_session, "Engineering").value


@pytest.fixture()
def level(db_session):
    return crud.create_level(db_session, "Senior").value


@pytest.fixture()
def company(db_session):
    return crud.create_company(db_session, "Acme Robotics")


@pytest.fixture()
def job_payload(category, level, company):
    return {
        "title": "Backend Engineer",
        "levelId": level.id,
        "categoryId": category.id,
        "typeId": 1,
        "location": "Beirut",
        "description": "Build and run the jobs API.",
        "compensation": "Competitive",
        "applicationLink": "https://example.com/apply",
        "isExternal": False,
        "companyId": str(company.id),
        "tags": "python,fastapi",
    }


@pytest.fixture()
def make_job(db_session, category, level, company):
    def _make(title: str = "Backend Engineer", approved: bool = True, **overrides) -> models.Job:
        data = {
            "title": title,
            "level_id": level.id,
            "category_id": category.id,
            "description": "Build and run the jobs API.",
            "company_id": company.id,
        }
        data.update(overrides)
        return crud.create_job(db_session, data, approved=approved).value

    return _make
