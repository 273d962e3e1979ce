import os
import tempfile

# Point the app at throwaway storage before anything imports devcamper
_UPLOAD_ROOT = tempfile.mkdtemp(prefix="devcamper-uploads-")
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["FILE_UPLOAD_PATH"] = _UPLOAD_ROOT

import pytest  # noqa: E402
from fastapi import Request  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import Session, SQLModel, create_engine  # noqa: E402

from devcamper.auth import CurrentUser, get_current_user  # noqa: E402
from devcamper.config import Settings, get_settings  # noqa: E402
from devcamper.database import get_session  # noqa: E402
from devcamper.main import app  # noqa: E402
from devcamper.models.bootcamp import Bootcamp  # noqa: E402
from devcamper.services.geocoder import GeoLocation, GeocoderError, get_geocoder  # noqa: E402

TEST_DATABASE_URL = "sqlite:///:memory:"

# In-memory SQLite with StaticPool so every session sees the same database
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

BOSTON = GeoLocation(
    latitude=42.3601,
    longitude=-71.0589,
    formatted_address="233 Bay State Rd, Boston, MA 02215, USA",
    street="233 Bay State Rd",
    city="Boston",
    state="MA",
    zipcode="02215",
    country="US",
)


class FakeGeocoder:
    """Resolves known queries from a dict; records every query it sees."""

    def __init__(self, locations=None, default=BOSTON):
        self.locations = dict(locations or {})
        self.default = default
        self.queries = []

    def geocode(self, query):
        self.queries.append(query)
        if query in self.locations:
            return [self.locations[query]]
        if self.default is None:
            raise GeocoderError(f"No location found for '{query}'")
        return [self.default]


def override_get_session():
    """Override session to use test engine"""
    with Session(test_engine) as session:
        yield session


def current_user_from_headers(request: Request) -> CurrentUser:
    """Stand-in for the upstream auth middleware: X-User-Id / X-User-Role headers."""
    user_id = request.headers.get("X-User-Id")
    if user_id is None:
        return get_current_user(request)
    return CurrentUser(id=int(user_id), role=request.headers.get("X-User-Role", "publisher"))


def auth(user_id, role="publisher"):
    return {"X-User-Id": str(user_id), "X-User-Role": role}


def bootcamp_payload(name="Devworks Bootcamp", **overrides):
    payload = {
        "name": name,
        "description": "Devworks is a full stack JavaScript Bootcamp located in the heart of Boston",
        "website": "https://devworks.com",
        "phone": "(111) 111-1111",
        "email": "enroll@devworks.com",
        "address": "233 Bay State Rd Boston MA 02215",
        "careers": ["Web Development", "UI/UX", "Business"],
        "housing": True,
        "job_assistance": True,
        "average_cost": 10000,
    }
    payload.update(overrides)
    return payload


@pytest.fixture(name="settings")
def settings_fixture(tmp_path):
    upload_dir = tmp_path / "uploads"
    upload_dir.mkdir()
    return Settings(
        database_url=TEST_DATABASE_URL,
        max_file_upload=1000,
        file_upload_path=str(upload_dir),
    )


@pytest.fixture(name="geocoder")
def geocoder_fixture():
    return FakeGeocoder()


@pytest.fixture(name="session", scope="function")
def session_fixture():
    """Provide a test database session with fresh tables"""
    SQLModel.metadata.drop_all(test_engine)
    SQLModel.metadata.create_all(test_engine)

    with Session(test_engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(session: Session, settings: Settings, geocoder: FakeGeocoder):
    """Provide a test client with database, settings, geocoder and auth overridden"""
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_geocoder] = lambda: geocoder
    app.dependency_overrides[get_current_user] = current_user_from_headers

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(name="make_bootcamp")
def make_bootcamp_fixture(session: Session):
    """Insert a bootcamp row directly, bypassing the API"""

    def _make(user_id=1, name="Devworks Bootcamp", **fields):
        values = {
            "user_id": user_id,
            "name": name,
            "slug": name.lower().replace(" ", "-"),
            "description": "A bootcamp",
            "careers": ["Web Development"],
            "latitude": BOSTON.latitude,
            "longitude": BOSTON.longitude,
        }
        values.update(fields)
        bootcamp = Bootcamp(**values)
        session.add(bootcamp)
        session.commit()
        session.refresh(bootcamp)
        return bootcamp

    return _make
