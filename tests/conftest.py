import os
import tempfile
from pathlib import Path

_tmpdir = Path(tempfile.mkdtemp(prefix="senda_test_"))
_db_path = _tmpdir / "test.db"

os.environ.setdefault("DATABASE_URL", f"sqlite:///{_db_path.as_posix()}")
os.environ.setdefault("APP_SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", str(_tmpdir / "logs"))
os.environ.setdefault("UPLOADS_DIR", str(_tmpdir / "uploads"))
os.environ.setdefault("ORS_API_KEY", "test-ors-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import func, select

import app.models  # noqa: F401  (registers tables on Base.metadata)
from app.core.security import create_access_token
from app.db import crud
from app.db.base import Base
from app.db.session import engine, SessionLocal
from app.main import create_app
from app.models.enums import Difficulty, RouteSource, UserRole
from app.parsers.ors_directions import get_ors_client
from app.services.slug import slugify


def ors_payload(coords=None, *, distance=12345.0, ascent=456.4):
    """A GeoJSON directions answer shaped like the ORS one."""

    if coords is None:
        coords = [
            [-4.80011, 43.05012, 1200.4],
            [-4.80320, 43.05540, 1250.5],
            [-4.81002, 43.06011, 1311.0],
            [-4.81555, 43.06470, 1298.6],
        ]
    summary = {}
    if distance is not None:
        summary["distance"] = distance
    if ascent is not None:
        summary["ascent"] = ascent
    return {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {"summary": summary},
                "geometry": {"type": "LineString", "coordinates": coords},
            }
        ],
    }


class FakeOrsClient:
    """Stands in for OrsDirectionsClient; records every call."""

    def __init__(self, payload=None, error=None):
        self.payload = payload if payload is not None else ors_payload()
        self.error = error
        self.calls = []

    async def fetch_directions(self, **coords):
        self.calls.append(coords)
        if self.error is not None:
            raise self.error
        return self.payload


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def headers_for(user) -> dict[str, str]:
    return auth_header(create_access_token(user.id, role=user.role))


def count_rows(db, model, *criteria) -> int:
    stmt = select(func.count()).select_from(model)
    if criteria:
        stmt = stmt.where(*criteria)
    return int(db.scalar(stmt) or 0)


@pytest.fixture()
def clean_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db(clean_db):
    session = SessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def fake_ors():
    return FakeOrsClient()


@pytest.fixture()
def client(clean_db, fake_ors):
    application = create_app()
    application.dependency_overrides[get_ors_client] = lambda: fake_ors
    with TestClient(application) as c:
        yield c


@pytest.fixture()
def make_user(db):
    counter = {"n": 0}

    def _make(name: str | None = None, *, role: str = UserRole.user.value, email: str | None = None):
        counter["n"] += 1
        name = name or f"Hiker {counter['n']}"
        email = email or f"hiker{counter['n']}@example.com"
        return crud.create_user(db, name=name, email=email, password_hash="not-a-real-hash", role=role)

    return _make


@pytest.fixture()
def user(make_user):
    return make_user("Lucia")


@pytest.fixture()
def admin(make_user):
    return make_user("Admin", role=UserRole.admin.value)


@pytest.fixture()
def make_route(db):
    def _make(title: str, *, difficulty: str = Difficulty.moderate.value, description: str | None = None, **fields):
        return crud.create_route(
            db,
            title=title,
            slug=slugify(title),
            difficulty=difficulty,
            description=description,
            source=fields.pop("source", RouteSource.manual.value),
            **fields,
        )

    return _make
