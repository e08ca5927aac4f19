import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


# Ensure `import backend.app...` works regardless of where pytest is run from.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Must be set before anything imports backend.app.config, including test modules at collection time.
_TMP_ROOT = Path(tempfile.mkdtemp(prefix="marketplace-tests-"))
os.environ["DISABLE_DOTENV"] = "1"
os.environ["DATABASE_URL"] = f"sqlite+pysqlite:///{_TMP_ROOT / 'bootstrap.sqlite3'}"
os.environ["UPLOAD_DIR"] = str(_TMP_ROOT / "uploads")
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("db") / "test.sqlite3"


@pytest.fixture(scope="session")
def upload_dir() -> Path:
    from backend.app.config import UPLOAD_DIR

    return Path(UPLOAD_DIR)


@pytest.fixture()
def app(test_db_path: Path, upload_dir: Path) -> FastAPI:
    """
    Create a FastAPI app wired to a temporary SQLite DB.

    Routers are mounted on a fresh app rather than importing `app.main`, so the
    startup hook never touches the developer database.
    """
    from backend.app import database as db

    engine = create_engine(
        f"sqlite+pysqlite:///{test_db_path}",
        connect_args={"check_same_thread": False},
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    # Patch the shared database module so router dependencies use the test DB.
    db.engine = engine
    db.SessionLocal = TestingSessionLocal

    # Import models so Base metadata is populated, then create tables.
    from backend.app.models import job, proposal, user  # noqa: F401

    db.Base.metadata.drop_all(bind=engine)
    db.Base.metadata.create_all(bind=engine)

    from fastapi.staticfiles import StaticFiles

    from backend.app.api import auth as auth_api
    from backend.app.api import jobs as jobs_api
    from backend.app.api import profile as profile_api
    from backend.app.api import proposals as proposals_api
    from backend.app.api import users as users_api
    from backend.app.utils.error_handlers import register_error_handlers

    fastapi_app = FastAPI()
    register_error_handlers(fastapi_app)
    for router in (auth_api.router, users_api.router, jobs_api.router, proposals_api.router, profile_api.router):
        fastapi_app.include_router(router, prefix="/api")

    upload_dir.mkdir(parents=True, exist_ok=True)
    fastapi_app.mount("/uploads", StaticFiles(directory=str(upload_dir)), name="uploads")

    return fastapi_app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture()
def db_session(app: FastAPI):
    """
    Direct SQLAlchemy session bound to the same temporary SQLite DB used by the test app.
    """
    from backend.app.database import SessionLocal

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


PASSWORD = "Testpass123!"


def register(client: TestClient, *, email: str, full_name: str = "Test User", password: str = PASSWORD):
    return client.post(
        "/api/users",
        json={"fullName": full_name, "email": email, "password": password},
    )


def login(client: TestClient, *, email: str, password: str = PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def make_user(client: TestClient):
    """Register + log in; returns (user_dict, headers)."""

    def _make(email: str, full_name: str = "Test User"):
        r = register(client, email=email, full_name=full_name)
        assert r.status_code == 201, r.text
        r = login(client, email=email)
        assert r.status_code == 200, r.text
        data = r.json()["data"]
        return data["user"], auth_headers(data["token"])

    return _make


@pytest.fixture()
def make_job(client: TestClient):
    def _make(headers: dict, **overrides):
        body = {
            "title": "Format my thesis",
            "description": "Typeset a 120 page thesis in LaTeX",
            "category": "typesetting",
            "budget": 150,
            "deadline": "2030-01-31T00:00:00",
            "requirements": ["LaTeX", " BibTeX "],
        }
        body.update(overrides)
        r = client.post("/api/jobs", json=body, headers=headers)
        assert r.status_code == 201, r.text
        return r.json()["data"]

    return _make
