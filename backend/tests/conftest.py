import os
import sys
import tempfile
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# Must be set before anything imports backend.app.config.
_TMP_ROOT = Path(tempfile.mkdtemp(prefix="marketplace-unit-"))
os.environ.setdefault("DISABLE_DOTENV", "1")
os.environ.setdefault("DATABASE_URL", f"sqlite+pysqlite:///{_TMP_ROOT / 'bootstrap.sqlite3'}")
os.environ.setdefault("UPLOAD_DIR", str(_TMP_ROOT / "uploads"))
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")


@pytest.fixture()
def db_session(tmp_path: Path):
    """Fresh SQLite database per test; services and repositories take this session directly."""
    from backend.app.database import Base
    from backend.app.models import job, proposal, user  # noqa: F401

    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'unit.sqlite3'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = Session()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()
