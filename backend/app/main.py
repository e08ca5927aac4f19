import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text

from .api import auth as auth_api
from .api import jobs as jobs_api
from .api import profile as profile_api
from .api import proposals as proposals_api
from .api import users as users_api
from .config import FRONTEND_ORIGINS, LOG_LEVEL, UPLOAD_DIR
from .database import engine, init_db
from .utils.error_handlers import DatabaseError, register_error_handlers
from .utils.responses import success_response

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Freelance Marketplace API")

register_error_handlers(app)

app.include_router(auth_api.router, prefix="/api")
app.include_router(users_api.router, prefix="/api")
app.include_router(jobs_api.router, prefix="/api")
app.include_router(proposals_api.router, prefix="/api")
app.include_router(profile_api.router, prefix="/api")

Path(UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=UPLOAD_DIR, check_dir=False), name="uploads")


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return success_response({"status": "Backend running", "service": "Freelance Marketplace API"})


_default_origins = ["http://localhost:3000", "http://127.0.0.1:3000", "http://localhost:5173"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=[*_default_origins, *FRONTEND_ORIGINS],
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup() -> None:
    try:
        init_db()
        app.state.db_init_error = None
    except Exception as e:
        logger.exception("Database initialisation failed")
        app.state.db_init_error = str(e)


@app.get("/api/db/health")
def db_health():
    if getattr(app.state, "db_init_error", None):
        raise DatabaseError(f"DB init failed: {app.state.db_init_error}")

    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        raise DatabaseError(f"DB connection failed: {e}") from e

    return success_response({"status": "ok", "dialect": engine.dialect.name})
