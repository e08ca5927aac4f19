"""Repo-root Uvicorn entrypoint.

Allows running the marketplace API from the repo root:

    uvicorn app.main:app --reload

The FastAPI app itself lives in `backend/app/main.py`; this module only
re-exports it so both `app.main:app` and `backend.app.main:app` work.
"""

from backend.app.main import app  # re-export

__all__ = ["app"]
