"""Application factory and entry point.

Run with:
    uvicorn handcalc.app:app --reload
"""
from __future__ import annotations

from fastapi import FastAPI

from handcalc.api import router, set_store
from handcalc.store import SessionStore


def create_app(store: SessionStore | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    Accepts an optional store for testing; creates a fresh one if omitted.
    """
    if store is None:
        store = SessionStore()

    set_store(store)

    app = FastAPI(
        title="Handheld Calculator API",
        description=(
            "Immediate-execution calculator sessions. Each session receives "
            "key presses one batch at a time and reports the display and the "
            "pending operator after the last key."
        ),
        version="0.1.0",
    )
    app.include_router(router)
    return app


# Default app instance for `uvicorn handcalc.app:app`
app = create_app()
