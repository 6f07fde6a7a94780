"""FastAPI application entrypoint for the weekly lesson planner."""
from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import select
from starlette.exceptions import HTTPException
from starlette.middleware.sessions import SessionMiddleware

from .config import (
    CORS_ORIGINS,
    LOG_LEVEL,
    SEED_DEMO_DATA,
    SESSION_HTTPS_ONLY,
    SESSION_MAX_AGE,
    SESSION_SECRET,
)
from .db import get_session, init_db
from .db.fixtures import seed_demo_data
from .db.models import User
from .errors import PlannerError, validation_message
from .routers import (
    admin,
    assignments,
    auth,
    daily_plans,
    grades,
    planning_weeks,
    subjects,
    users,
    weekly_plans,
)
from .services.storage import SqlStorage

LOGGER = logging.getLogger(__name__)
logging.basicConfig(level=LOG_LEVEL)

app = FastAPI(title="Weekly Planner Service", version="1.0.0")
app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET,
    max_age=SESSION_MAX_AGE,
    same_site="lax",
    https_only=SESSION_HTTPS_ONLY,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for module in (
    auth,
    users,
    grades,
    subjects,
    assignments,
    planning_weeks,
    weekly_plans,
    daily_plans,
    admin,
):
    app.include_router(module.router)


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"message": validation_message(exc.errors())}, status_code=400)


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return JSONResponse(
        {"message": str(exc.detail)}, status_code=exc.status_code, headers=exc.headers
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"message": "Internal server error"}, status_code=500)


@app.on_event("startup")
def startup_event() -> None:  # pragma: no cover - exercised indirectly
    init_db()
    if not SEED_DEMO_DATA:
        return
    with get_session() as session:
        if session.scalar(select(User.id).limit(1)) is None:
            LOGGER.info("Empty database, seeding demo data")
            seed_demo_data(SqlStorage(session))


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
