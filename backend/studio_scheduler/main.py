import logging
import sqlite3
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from studio_scheduler.config import settings
from studio_scheduler.database import init_db
from studio_scheduler.exceptions import StudioError
from studio_scheduler.routers import assignments, calendar, estimates, events, notifications, team
from studio_scheduler.utils.filesystem import ensure_data_dir

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("studio_scheduler")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create the schema, apply migrations and integrity-check the store
    ensure_data_dir()
    init_db()
    try:
        conn = sqlite3.connect(str(settings.db_path))
        result = conn.execute("PRAGMA integrity_check").fetchone()
        conn.close()
        if result and result[0] == "ok":
            logger.info("Database integrity check passed.")
        else:
            logger.error("DATABASE INTEGRITY CHECK FAILED: %s", result)
    except sqlite3.Error as exc:
        logger.error("Could not run startup integrity check: %s", exc)
    if not settings.admin_key_hash:
        logger.warning("STUDIO_ADMIN_KEY_HASH is not set; admin reverts are disabled.")
    yield


app = FastAPI(
    title="Studio Scheduler",
    description="Production scheduling for a photography studio: events, crew and deliverables",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StudioError)
async def studio_error_handler(request: Request, exc: StudioError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(estimates.router, prefix=settings.api_prefix)
app.include_router(events.router, prefix=settings.api_prefix)
app.include_router(assignments.router, prefix=settings.api_prefix)
app.include_router(team.router, prefix=settings.api_prefix)
app.include_router(notifications.router, prefix=settings.api_prefix)
app.include_router(calendar.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": "0.1.0"}


def run():
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
