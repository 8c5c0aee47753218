"""FastAPI application for the ICTIRC journal backend."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import ictirc.models  # noqa: F401  (mappers must be configured before first query)
from ictirc.config import get_settings
from ictirc.database import engine, init_db
from ictirc.middleware import logging_middleware, register_exception_handlers
from ictirc.routers import archive, audit_logs, auth, health, invites, papers, submissions, users
from ictirc.utils.logger import configure_logging, get_logger

API_PREFIX = "/api/v1"

settings = get_settings()
configure_logging(log_level=settings.log_level, debug=settings.debug)
log = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("starting application", debug=settings.debug, log_level=settings.log_level)
    await init_db()

    yield

    await engine.dispose()
    log.info("application stopped")


app = FastAPI(
    title="ICTIRC API",
    description="Manuscript intake, editorial workflow, DOI assignment and the journal archive",
    version="0.1.0",
    lifespan=lifespan,
)

register_exception_handlers(app)

_cors_origins = settings.get_cors_origins_list()
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins or ["*"],
    allow_credentials=bool(_cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(logging_middleware)

for module, tag in (
    (health, "Health"),
    (auth, "Auth"),
    (submissions, "Submissions"),
    (papers, "Papers"),
    (users, "Users"),
    (invites, "Invites"),
    (archive, "Archive"),
    (audit_logs, "Audit"),
):
    app.include_router(module.router, prefix=API_PREFIX, tags=[tag])


@app.get("/")
async def root():
    return {
        "name": "ICTIRC API",
        "version": app.version,
        "endpoints": {
            "health": f"{API_PREFIX}/health",
            "submissions": f"{API_PREFIX}/submissions",
            "papers": f"{API_PREFIX}/papers",
            "users": f"{API_PREFIX}/users",
            "invites": f"{API_PREFIX}/invites",
            "archive": f"{API_PREFIX}/archive",
            "audit_logs": f"{API_PREFIX}/audit-logs",
        },
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ictirc.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
