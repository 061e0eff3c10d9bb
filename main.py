# type: ignore
# pyright: reportGeneralTypeIssues=false
# pyright: reportOptionalMemberAccess=false
"""
Member Directory Service
========================
Community roster directory: whitelist gate by email, paginated multi-field
member search, per-category listings, profile and photo updates, and
grouped statistics by native village, city, kovil and year moved.

The member store is built here and handed to the services; set DATABASE_URL
for the SQL store, leave it empty for the in-process store.

Port: 3001
"""
import json
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.controllers import access_controller, member_controller, stats_controller, system_controller
from app.core.config import settings
from app.core.database import build_engine
from app.core.logging import get_logger
from app.middleware import MetricsMiddleware, RequestIDMiddleware
from app.repositories import InMemoryMemberRepository, MemberRepository
from app.services.email_client import EmailClient
from app.services.member_service import MemberService
from app.services.stats_service import StatsService

logger = get_logger(__name__)


def build_repository(database_url: str = settings.DATABASE_URL):
    if not database_url:
        logger.warning("DATABASE_URL not set — using in-process member store")
        return InMemoryMemberRepository()
    return MemberRepository(build_engine(database_url))


def load_seed_file(repo, path: str) -> int:
    """Load a JSON array of member records into an empty store."""
    if not path or repo.count() > 0:
        return 0
    with open(path, encoding="utf-8") as fh:
        records = json.load(fh)
    inserted = repo.insert_many(records)
    logger.info("Seeded %d members from %s", len(inserted), path)
    return len(inserted)


@asynccontextmanager
async def lifespan(application: FastAPI):
    repo = application.state.member_repo
    try:
        repo.create_schema()
    except Exception:
        logger.exception("Could not prepare member store — it may not be ready yet")
    else:
        # A broken seed file aborts startup rather than serving a partial roster.
        load_seed_file(repo, settings.SEED_FILE)
        logger.info("Member store ready (%s)", repo.kind)
    yield
    repo.dispose()
    logger.info("Shutting down — member store disposed")


def create_app(repo=None, email_client: Optional[EmailClient] = None) -> FastAPI:
    """Wire the store, services and routers into a FastAPI application."""
    repo = repo if repo is not None else build_repository()

    application = FastAPI(
        title="Member Directory Service",
        description="Community roster search, profiles and statistics.",
        version=settings.SERVICE_VERSION,
        lifespan=lifespan,
    )
    application.state.member_repo = repo
    application.state.member_service = MemberService(repo)
    application.state.stats_service = StatsService(repo)
    application.state.email_client = email_client or EmailClient()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(MetricsMiddleware)
    application.add_middleware(RequestIDMiddleware)

    @application.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"error": "internal_server_error", "detail": "Internal server error"},
        )

    application.include_router(system_controller.router)
    application.include_router(access_controller.router)
    application.include_router(member_controller.router)
    application.include_router(stats_controller.router)
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.SERVICE_PORT)
