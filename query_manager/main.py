"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from query_manager.adapters.relational import SQLAlchemyBackend
from query_manager.config import settings
from query_manager.database import init_db
from query_manager.routers import queries

# ── Logging setup ────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await init_db()

    app.state.backend = SQLAlchemyBackend.from_url(
        settings.effective_backend_url, timeout=settings.backend_timeout_seconds
    )
    logger.info("Query backend ready (%s)", app.state.backend.engine.url.render_as_string())

    yield

    # Shutdown
    await app.state.backend.dispose()


app = FastAPI(
    title="SQL Query Manager",
    description="Named, parameterized SQL queries with an execution audit log",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(queries.router, prefix="/api/queries", tags=["queries"])


@app.get("/health")
async def health():
    return {"status": "ok", "service": "query-manager"}
