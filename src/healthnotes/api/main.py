"""HTTP surface: manual sync trigger and last-run status."""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from healthnotes.api.routes import sync as sync_routes
from healthnotes.db.engine import get_engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    get_engine()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Health Notes API",
        description="Sync Health Connect readings into daily notes",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.include_router(sync_routes.router, prefix="/sync", tags=["sync"])
    return app


app = create_app()  # uvicorn healthnotes.api.main:app
