"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from visitor_access.server.routes.access import access_router
from visitor_access.server.routes.invitations import invitation_router
from visitor_access.storage.database import dispose_engine, init_db


@asynccontextmanager
async def _lifespan(app: FastAPI):
    await init_db()
    yield
    await dispose_engine()


def create_app(init_database: bool = True) -> FastAPI:
    app = FastAPI(
        title='Visitor Access',
        lifespan=_lifespan if init_database else None,
    )
    app.include_router(invitation_router)
    app.include_router(access_router)
    return app
