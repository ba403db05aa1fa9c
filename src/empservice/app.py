# src/empservice/app.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from src.empservice.config import Config
from src.empservice.middleware.cors import cors_middleware
from src.empservice.routes.employees_api import router as employees_router
from src.empservice.utils.database import Database
from src.empservice.utils.error_handler import setup_error_handling


def create_app(config: Config, db: Optional[Database] = None) -> FastAPI:
    """
    Build the application for ``config``.

    The database is opened (and the employee table created if absent) when the
    app starts up, and disposed when it shuts down.
    """
    db = db or Database(config.database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await db.open()
        yield
        await db.close()

    app = FastAPI(title=config.title or "employee-service", version="1.0", lifespan=lifespan)
    app.state.config = config
    app.state.db = db

    # ----------------------------------------------------------
    # CORS: Access-Control-Allow-Origin on every response
    # ----------------------------------------------------------
    app.middleware("http")(cors_middleware)

    # ----------------------------------------------------------
    # ERROR HANDLERS
    # ----------------------------------------------------------
    setup_error_handling(app)

    # ----------------------------------------------------------
    # ROUTERS
    # ----------------------------------------------------------
    app.include_router(employees_router)

    return app
