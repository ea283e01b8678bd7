from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

import notevault.models  # noqa: F401  register SQLModel tables

from notevault.config import get_settings
from notevault.db import create_db_and_tables, engine
from notevault.routers import auth, classic, health
from notevault.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)


def sweep_expired_sessions() -> int:
    """Delete expired sessions. Returns how many were removed."""
    with Session(engine) as db:
        return CredentialStore(db).delete_expired_sessions(datetime.now(timezone.utc))


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    create_db_and_tables()

    # Periodic sweep of expired sessions
    async def _session_sweep_loop() -> None:
        while True:
            await asyncio.sleep(settings.session_sweep_interval_seconds)
            try:
                removed = await asyncio.to_thread(sweep_expired_sessions)
                if removed:
                    logger.info("Session sweep: removed %d expired session(s)", removed)
            except Exception:
                logger.exception("Session sweep error")

    sweep_task = asyncio.create_task(_session_sweep_loop())

    yield

    sweep_task.cancel()
    try:
        await sweep_task
    except asyncio.CancelledError:
        pass


app = FastAPI(
    title="notevault",
    description="Note server sign-in for classic and legacy accounts",
    version="0.1.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        f"https://{settings.domain}",
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(classic.router)
app.include_router(health.router)
