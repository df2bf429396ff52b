"""FastAPI application -- Stellar pre-flight entrypoint."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import preflight.deps as deps
from preflight.api.preflight import router as preflight_router
from preflight.config import load_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: configure logging and load settings."""
    log_level = logging.DEBUG if os.environ.get("PREFLIGHT_DEV_MODE") else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    deps._settings = load_settings()
    logger.info(
        "Stellar pre-flight starting with settings: %s",
        deps._settings.model_dump(),
    )

    yield

    deps._settings = None


app = FastAPI(
    title="Stellar Pre-Flight",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(preflight_router)
