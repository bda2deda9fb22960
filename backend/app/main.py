"""FastAPI application with lifespan for the analytics pool and telemetry."""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.db import init_pool, close_pool
from app.services.telemetry import init_telemetry
from app.routes.mcp import router as mcp_router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
    stream=sys.stdout,
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger("mailrelay")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info("Starting mailrelay")

    if not settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set -- every send will be rejected by Resend")

    # 1. Analytics pool (optional)
    try:
        pool = await init_pool()
        if pool is None:
            logger.info("Analytics sink not configured, send events will not be recorded")
        else:
            logger.info("Analytics pool initialized (min=%d, max=%d)", settings.db_pool_min, settings.db_pool_max)
    except Exception as e:
        logger.warning("Analytics pool init failed, continuing without sink: %s", e)

    # 2. OpenTelemetry
    init_telemetry()

    yield

    await close_pool()
    logger.info("mailrelay shut down")


app = FastAPI(
    title="Mailrelay",
    description="Transactional email tool for the assistant platform",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["POST", "GET", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(mcp_router, prefix="/mcp", tags=["tools"])


@app.get("/health")
async def health():
    return {"status": "ok"}
