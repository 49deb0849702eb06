# -*- coding: utf-8 -*-
"""
FastAPI front end for the competitor price resolver.

Endpoints:
  GET  /status       → liveness + configured competitors (no scraping)
  POST /api/resolve  → {"product": {"name": ...}, "competitor": "..."}
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pricematch.config import settings
from pricematch.schemas import ResolveRequest, PROTOCOL_VERSION
from pricematch.resolver import describe, resolve, resolver
from pricematch.utils.logger import get_logger

logger = get_logger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=== Startup: competitor price resolver ===")
    for cfg in resolver.registry.all():
        logger.info("  • %s: %s", cfg.key, cfg.name)

    yield

    # Browser is closed exactly once, before the server goes away
    await resolver.session.stop()
    logger.info("=== Shutdown ===")


# ── App ───────────────────────────────────────────────────────────────────────


app = FastAPI(
    title="Competitor Price Resolver",
    description="Finds a product's price on competitor pharmacy sites",
    version=PROTOCOL_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.get("/status")
async def status():
    return describe().model_dump()


@app.post("/api/resolve")
async def resolve_endpoint(request: ResolveRequest):
    if not request.product or not request.competitor:
        return JSONResponse(
            status_code=400,
            content={"error": "Missing parameters: product, competitor"},
        )
    try:
        result = await resolve(request.product, request.competitor)
    except Exception as exc:
        logger.exception("Resolve error: %s", exc)
        return JSONResponse(
            status_code=500,
            content={"error": str(exc), "found": False},
        )
    return result.model_dump(mode="json")
