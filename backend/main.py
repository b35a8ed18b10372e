"""
Skill Credibility — FastAPI Backend
=====================================

REST API over the skill credibility engine. Scores are recomputed from
the evidence store on every request.

Endpoints:
    POST /detect                                         — Classify a proof reference
    POST /verify-proof                                   — Check a proof reference exists
    POST /skills/score                                   — Score an inline evidence list
    GET  /profiles/{profile_id}/skills/{skill_id}/score    — Score a stored skill
    GET  /profiles/{profile_id}/skills/{skill_id}/insights — Evidence-mix hints
    GET  /profiles/{profile_id}/skills/{skill_id}/timeline — Narrated history
    GET  /profiles/{profile_id}/credibility              — Profile aggregate

Run:
    poetry run uvicorn backend.main:create_app --factory --reload --port 8000
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.config import Settings, load_settings
from backend.routers import reputation, scoring, timeline, verification
from backend.store import EvidenceStore, InMemoryEvidenceStore
from verification_engine.proof_verifier import ProofVerifier

logger = logging.getLogger("backend")

VERSION = "1.0.0"


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _build_store(settings: Settings) -> EvidenceStore:
    if settings.seed_file is None:
        logger.warning("CREDIBILITY_SEED_FILE not set — starting with an empty evidence store")
        return InMemoryEvidenceStore()
    return InMemoryEvidenceStore.from_file(settings.seed_file)


def create_app(
    settings: Settings | None = None,
    store: EvidenceStore | None = None,
    verifier: ProofVerifier | None = None,
) -> FastAPI:
    """Build the API. Injected collaborators take precedence over settings."""
    settings = settings or load_settings()
    _configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if verifier is not None:
            app.state.verifier = verifier
            yield
            return
        async with httpx.AsyncClient(timeout=settings.verify_timeout_seconds) as client:
            app.state.verifier = ProofVerifier(client, github_token=settings.github_token)
            logger.info("Proof verifier ready (timeout %.1fs)", settings.verify_timeout_seconds)
            yield

    app = FastAPI(
        title="Skill Credibility API",
        description="Evidence-backed skill credibility scoring, profile aggregation and timelines",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.store = store if store is not None else _build_store(settings)
    app.state.verifier = verifier

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(verification.router)
    app.include_router(scoring.router)
    app.include_router(reputation.router)
    app.include_router(timeline.router)

    @app.get("/")
    async def root():
        return {"name": "Skill Credibility API", "version": VERSION}

    return app
