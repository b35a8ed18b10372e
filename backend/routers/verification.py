"""
Backend Router — Verification
===============================

POST /detect       — Classify a proof reference (pure, no I/O)
POST /verify-proof — Check a proof reference against its authority
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from backend.dependencies import get_verifier
from skill_scoring.models import DetectedPlatform
from verification_engine.platform_detector import detect
from verification_engine.proof_verifier import ProofCheck, ProofVerifier

logger = logging.getLogger("backend.verification")
router = APIRouter(tags=["Verification"])


class ProofRequest(BaseModel):
    proof_ref: Optional[str] = None


@router.post("/detect", response_model=DetectedPlatform)
async def detect_platform(req: ProofRequest):
    """Classify where a proof reference points and how confidently."""
    return detect(req.proof_ref)


@router.post("/verify-proof", response_model=ProofCheck)
async def verify_proof(
    req: ProofRequest,
    verifier: ProofVerifier = Depends(get_verifier),
):
    """Check that the referenced artifact exists."""
    check = await verifier.verify(req.proof_ref)
    logger.info("Proof %r → %s (%s)", req.proof_ref, check.status.value, check.detail)
    return check
