"""
Backend Router — Scoring
==========================

POST /skills/score                                — Score an inline evidence list
GET  /profiles/{profile_id}/skills/{skill_id}/score    — Score a stored skill
GET  /profiles/{profile_id}/skills/{skill_id}/insights — Evidence-mix hints
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from backend.dependencies import get_store, require_profile_skill
from backend.store import EvidenceStore
from skill_scoring.engine import compute_skill_score
from skill_scoring.exceptions import ContractViolationError
from skill_scoring.insights import analyze_skill
from skill_scoring.models import Evidence, SkillCredibilityResult, SkillInsight

logger = logging.getLogger("backend.scoring")
router = APIRouter(tags=["Scoring"])


# ─────────────────────────────────────────────────────────────────────────────
# Request Models
# ─────────────────────────────────────────────────────────────────────────────
class ScoreRequest(BaseModel):
    skill_id: str = Field(..., min_length=1)
    evidence: list[Evidence] = []
    now: Optional[datetime] = None
    strict: bool = Field(default=False, description="Reject the request if any evidence violates the contract")


# ─────────────────────────────────────────────────────────────────────────────
# Endpoints
# ─────────────────────────────────────────────────────────────────────────────
def _score(skill_id: str, evidence: list[Evidence], now: Optional[datetime], strict: bool) -> SkillCredibilityResult:
    result = compute_skill_score(skill_id, evidence, now=now)
    if result.rejected:
        logger.warning(
            "Skill %s: %d evidence item(s) rejected: %s",
            skill_id, len(result.rejected), [r.evidence_id for r in result.rejected],
        )
        if strict:
            raise ContractViolationError(skill_id, result.rejected)
    return result


@router.post("/skills/score", response_model=SkillCredibilityResult)
async def score_inline(req: ScoreRequest):
    """Score a caller-supplied evidence list for one skill."""
    try:
        return _score(req.skill_id, req.evidence, req.now, req.strict)
    except ContractViolationError as exc:
        raise HTTPException(status_code=422, detail={
            "message": str(exc),
            "rejected": [r.model_dump() for r in exc.rejected],
        })


@router.get(
    "/profiles/{profile_id}/skills/{skill_id}/score",
    response_model=SkillCredibilityResult,
)
async def score_stored(
    profile_id: str,
    skill_id: str,
    now: Optional[datetime] = None,
    store: EvidenceStore = Depends(get_store),
):
    """Recompute a stored skill's credibility from its evidence."""
    require_profile_skill(store, profile_id, skill_id)
    return _score(skill_id, store.fetch_evidence_for_skill(skill_id), now, strict=False)


@router.get(
    "/profiles/{profile_id}/skills/{skill_id}/insights",
    response_model=list[SkillInsight],
)
async def skill_insights(
    profile_id: str,
    skill_id: str,
    now: Optional[datetime] = None,
    store: EvidenceStore = Depends(get_store),
):
    """Prioritized hints on what would strengthen the skill."""
    skill_name = require_profile_skill(store, profile_id, skill_id)
    return analyze_skill(skill_name, store.fetch_evidence_for_skill(skill_id), now=now)
