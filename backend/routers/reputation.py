"""
Backend Router — Reputation
==============================

GET /profiles/{profile_id}/credibility — Aggregate every skill on a profile
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from backend.dependencies import get_store
from backend.store import EvidenceStore
from reputation_engine.engine import aggregate_profile
from skill_scoring.engine import compute_skill_score
from skill_scoring.exceptions import UnknownProfileError
from skill_scoring.models import ProfileCredibility, SkillCredibilityResult

logger = logging.getLogger("backend.reputation")
router = APIRouter(tags=["Reputation"])


class ProfileCredibilityResponse(ProfileCredibility):
    profile_id: str
    skills: list[SkillCredibilityResult] = []


@router.get(
    "/profiles/{profile_id}/credibility",
    response_model=ProfileCredibilityResponse,
)
async def get_profile_credibility(
    profile_id: str,
    now: Optional[datetime] = None,
    store: EvidenceStore = Depends(get_store),
):
    """Score each skill on the profile and aggregate the results."""
    try:
        skill_ids = store.fetch_all_skills_for_profile(profile_id)
    except UnknownProfileError:
        raise HTTPException(status_code=404, detail=f"Unknown profile: {profile_id}")

    results = [
        compute_skill_score(sid, store.fetch_evidence_for_skill(sid), now=now)
        for sid in skill_ids
    ]
    profile = aggregate_profile(results)
    return ProfileCredibilityResponse(
        profile_id=profile_id,
        skills=results,
        **profile.model_dump(),
    )
