"""
Backend Router — Timeline
===========================

GET /profiles/{profile_id}/skills/{skill_id}/timeline — Narrated evidence history
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends

from backend.dependencies import get_store, require_profile_skill
from backend.store import EvidenceStore
from reputation_engine.timeline import narrate_timeline
from skill_scoring.models import NarratedEvent, ProjectContext

router = APIRouter(tags=["Timeline"])


@router.get(
    "/profiles/{profile_id}/skills/{skill_id}/timeline",
    response_model=list[NarratedEvent],
)
async def skill_timeline(
    profile_id: str,
    skill_id: str,
    project_title: Optional[str] = None,
    now: Optional[datetime] = None,
    store: EvidenceStore = Depends(get_store),
):
    """One sentence per evidence item, oldest first, with milestones."""
    skill_name = require_profile_skill(store, profile_id, skill_id)
    context = ProjectContext(project_title=project_title) if project_title else None
    return narrate_timeline(
        store.fetch_evidence_for_skill(skill_id), skill_name, context=context, now=now,
    )
