"""
Backend — Request Dependencies
================================

Collaborators live on ``app.state`` (set up by ``create_app``) and reach
handlers through ``Depends``.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from backend.store import EvidenceStore
from skill_scoring.exceptions import UnknownProfileError, UnknownSkillError
from verification_engine.proof_verifier import ProofVerifier


def get_store(request: Request) -> EvidenceStore:
    return request.app.state.store


def get_verifier(request: Request) -> ProofVerifier:
    verifier = getattr(request.app.state, "verifier", None)
    if verifier is None:
        raise HTTPException(status_code=503, detail="Proof verifier is not running")
    return verifier


def require_profile_skill(store: EvidenceStore, profile_id: str, skill_id: str) -> str:
    """Return the skill's display name, or 404 if it is not on the profile."""
    try:
        skills = store.fetch_all_skills_for_profile(profile_id)
    except UnknownProfileError:
        raise HTTPException(status_code=404, detail=f"Unknown profile: {profile_id}")
    if skill_id not in skills:
        raise HTTPException(status_code=404, detail=f"Unknown skill: {skill_id}")
    try:
        return store.skill_name(skill_id)
    except UnknownSkillError:
        raise HTTPException(status_code=404, detail=f"Unknown skill: {skill_id}")
