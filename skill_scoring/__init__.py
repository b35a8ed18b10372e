"""Skill Scoring Engine — Package."""

from skill_scoring.models import (
    DetectedPlatform,
    Evidence,
    EvidenceKind,
    FactorBreakdown,
    ProfileCredibility,
    SkillCredibilityResult,
    Tier,
)

__all__ = [
    "DetectedPlatform",
    "Evidence",
    "EvidenceKind",
    "FactorBreakdown",
    "ProfileCredibility",
    "SkillCredibilityResult",
    "Tier",
]
