"""
Skill Scoring — Data Models
============================

Shared Pydantic models for evidence, platform detection, scoring,
and profile credibility. These models define the data layer between
the detector, the scoring engine, the aggregator and the backend.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime (naive values are taken as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ─────────────────────────────────────────────────────────────────────────────
# Enums
# ─────────────────────────────────────────────────────────────────────────────
class EvidenceKind(str, Enum):
    CODE_COMMIT = "code-commit"
    DEPLOYMENT = "deployment"
    PACKAGE_PUBLISH = "package-publish"
    DOCUMENT = "document"
    LINK = "link"
    MANUAL_CLAIM = "manual-claim"


class VerificationStatus(str, Enum):
    UNCHECKED = "unchecked"
    VERIFIED = "verified"
    FAILED = "failed"


class Platform(str, Enum):
    SOURCE_CONTROL = "source-control"
    DEPLOYMENT = "deployment"
    PACKAGE_REGISTRY = "package-registry"
    HASH_PROOF = "hash-proof"
    GENERIC_LINK = "generic-link"
    NONE = "none"


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Tier(str, Enum):
    UNVERIFIED = "Unverified"  # 0–24
    EMERGING = "Emerging"      # 25–54
    PROVEN = "Proven"          # 55–79
    EXPERT = "Expert"          # 80–100

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank >= other.rank


_TIER_ORDER = (Tier.UNVERIFIED, Tier.EMERGING, Tier.PROVEN, Tier.EXPERT)


class RecencyStatus(str, Enum):
    ACTIVE = "active"
    RECENT = "recent"
    MODERATE = "moderate"
    STALE = "stale"
    DORMANT = "dormant"


class InsightType(str, Enum):
    WARNING = "warning"
    SUGGESTION = "suggestion"
    POSITIVE = "positive"


# ─────────────────────────────────────────────────────────────────────────────
# Evidence
# ─────────────────────────────────────────────────────────────────────────────
class Evidence(BaseModel):
    """One substantiating artifact for one or more skills.

    ``occurred_at`` is when the underlying activity happened and
    ``created_at`` is when it was added to the platform. Scoring uses
    ``occurred_at`` and falls back to ``created_at`` when it is absent.
    """
    id: str
    kind: EvidenceKind
    proof_ref: Optional[str] = None
    skill_refs: set[str] = Field(default_factory=set)
    occurred_at: Optional[datetime] = None
    created_at: datetime
    title: Optional[str] = None
    project_id: Optional[str] = None
    verification_status: VerificationStatus = VerificationStatus.UNCHECKED

    @property
    def timestamp(self) -> datetime:
        return as_utc(self.occurred_at or self.created_at)


# ─────────────────────────────────────────────────────────────────────────────
# Platform Detection
# ─────────────────────────────────────────────────────────────────────────────
class DetectedPlatform(BaseModel):
    """Provenance classification of a proof reference."""
    platform: Platform
    confidence: Confidence
    canonical_id: Optional[str] = None
    provider: Optional[str] = None  # github, npm, vercel, ...
    host: Optional[str] = None

    @property
    def is_independently_checkable(self) -> bool:
        return self.platform in (
            Platform.SOURCE_CONTROL,
            Platform.PACKAGE_REGISTRY,
            Platform.HASH_PROOF,
        )


# ─────────────────────────────────────────────────────────────────────────────
# Scoring Models
# ─────────────────────────────────────────────────────────────────────────────
class FactorBreakdown(BaseModel):
    """Unweighted factor sub-scores, each within 0.0–1.0."""
    time: float = Field(ge=0.0, le=1.0, default=0.0)
    volume: float = Field(ge=0.0, le=1.0, default=0.0)
    quality: float = Field(ge=0.0, le=1.0, default=0.0)
    recency: float = Field(ge=0.0, le=1.0, default=0.0)


class RejectedEvidence(BaseModel):
    """Evidence excluded from scoring because it violates the input contract."""
    evidence_id: str
    reason: str


class SkillCredibilityResult(BaseModel):
    """Output of the Skill Maturity Engine for one skill.

    Derived on every request; the evidence list stays the source of truth.
    """
    skill_id: str
    score: int = Field(ge=0, le=100)
    tier: Tier
    factor_breakdown: FactorBreakdown = Field(default_factory=FactorBreakdown)
    evidence_count: int = 0
    submission_count: int = 0
    single_source_capped: bool = False
    recency_status: RecencyStatus = RecencyStatus.DORMANT
    confidence: int = Field(ge=0, le=100, default=0)  # evidence density
    explanation: str = ""
    rejected: list[RejectedEvidence] = []


class ProfileCredibility(BaseModel):
    """Aggregated credibility summary for a profile."""
    overall_score: int = Field(ge=0, le=100)
    tier: Tier
    proven_skills_count: int = 0
    total_skills_count: int = 0
    tier_counts: dict[Tier, int] = Field(default_factory=dict)
    top_skill_id: Optional[str] = None


class SkillInsight(BaseModel):
    """Actionable hint about a skill's evidence mix."""
    type: InsightType
    title: str
    description: str
    priority: int  # 1 = highest


# ─────────────────────────────────────────────────────────────────────────────
# Timeline Models
# ─────────────────────────────────────────────────────────────────────────────
class ProjectContext(BaseModel):
    """Optional project metadata used to enrich narrated events."""
    project_title: Optional[str] = None


class NarratedEvent(BaseModel):
    evidence_id: str
    occurred_at: datetime
    narrative: str
    milestone: Optional[str] = None
    milestone_label: Optional[str] = None
