"""
Skill Scoring — Scoring Rules & Constants
==========================================

Production scoring rules used by the credibility engine.
All weights, thresholds, curve constants and host tables are defined here.
No magic numbers elsewhere.
"""

from __future__ import annotations

from skill_scoring.models import (
    Confidence,
    EvidenceKind,
    RecencyStatus,
    Tier,
    VerificationStatus,
)

# ─────────────────────────────────────────────────────────────────────────────
# Evidence Weights
# ─────────────────────────────────────────────────────────────────────────────
# Independently checkable, low-forgery artifacts score highest.
EVIDENCE_KIND_WEIGHTS: dict[EvidenceKind, float] = {
    EvidenceKind.CODE_COMMIT: 1.0,
    EvidenceKind.PACKAGE_PUBLISH: 1.0,
    EvidenceKind.DEPLOYMENT: 0.8,
    EvidenceKind.DOCUMENT: 0.45,
    EvidenceKind.LINK: 0.45,
    EvidenceKind.MANUAL_CLAIM: 0.2,
}

CONFIDENCE_MULTIPLIERS: dict[Confidence, float] = {
    Confidence.HIGH: 1.0,
    Confidence.MEDIUM: 0.7,
    Confidence.LOW: 0.4,
}
UNPARSABLE_PROOF_MULTIPLIER = 0.1  # platform == none

VERIFICATION_MULTIPLIERS: dict[VerificationStatus, float] = {
    VerificationStatus.VERIFIED: 1.0,
    VerificationStatus.UNCHECKED: 1.0,
    VerificationStatus.FAILED: 0.25,
}

MAX_EVIDENCE_WEIGHT = (
    max(EVIDENCE_KIND_WEIGHTS.values())
    * max(CONFIDENCE_MULTIPLIERS.values())
    * max(VERIFICATION_MULTIPLIERS.values())
)


# ─────────────────────────────────────────────────────────────────────────────
# Maturity Factor Weights (must sum to 1.0)
# ─────────────────────────────────────────────────────────────────────────────
class MaturityWeights:
    TIME = 0.30
    VOLUME = 0.35
    QUALITY = 0.25
    RECENCY = 0.10


# Saturating curve constants
TIME_MIN_SPAN_DAYS = 1.0        # spans shorter than this count as 0
TIME_SCALE_DAYS = 365.0         # 1 - e^(-span / scale)
VOLUME_SCALE = 3.0              # 1 - e^(-n / scale)
RECENCY_FRESH_DAYS = 30.0       # <= 30 days = 1.0
RECENCY_DECAY_DAYS = 180.0      # e^(-(d - fresh) / decay)

# Recency status buckets (days since most recent evidence)
RECENCY_STATUS_BUCKETS: tuple[tuple[float, RecencyStatus], ...] = (
    (90, RecencyStatus.ACTIVE),
    (180, RecencyStatus.RECENT),
    (365, RecencyStatus.MODERATE),
    (540, RecencyStatus.STALE),
)

STALE_AFTER_DAYS = 365


# ─────────────────────────────────────────────────────────────────────────────
# Tier Thresholds
# ─────────────────────────────────────────────────────────────────────────────
EMERGING_MIN = 25
PROVEN_MIN = 55
EXPERT_MIN = 80

# Single-source claims can never reach the top two tiers.
SINGLE_SOURCE_MAX_SCORE = PROVEN_MIN - 1

# Evidence-density confidence: min(100, sum of best kind weights × 20)
CONFIDENCE_POINTS_PER_WEIGHT = 20
CONFIDENCE_MAX = 100


def tier_for_score(score: int) -> Tier:
    """Map a 0–100 score onto its credibility tier."""
    if score >= EXPERT_MIN:
        return Tier.EXPERT
    if score >= PROVEN_MIN:
        return Tier.PROVEN
    if score >= EMERGING_MIN:
        return Tier.EMERGING
    return Tier.UNVERIFIED


def recency_status(days_since_latest: float | None) -> RecencyStatus:
    if days_since_latest is None:
        return RecencyStatus.DORMANT
    for limit, status in RECENCY_STATUS_BUCKETS:
        if days_since_latest <= limit:
            return status
    return RecencyStatus.DORMANT


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


# ─────────────────────────────────────────────────────────────────────────────
# Platform Detection Tables
# ─────────────────────────────────────────────────────────────────────────────
SOURCE_CONTROL_HOSTS: dict[str, str] = {
    "github.com": "github",
    "gitlab.com": "gitlab",
    "bitbucket.org": "bitbucket",
    "codeberg.org": "codeberg",
}

DEPLOYMENT_HOST_SUFFIXES: dict[str, str] = {
    "vercel.app": "vercel",
    "netlify.app": "netlify",
    "herokuapp.com": "heroku",
    "pages.dev": "cloudflare-pages",
    "github.io": "github-pages",
    "fly.dev": "fly",
    "onrender.com": "render",
    "railway.app": "railway",
    "surge.sh": "surge",
    "web.app": "firebase",
    "firebaseapp.com": "firebase",
}

# Path segments that pin a source-control URL to a ref
SOURCE_CONTROL_REF_SEGMENTS = {"commit", "commits", "tree", "blob", "src"}

HASH_PROOF_LENGTHS = (64, 128)  # sha256, sha512 hex digests
