"""
Skill Scoring — Evidence Scorer
================================

Computes a single evidence item's contribution to a skill:

    weight = kind weight × platform confidence multiplier × verification multiplier

The weight is dimensionless and bounded by ``MAX_EVIDENCE_WEIGHT``;
normalization into 0.0–1.0 happens in the maturity engine's Quality factor.
Malformed input degrades to the lowest weight rather than raising.
"""

from __future__ import annotations

import logging

from skill_scoring.models import (
    DetectedPlatform,
    Evidence,
    EvidenceKind,
    Platform,
    VerificationStatus,
)
from skill_scoring.rules import (
    CONFIDENCE_MULTIPLIERS,
    EVIDENCE_KIND_WEIGHTS,
    UNPARSABLE_PROOF_MULTIPLIER,
    VERIFICATION_MULTIPLIERS,
)

logger = logging.getLogger("skill_scoring.scorer")

_LOWEST_KIND_WEIGHT = min(EVIDENCE_KIND_WEIGHTS.values())
_LOWEST_CONFIDENCE = min(CONFIDENCE_MULTIPLIERS.values())


def kind_weight(kind: EvidenceKind | str | None) -> float:
    """Base weight for an evidence kind; unknown kinds get the lowest."""
    try:
        return EVIDENCE_KIND_WEIGHTS[EvidenceKind(kind)]
    except (ValueError, KeyError):
        return _LOWEST_KIND_WEIGHT


def platform_multiplier(platform: DetectedPlatform | None) -> float:
    if platform is None or platform.platform == Platform.NONE:
        return UNPARSABLE_PROOF_MULTIPLIER
    return CONFIDENCE_MULTIPLIERS.get(platform.confidence, _LOWEST_CONFIDENCE)


def verification_multiplier(status: VerificationStatus | str | None) -> float:
    try:
        return VERIFICATION_MULTIPLIERS[VerificationStatus(status)]
    except (ValueError, KeyError):
        return VERIFICATION_MULTIPLIERS[VerificationStatus.UNCHECKED]


def score_evidence(evidence: Evidence, platform: DetectedPlatform | None) -> float:
    """Weight of one evidence item given its detected platform."""
    weight = (
        kind_weight(getattr(evidence, "kind", None))
        * platform_multiplier(platform)
        * verification_multiplier(getattr(evidence, "verification_status", None))
    )
    logger.debug(
        "Evidence %s weighted %.3f",
        getattr(evidence, "id", "?"), weight,
    )
    return weight
