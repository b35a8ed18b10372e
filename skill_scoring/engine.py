"""
Skill Scoring — Skill Maturity Engine
======================================

Reduces every piece of evidence attached to one skill into a bounded,
explainable 0–100 score and a discrete credibility tier.

Design:
    • Pure and deterministic: ``now`` is an explicit input
    • Order-independent: dedup + min/max + exact float sums
    • Total: empty or malformed input degrades to a low score, never raises
    • Four weighted factors: Time 30%, Volume 35%, Quality 25%, Recency 10%
    • Single-source claims are capped below the Proven tier
"""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from skill_scoring.models import (
    DetectedPlatform,
    Evidence,
    FactorBreakdown,
    RecencyStatus,
    RejectedEvidence,
    SkillCredibilityResult,
    Tier,
    as_utc,
)
from skill_scoring.rules import (
    CONFIDENCE_MAX,
    CONFIDENCE_POINTS_PER_WEIGHT,
    MAX_EVIDENCE_WEIGHT,
    MaturityWeights,
    RECENCY_DECAY_DAYS,
    RECENCY_FRESH_DAYS,
    SINGLE_SOURCE_MAX_SCORE,
    TIME_MIN_SPAN_DAYS,
    TIME_SCALE_DAYS,
    VOLUME_SCALE,
    recency_status,
    round_half_up,
    tier_for_score,
)
from skill_scoring.scorer import kind_weight, score_evidence
from verification_engine.platform_detector import PlatformDetector

logger = logging.getLogger("skill_scoring.engine")

SECONDS_PER_DAY = 86400.0

_FACTOR_LABELS = {
    "time": "Time",
    "volume": "Volume",
    "quality": "Quality",
    "recency": "Recency",
}


# ─────────────────────────────────────────────────────────────────────────────
# Factor Curves
# ─────────────────────────────────────────────────────────────────────────────
def time_factor(span_days: float) -> float:
    """Saturating in the span between earliest and latest evidence."""
    if span_days < TIME_MIN_SPAN_DAYS:
        return 0.0
    return 1.0 - math.exp(-span_days / TIME_SCALE_DAYS)


def volume_factor(distinct_count: int) -> float:
    """Diminishing returns in distinct evidence count; never reaches 1."""
    if distinct_count <= 0:
        return 0.0
    return 1.0 - math.exp(-distinct_count / VOLUME_SCALE)


def quality_factor(weights: Iterable[float]) -> float:
    """Mean per-item weight normalized against the best attainable weight."""
    values = list(weights)
    if not values:
        return 0.0
    mean = math.fsum(values) / len(values)
    return max(0.0, min(1.0, mean / MAX_EVIDENCE_WEIGHT))


def recency_factor(days_since_latest: float) -> float:
    """Near 1 for fresh evidence, decaying toward 0 as it goes stale."""
    days = max(0.0, days_since_latest)
    if days <= RECENCY_FRESH_DAYS:
        return 1.0
    return math.exp(-(days - RECENCY_FRESH_DAYS) / RECENCY_DECAY_DAYS)


def evidence_confidence(kind_weights: Iterable[float]) -> int:
    """Evidence density: kind-weighted distinct item count, scaled to 0–100."""
    points = math.fsum(kind_weights) * CONFIDENCE_POINTS_PER_WEIGHT
    return max(0, min(CONFIDENCE_MAX, round_half_up(points)))


def dedup_key(evidence: Evidence, platform: DetectedPlatform) -> tuple[str, str]:
    if platform.canonical_id:
        return platform.platform.value, platform.canonical_id
    return "id", evidence.id


# ─────────────────────────────────────────────────────────────────────────────
# Engine
# ─────────────────────────────────────────────────────────────────────────────
class SkillMaturityEngine:
    """Computes a SkillCredibilityResult from a skill's evidence snapshot.

    Usage:
        engine = SkillMaturityEngine()
        result = engine.compute("rust", evidence, now=datetime.now(timezone.utc))
    """

    def __init__(self, detector: PlatformDetector | None = None) -> None:
        self.detector = detector or PlatformDetector()

    def compute(
        self,
        skill_id: str,
        evidence: Iterable[Evidence],
        now: Optional[datetime] = None,
    ) -> SkillCredibilityResult:
        """Score one skill.

        Parameters
        ----------
        skill_id : str
            Skill being scored.
        evidence : iterable of Evidence
            Snapshot of the skill's evidence. Items whose ``skill_refs``
            name other skills only are rejected, not scored.
        now : datetime, optional
            Reference time for recency. Defaults to the current UTC time.
        """
        now = as_utc(now) if now is not None else datetime.now(timezone.utc)
        accepted, rejected = self._partition(skill_id, evidence)

        for rej in rejected:
            logger.warning(
                "Rejected evidence %s for skill %s: %s",
                rej.evidence_id, skill_id, rej.reason,
            )

        if not accepted:
            return SkillCredibilityResult(
                skill_id=skill_id,
                score=0,
                tier=Tier.UNVERIFIED,
                recency_status=RecencyStatus.DORMANT,
                explanation=f"No evidence supports {skill_id} yet.",
                rejected=rejected,
            )

        # ── Classify, weight & deduplicate ───────────────────────────
        best_weights: dict[tuple[str, str], float] = {}
        best_kinds: dict[tuple[str, str], float] = {}
        for item in accepted:
            platform = self.detector.detect(item.proof_ref)
            key = dedup_key(item, platform)
            weight = score_evidence(item, platform)
            best_weights[key] = max(best_weights.get(key, 0.0), weight)
            best_kinds[key] = max(best_kinds.get(key, 0.0), kind_weight(item.kind))

        # Time uses every submission, duplicates included
        timestamps = [item.timestamp for item in accepted]
        earliest, latest = min(timestamps), max(timestamps)
        span_days = (latest - earliest).total_seconds() / SECONDS_PER_DAY
        days_since_latest = max(0.0, (now - latest).total_seconds() / SECONDS_PER_DAY)

        distinct = len(best_weights)
        factors = {
            "time": time_factor(span_days),
            "volume": volume_factor(distinct),
            "quality": quality_factor(best_weights.values()),
            "recency": recency_factor(days_since_latest),
        }

        raw = (
            factors["time"] * MaturityWeights.TIME
            + factors["volume"] * MaturityWeights.VOLUME
            + factors["quality"] * MaturityWeights.QUALITY
            + factors["recency"] * MaturityWeights.RECENCY
        )
        score = max(0, min(100, round_half_up(raw * 100)))

        # ── Single-source cap ────────────────────────────────────────
        capped = distinct <= 1 and score > SINGLE_SOURCE_MAX_SCORE
        if capped:
            score = SINGLE_SOURCE_MAX_SCORE

        tier = tier_for_score(score)
        result = SkillCredibilityResult(
            skill_id=skill_id,
            score=score,
            tier=tier,
            factor_breakdown=FactorBreakdown(
                **{name: round(value, 4) for name, value in factors.items()}
            ),
            evidence_count=distinct,
            submission_count=len(accepted),
            single_source_capped=capped,
            recency_status=recency_status(days_since_latest),
            confidence=evidence_confidence(best_kinds.values()),
            explanation=self._build_explanation(
                skill_id, score, tier, distinct, factors, capped, len(rejected)
            ),
            rejected=rejected,
        )

        logger.info(
            "Skill %s: %d/100 (%s), %d distinct of %d submission(s)",
            skill_id, score, tier.value, distinct, len(accepted),
        )
        return result

    def compute_all(
        self,
        skill_ids: Sequence[str],
        evidence: Iterable[Evidence],
        now: Optional[datetime] = None,
    ) -> list[SkillCredibilityResult]:
        """Score every skill against the evidence that references it.

        Batch mode routes evidence by ``skill_refs`` only, so items with
        empty ``skill_refs`` belong to no skill here and are skipped
        without being reported. Score them with ``compute`` for the
        skill they were submitted under.
        """
        items = list(evidence)
        results: list[SkillCredibilityResult] = []
        for skill_id in skill_ids:
            relevant = [
                e for e in items
                if isinstance(e, Evidence) and skill_id in e.skill_refs
            ]
            results.append(self.compute(skill_id, relevant, now=now))
        return results

    @staticmethod
    def _partition(
        skill_id: str,
        evidence: Iterable[Evidence],
    ) -> tuple[list[Evidence], list[RejectedEvidence]]:
        accepted: list[Evidence] = []
        rejected: list[RejectedEvidence] = []
        for item in evidence or ():
            if not isinstance(item, Evidence):
                rejected.append(RejectedEvidence(
                    evidence_id=str(getattr(item, "id", "?")),
                    reason="not an evidence record",
                ))
            elif item.skill_refs and skill_id not in item.skill_refs:
                rejected.append(RejectedEvidence(
                    evidence_id=item.id,
                    reason=f"references {', '.join(sorted(item.skill_refs))}, not {skill_id}",
                ))
            else:
                accepted.append(item)
        rejected.sort(key=lambda r: r.evidence_id)
        return accepted, rejected

    @staticmethod
    def _build_explanation(
        skill_id: str,
        score: int,
        tier: Tier,
        distinct: int,
        factors: dict[str, float],
        capped: bool,
        rejected_count: int,
    ) -> str:
        """Build a human-readable explanation of the score."""
        parts = [
            f"Credibility: {tier.value} ({score}/100) for {skill_id} "
            f"from {distinct} distinct item(s)."
        ]

        ranked = sorted(factors.items(), key=lambda kv: (-kv[1], kv[0]))
        best_name, best_value = ranked[0]
        worst_name, worst_value = ranked[-1]
        parts.append(f"Strongest factor: {_FACTOR_LABELS[best_name]} ({best_value:.2f}).")
        if worst_value < 0.3:
            parts.append(f"Area for improvement: {_FACTOR_LABELS[worst_name]} ({worst_value:.2f}).")

        if capped:
            parts.append("Single-source claim capped below Proven.")
        if rejected_count:
            parts.append(f"{rejected_count} item(s) rejected.")

        return " ".join(parts)


_default_engine = SkillMaturityEngine()


def compute_skill_score(
    skill_id: str,
    evidence: Iterable[Evidence],
    now: Optional[datetime] = None,
) -> SkillCredibilityResult:
    return _default_engine.compute(skill_id, evidence, now=now)


def compute_all_skill_scores(
    skill_ids: Sequence[str],
    evidence: Iterable[Evidence],
    now: Optional[datetime] = None,
) -> list[SkillCredibilityResult]:
    return _default_engine.compute_all(skill_ids, evidence, now=now)
