"""
Reputation Engine — Profile Credibility Aggregation
====================================================

Combines per-skill credibility results into one profile-level summary.

Capabilities:
    • Overall score (arithmetic mean of skill scores)
    • Credibility tier from the overall score
    • Proven-vs-total skill counts
    • Per-tier distribution and top skill

The reduction is commutative and associative: the summary never depends
on the order in which skills were fetched or iterated.
"""

from __future__ import annotations

import logging
from typing import Iterable

from skill_scoring.models import (
    ProfileCredibility,
    SkillCredibilityResult,
    Tier,
)
from skill_scoring.rules import tier_for_score

logger = logging.getLogger("reputation_engine")


class ProfileCredibilityAggregator:
    """Aggregates SkillCredibilityResults into a ProfileCredibility."""

    def aggregate(
        self,
        results: Iterable[SkillCredibilityResult],
    ) -> ProfileCredibility:
        results = list(results)
        if not results:
            return ProfileCredibility(
                overall_score=0,
                tier=Tier.UNVERIFIED,
                proven_skills_count=0,
                total_skills_count=0,
                tier_counts={tier: 0 for tier in Tier},
            )

        # ── Mean score, rounded half-up in exact integer arithmetic ──
        total = sum(r.score for r in results)
        count = len(results)
        overall_score = (2 * total + count) // (2 * count)

        tier_counts = {tier: 0 for tier in Tier}
        for r in results:
            tier_counts[r.tier] += 1

        proven = sum(1 for r in results if r.tier >= Tier.PROVEN)

        # Highest score wins; ties go to the smallest skill id
        top = min(results, key=lambda r: (-r.score, r.skill_id))

        profile = ProfileCredibility(
            overall_score=overall_score,
            tier=tier_for_score(overall_score),
            proven_skills_count=proven,
            total_skills_count=count,
            tier_counts=tier_counts,
            top_skill_id=top.skill_id,
        )

        logger.info(
            "Profile credibility: %d (%s), %d/%d skills proven",
            overall_score, profile.tier.value, proven, count,
        )
        return profile


_default_aggregator = ProfileCredibilityAggregator()


def aggregate_profile(
    results: Iterable[SkillCredibilityResult],
) -> ProfileCredibility:
    return _default_aggregator.aggregate(results)
