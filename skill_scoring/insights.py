"""
Skill Scoring — Skill Insights
===============================

Turns a skill's evidence mix into short, prioritized hints telling the
profile owner what would strengthen the claim.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional

from skill_scoring.models import (
    Evidence,
    EvidenceKind,
    InsightType,
    SkillInsight,
    as_utc,
)
from skill_scoring.engine import dedup_key
from skill_scoring.rules import STALE_AFTER_DAYS
from verification_engine.platform_detector import detect

WEAK_KINDS = {EvidenceKind.MANUAL_CLAIM, EvidenceKind.DOCUMENT}


def analyze_skill(
    skill_name: str,
    evidence: Iterable[Evidence],
    now: Optional[datetime] = None,
) -> list[SkillInsight]:
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    items = [e for e in evidence if isinstance(e, Evidence)]
    insights: list[SkillInsight] = []

    if not items:
        return [SkillInsight(
            type=InsightType.WARNING,
            title="No Evidence",
            description=f"Add proof of your {skill_name} work to build credibility.",
            priority=1,
        )]

    if all(e.kind in WEAK_KINDS for e in items):
        insights.append(SkillInsight(
            type=InsightType.WARNING,
            title="Weak Evidence Type",
            description="Only claims and documents exist. Link commits, packages or deployments for stronger proof.",
            priority=2,
        ))

    platforms = [detect(e.proof_ref) for e in items]
    distinct = {dedup_key(e, p) for e, p in zip(items, platforms)}
    if len(distinct) == 1:
        insights.append(SkillInsight(
            type=InsightType.WARNING,
            title="Single Source",
            description=f"{skill_name} rests on one artifact. A second independent proof is needed to reach Proven.",
            priority=3,
        ))

    latest = max(e.timestamp for e in items)
    if (now - latest).days > STALE_AFTER_DAYS:
        insights.append(SkillInsight(
            type=InsightType.WARNING,
            title="Stale Evidence",
            description="No proof in the last 12 months. Add fresh work to show continued expertise.",
            priority=4,
        ))

    projects = {e.project_id for e in items if e.project_id}
    if len(projects) < 2:
        insights.append(SkillInsight(
            type=InsightType.SUGGESTION,
            title="Limited Project Coverage",
            description=f"{skill_name} appears in {len(projects)} project(s). Show usage across multiple projects.",
            priority=5,
        ))

    if len(items) >= 2 and not any(e.kind == EvidenceKind.DEPLOYMENT for e in items):
        insights.append(SkillInsight(
            type=InsightType.SUGGESTION,
            title="No Deployments",
            description=f"Add a live deployment to demonstrate working {skill_name} implementations.",
            priority=6,
        ))

    if len(items) >= 3 and not any(p.is_independently_checkable for p in platforms):
        insights.append(SkillInsight(
            type=InsightType.SUGGESTION,
            title="Nothing Independently Checkable",
            description="Link a repository, a published package or a content hash so the proof can be verified.",
            priority=7,
        ))

    if not insights:
        insights.append(SkillInsight(
            type=InsightType.POSITIVE,
            title="Well Substantiated",
            description=f"{skill_name} is backed by recent, varied and checkable proof.",
            priority=8,
        ))

    return sorted(insights, key=lambda i: i.priority)
