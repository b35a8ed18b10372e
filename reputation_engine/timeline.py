"""
Reputation Engine — Timeline Narrator
======================================

Turns evidence into one human-readable sentence per event, phrased by
evidence kind and by how confidently the proof was classified:

    high confidence → "Published version 1.2.0 of package serde for Rust, 10 days ago."
    otherwise       → "Added a supporting link for Rust, 3 weeks ago."

Narrated timelines are ordered by ascending ``occurred_at`` and marked
with milestones (first proof, fifth proof, first deployment, latest).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Iterable, Mapping, Optional

from skill_scoring.models import (
    Confidence,
    DetectedPlatform,
    Evidence,
    EvidenceKind,
    NarratedEvent,
    Platform,
    ProjectContext,
    as_utc,
)
from verification_engine.platform_detector import detect

MILESTONE_LABELS = {
    "FIRST_EVIDENCE": "First Proof",
    "FIFTH_EVIDENCE": "Fifth Proof",
    "FIRST_DEPLOYMENT": "First Deploy",
    "MOST_RECENT": "Latest",
}


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────
def _split_at(canonical: str) -> tuple[str, str | None]:
    """Split ``name@ref`` on the last ``@`` (scoped ``@scope/pkg`` stays whole)."""
    idx = canonical.rfind("@")
    if idx <= 0:
        return canonical, None
    return canonical[:idx], canonical[idx + 1:]


def _short_ref(ref: str) -> str:
    if len(ref) > 12 and all(c in "0123456789abcdef" for c in ref.lower()):
        return ref[:7]
    return ref


def relative_time(then: datetime, now: datetime) -> str:
    days = (as_utc(now) - as_utc(then)).days
    if days < 1:
        return "today"
    if days == 1:
        return "yesterday"
    if days < 7:
        return f"{days} days ago"
    if days < 30:
        weeks = days // 7
        return "1 week ago" if weeks == 1 else f"{weeks} weeks ago"
    if days < 365:
        months = max(1, days // 30)
        return "1 month ago" if months == 1 else f"{months} months ago"
    years = days // 365
    return "1 year ago" if years == 1 else f"{years} years ago"


# ─────────────────────────────────────────────────────────────────────────────
# Templates
# ─────────────────────────────────────────────────────────────────────────────
def _confident_commit(skill: str, p: DetectedPlatform) -> str:
    repo, ref = _split_at(p.canonical_id or "")
    if ref:
        return f"Committed {_short_ref(ref)} to {repo} for {skill}"
    return f"Contributed {skill} code to {repo}"


def _confident_package(skill: str, p: DetectedPlatform) -> str:
    name, version = _split_at(p.canonical_id or "")
    if version:
        return f"Published version {version} of package {name} for {skill}"
    return f"Published package {name} for {skill}"


def _confident_deployment(skill: str, p: DetectedPlatform) -> str:
    slug, build = _split_at(p.canonical_id or "")
    if build:
        return f"Shipped build {_short_ref(build)} of {slug} for {skill}"
    return f"Deployed {slug} for {skill}"


# Keyed by (kind, platform); a platform of None accepts any platform
CONFIDENT_TEMPLATES: dict[
    tuple[EvidenceKind, Optional[Platform]], Callable[[str, DetectedPlatform], str]
] = {
    (EvidenceKind.CODE_COMMIT, Platform.SOURCE_CONTROL): _confident_commit,
    (EvidenceKind.PACKAGE_PUBLISH, Platform.PACKAGE_REGISTRY): _confident_package,
    (EvidenceKind.DEPLOYMENT, Platform.DEPLOYMENT): _confident_deployment,
    (EvidenceKind.DOCUMENT, None): lambda skill, p: f"Documented {skill} work in {p.canonical_id}",
    (EvidenceKind.LINK, None): lambda skill, p: f"Linked verifiable {skill} proof at {p.canonical_id}",
}

HEDGED_TEMPLATES: dict[EvidenceKind, Callable[[str], str]] = {
    EvidenceKind.CODE_COMMIT: lambda skill: f"Added {skill} code work",
    EvidenceKind.PACKAGE_PUBLISH: lambda skill: f"Referenced a {skill} package",
    EvidenceKind.DEPLOYMENT: lambda skill: f"Linked a live {skill} deployment",
    EvidenceKind.DOCUMENT: lambda skill: f"Added a supporting document for {skill}",
    EvidenceKind.LINK: lambda skill: f"Added a supporting link for {skill}",
    EvidenceKind.MANUAL_CLAIM: lambda skill: f"Claimed {skill} experience",
}


def _action(evidence: Evidence, skill: str, platform: DetectedPlatform) -> str:
    confident = platform.confidence == Confidence.HIGH and platform.canonical_id
    if confident and evidence.kind != EvidenceKind.MANUAL_CLAIM:
        if platform.platform == Platform.HASH_PROOF:
            return f"Anchored {skill} proof with content hash {platform.canonical_id[:12]}"
        template = CONFIDENT_TEMPLATES.get(
            (evidence.kind, platform.platform),
            CONFIDENT_TEMPLATES.get((evidence.kind, None)),
        )
        if template is not None:
            return template(skill, platform)
    hedged = HEDGED_TEMPLATES.get(evidence.kind, HEDGED_TEMPLATES[EvidenceKind.LINK])
    return hedged(skill)


# ─────────────────────────────────────────────────────────────────────────────
# Narrator
# ─────────────────────────────────────────────────────────────────────────────
def narrate(
    evidence: Evidence,
    skill_name: str,
    context: Optional[ProjectContext] = None,
    now: Optional[datetime] = None,
) -> str:
    """One sentence describing what happened, for which skill, and when."""
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    skill = skill_name or "this skill"
    sentence = _action(evidence, skill, detect(evidence.proof_ref))
    if context is not None and context.project_title:
        sentence += f" in {context.project_title}"
    return f"{sentence}, {relative_time(evidence.timestamp, now)}."


def narrate_timeline(
    evidence: Iterable[Evidence],
    skill_name: str,
    context: Optional[ProjectContext] = None,
    now: Optional[datetime] = None,
    projects: Optional[Mapping[str, ProjectContext]] = None,
) -> list[NarratedEvent]:
    """Narrate a skill's evidence in ascending time order.

    ``projects`` maps ``project_id`` to a per-project context and wins
    over the shared ``context`` when an item's project is listed.
    """
    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    ordered = sorted(
        (e for e in evidence if isinstance(e, Evidence)),
        key=lambda e: (e.timestamp, e.id),
    )

    events: list[NarratedEvent] = []
    deployment_seen = False
    last = len(ordered) - 1
    for index, item in enumerate(ordered):
        item_context = context
        if projects and item.project_id in projects:
            item_context = projects[item.project_id]

        milestone: str | None = None
        if index == 0:
            milestone = "FIRST_EVIDENCE"
        elif index == last:
            milestone = "MOST_RECENT"
        elif index == 4:
            milestone = "FIFTH_EVIDENCE"

        if item.kind == EvidenceKind.DEPLOYMENT and not deployment_seen:
            deployment_seen = True
            if index != 0 and index != 4:
                milestone = "FIRST_DEPLOYMENT"

        events.append(NarratedEvent(
            evidence_id=item.id,
            occurred_at=item.timestamp,
            narrative=narrate(item, skill_name, item_context, now=now),
            milestone=milestone,
            milestone_label=MILESTONE_LABELS.get(milestone) if milestone else None,
        ))
    return events
