"""Tests for skill insight generation."""

from __future__ import annotations

from factories import NOW, make_evidence
from skill_scoring.insights import analyze_skill
from skill_scoring.models import EvidenceKind, InsightType


def _titles(insights) -> list[str]:
    return [i.title for i in insights]


def test_no_evidence() -> None:
    insights = analyze_skill("Rust", [], now=NOW)
    assert _titles(insights) == ["No Evidence"]
    assert insights[0].type == InsightType.WARNING


def test_single_old_commit(go_single_commit) -> None:
    insights = analyze_skill("Go", go_single_commit, now=NOW)
    assert _titles(insights) == ["Single Source", "Stale Evidence", "Limited Project Coverage"]
    assert "Go" in insights[0].description


def test_only_weak_kinds() -> None:
    evidence = [
        make_evidence("a", kind=EvidenceKind.MANUAL_CLAIM),
        make_evidence("b", kind=EvidenceKind.DOCUMENT),
    ]
    assert _titles(analyze_skill("Rust", evidence, now=NOW)) == [
        "Weak Evidence Type",
        "Limited Project Coverage",
        "No Deployments",
    ]


def test_nothing_independently_checkable() -> None:
    evidence = [
        make_evidence(f"l{i}", kind=EvidenceKind.LINK, proof_ref=f"https://example.com/{i}", project_id=f"p{i}")
        for i in range(3)
    ]
    assert "Nothing Independently Checkable" in _titles(analyze_skill("Rust", evidence, now=NOW))


def test_missing_deployment_is_only_hint(rust_publishes) -> None:
    assert _titles(analyze_skill("Rust", rust_publishes, now=NOW)) == ["No Deployments"]


def test_well_substantiated(rust_publishes) -> None:
    deploy = make_evidence(
        "d", kind=EvidenceKind.DEPLOYMENT, proof_ref="https://serde-4f2a9c1.vercel.app", days_ago=2,
    )
    insights = analyze_skill("Rust", rust_publishes + [deploy], now=NOW)
    assert _titles(insights) == ["Well Substantiated"]
    assert insights[0].type == InsightType.POSITIVE


def test_sorted_by_priority(go_single_commit) -> None:
    priorities = [i.priority for i in analyze_skill("Go", go_single_commit, now=NOW)]
    assert priorities == sorted(priorities)
