"""Tests for the Skill Maturity Engine."""

from __future__ import annotations

import math
from datetime import datetime

import pytest

from factories import NOW, make_evidence
from skill_scoring.engine import (
    SkillMaturityEngine,
    compute_all_skill_scores,
    compute_skill_score,
    evidence_confidence,
    quality_factor,
    recency_factor,
    time_factor,
    volume_factor,
)
from skill_scoring.models import EvidenceKind, RecencyStatus, Tier
from skill_scoring.rules import recency_status, round_half_up, tier_for_score
from verification_engine.platform_detector import GenericLinkMatcher, PlatformDetector

COMMIT_URL = "https://github.com/acme/widget/commit/abc1234"


# ---------------------------------------------------------------------------
# Reference examples
# ---------------------------------------------------------------------------

class TestReferenceExamples:

    def test_rust_publishes_reach_expert(self, rust_publishes) -> None:
        result = compute_skill_score("rust", rust_publishes, now=NOW)
        assert result.score == 89
        assert result.tier == Tier.EXPERT
        assert result.evidence_count == 5
        assert result.recency_status == RecencyStatus.ACTIVE
        assert not result.single_source_capped

    def test_go_single_old_commit_stays_below_proven(self, go_single_commit) -> None:
        result = compute_skill_score("go", go_single_commit, now=NOW)
        assert result.score == 36
        assert result.tier == Tier.EMERGING
        assert result.factor_breakdown.time == 0.0
        assert result.factor_breakdown.quality == 1.0
        assert result.recency_status == RecencyStatus.STALE

    def test_empty_is_zero_unverified(self) -> None:
        result = compute_skill_score("rust", [], now=NOW)
        assert result.score == 0
        assert result.tier == Tier.UNVERIFIED
        assert result.recency_status == RecencyStatus.DORMANT
        assert result.factor_breakdown.volume == 0.0


# ---------------------------------------------------------------------------
# Deduplication & the single-source cap
# ---------------------------------------------------------------------------

class TestDeduplication:

    def test_resubmitted_artifact_counts_once(self) -> None:
        evidence = [
            make_evidence("a", proof_ref=COMMIT_URL, days_ago=5),
            make_evidence("b", proof_ref=COMMIT_URL + "/", days_ago=1),
        ]
        result = compute_skill_score("rust", evidence, now=NOW)
        assert result.evidence_count == 1
        assert result.submission_count == 2

    def test_single_source_spread_over_time_is_capped(self) -> None:
        evidence = [
            make_evidence("a", proof_ref=COMMIT_URL, days_ago=730),
            make_evidence("b", proof_ref=COMMIT_URL, days_ago=0),
        ]
        result = compute_skill_score("rust", evidence, now=NOW)
        assert result.single_source_capped
        assert result.score == 54
        assert result.tier == Tier.EMERGING
        assert "capped" in result.explanation

    def test_items_without_canonical_id_are_distinct(self) -> None:
        evidence = [
            make_evidence("a", kind=EvidenceKind.LINK, proof_ref="https://example.com/x"),
            make_evidence("b", kind=EvidenceKind.LINK, proof_ref="https://example.com/x"),
        ]
        assert compute_skill_score("rust", evidence, now=NOW).evidence_count == 2

    def test_duplicate_group_uses_best_weight(self) -> None:
        weak = make_evidence("a", kind=EvidenceKind.MANUAL_CLAIM, proof_ref=COMMIT_URL)
        strong = make_evidence("b", kind=EvidenceKind.CODE_COMMIT, proof_ref=COMMIT_URL)
        result = compute_skill_score("rust", [weak, strong], now=NOW)
        assert result.factor_breakdown.quality == 1.0


# ---------------------------------------------------------------------------
# Contract checks
# ---------------------------------------------------------------------------

class TestContract:

    def test_foreign_skill_refs_are_rejected(self) -> None:
        evidence = [
            make_evidence("ok", proof_ref=COMMIT_URL, skill_refs={"rust"}),
            make_evidence("bad", proof_ref=COMMIT_URL, skill_refs={"python"}),
        ]
        result = compute_skill_score("rust", evidence, now=NOW)
        assert [r.evidence_id for r in result.rejected] == ["bad"]
        assert "python" in result.rejected[0].reason
        assert result.submission_count == 1

    def test_empty_skill_refs_are_accepted(self) -> None:
        result = compute_skill_score("rust", [make_evidence("a", proof_ref=COMMIT_URL)], now=NOW)
        assert result.rejected == []
        assert result.submission_count == 1

    def test_all_rejected_scores_zero(self) -> None:
        evidence = [make_evidence("bad", proof_ref=COMMIT_URL, skill_refs={"python"})]
        result = compute_skill_score("rust", evidence, now=NOW)
        assert result.score == 0
        assert len(result.rejected) == 1

    def test_non_evidence_items_are_rejected_not_raised(self) -> None:
        result = compute_skill_score("rust", ["garbage"], now=NOW)
        assert result.rejected[0].reason == "not an evidence record"


# ---------------------------------------------------------------------------
# Properties of the computation
# ---------------------------------------------------------------------------

class TestBehaviour:

    def test_order_independent(self, rust_publishes) -> None:
        forward = compute_skill_score("rust", rust_publishes, now=NOW)
        backward = compute_skill_score("rust", list(reversed(rust_publishes)), now=NOW)
        assert forward == backward

    def test_adding_commit_never_lowers_score(self, go_single_commit) -> None:
        before = compute_skill_score("go", go_single_commit, now=NOW)
        extra = make_evidence(
            "go-2", proof_ref="https://github.com/acme/gopher/commit/0123abc", days_ago=3,
        )
        after = compute_skill_score("go", go_single_commit + [extra], now=NOW)
        assert after.score >= before.score

    def test_naive_now_is_treated_as_utc(self, rust_publishes) -> None:
        naive = datetime(2025, 1, 1)
        assert compute_skill_score("rust", rust_publishes, now=naive).score == 89

    def test_custom_detector_changes_weighting(self, rust_publishes) -> None:
        engine = SkillMaturityEngine(detector=PlatformDetector(matchers=[GenericLinkMatcher()]))
        result = engine.compute("rust", rust_publishes, now=NOW)
        assert result.factor_breakdown.quality == pytest.approx(0.4)

    def test_explanation_names_strongest_factor(self, rust_publishes) -> None:
        result = compute_skill_score("rust", rust_publishes, now=NOW)
        assert "Expert (89/100)" in result.explanation
        assert "Strongest factor" in result.explanation


def test_compute_all_handles_shared_evidence() -> None:
    shared = make_evidence("shared", proof_ref=COMMIT_URL, skill_refs={"rust", "go"})
    only_go = make_evidence(
        "go", proof_ref="https://github.com/acme/gopher/commit/0123abc", skill_refs={"go"},
    )
    results = compute_all_skill_scores(["rust", "go", "zig"], [shared, only_go], now=NOW)
    counts = {r.skill_id: r.evidence_count for r in results}
    assert counts == {"rust": 1, "go": 2, "zig": 0}
    assert all(r.rejected == [] for r in results)


def test_compute_all_skips_evidence_without_skill_refs() -> None:
    untagged = make_evidence("untagged", proof_ref=COMMIT_URL)
    tagged = make_evidence(
        "tagged", proof_ref="https://github.com/acme/gopher/commit/0123abc", skill_refs={"rust"},
    )
    [result] = compute_all_skill_scores(["rust"], [untagged, tagged], now=NOW)
    assert result.submission_count == 1
    assert result.rejected == []
    assert compute_skill_score("rust", [untagged, tagged], now=NOW).submission_count == 2


# ---------------------------------------------------------------------------
# Curves & rules
# ---------------------------------------------------------------------------

class TestFactorCurves:

    def test_time_needs_at_least_a_day(self) -> None:
        assert time_factor(0.5) == 0.0
        assert time_factor(365) == pytest.approx(1 - math.exp(-1))

    def test_volume_diminishing_and_below_one(self) -> None:
        assert volume_factor(0) == 0.0
        gains = [volume_factor(n + 1) - volume_factor(n) for n in range(1, 6)]
        assert gains == sorted(gains, reverse=True)
        assert volume_factor(1000) <= 1.0

    def test_quality_is_mean_weight(self) -> None:
        assert quality_factor([1.0, 0.5]) == pytest.approx(0.75)
        assert quality_factor([]) == 0.0

    def test_recency_fresh_window(self) -> None:
        assert recency_factor(-3) == 1.0
        assert recency_factor(30) == 1.0
        assert recency_factor(210) == pytest.approx(math.exp(-1))


class TestRules:

    @pytest.mark.parametrize("score, tier", [
        (0, Tier.UNVERIFIED), (24, Tier.UNVERIFIED),
        (25, Tier.EMERGING), (54, Tier.EMERGING),
        (55, Tier.PROVEN), (79, Tier.PROVEN),
        (80, Tier.EXPERT), (100, Tier.EXPERT),
    ])
    def test_tier_boundaries(self, score: int, tier: Tier) -> None:
        assert tier_for_score(score) == tier

    def test_tier_ordering(self) -> None:
        assert Tier.UNVERIFIED < Tier.EMERGING < Tier.PROVEN < Tier.EXPERT
        assert max([Tier.PROVEN, Tier.EXPERT, Tier.EMERGING]) == Tier.EXPERT

    def test_round_half_up(self) -> None:
        assert round_half_up(44.5) == 45
        assert round_half_up(0.5) == 1
        assert round_half_up(44.49) == 44

    @pytest.mark.parametrize("days, status", [
        (0, RecencyStatus.ACTIVE), (90, RecencyStatus.ACTIVE),
        (91, RecencyStatus.RECENT), (365, RecencyStatus.MODERATE),
        (540, RecencyStatus.STALE), (541, RecencyStatus.DORMANT),
        (None, RecencyStatus.DORMANT),
    ])
    def test_recency_status(self, days, status) -> None:
        assert recency_status(days) == status


# ---------------------------------------------------------------------------
# Evidence-density confidence
# ---------------------------------------------------------------------------

class TestConfidence:

    def test_reference_examples(self, rust_publishes, go_single_commit) -> None:
        assert compute_skill_score("rust", rust_publishes, now=NOW).confidence == 100
        assert compute_skill_score("go", go_single_commit, now=NOW).confidence == 20
        assert compute_skill_score("rust", [], now=NOW).confidence == 0

    def test_weighted_by_kind(self) -> None:
        claim = make_evidence("a", kind=EvidenceKind.MANUAL_CLAIM)
        link = make_evidence("b", kind=EvidenceKind.LINK, proof_ref="https://example.com/x")
        assert compute_skill_score("rust", [claim], now=NOW).confidence == 4
        assert compute_skill_score("rust", [claim, link], now=NOW).confidence == 13

    def test_duplicates_count_once(self) -> None:
        evidence = [
            make_evidence("a", proof_ref=COMMIT_URL),
            make_evidence("b", proof_ref=COMMIT_URL),
        ]
        assert compute_skill_score("rust", evidence, now=NOW).confidence == 20

    def test_grows_with_evidence_and_saturates(self) -> None:
        values = []
        for n in range(1, 9):
            evidence = [
                make_evidence(f"e{i}", proof_ref=f"https://github.com/acme/w/commit/abc{i:04d}")
                for i in range(n)
            ]
            values.append(compute_skill_score("rust", evidence, now=NOW).confidence)
        assert values == sorted(values)
        assert values[-1] == 100

    def test_confidence_helper_is_clamped(self) -> None:
        assert evidence_confidence([]) == 0
        assert evidence_confidence([1.0] * 50) == 100
