"""Tests for profile-level credibility aggregation."""

from __future__ import annotations

import itertools

from reputation_engine.engine import ProfileCredibilityAggregator, aggregate_profile
from skill_scoring.models import SkillCredibilityResult, Tier
from skill_scoring.rules import tier_for_score


def _result(skill_id: str, score: int) -> SkillCredibilityResult:
    return SkillCredibilityResult(skill_id=skill_id, score=score, tier=tier_for_score(score))


def test_empty_profile() -> None:
    profile = aggregate_profile([])
    assert profile.overall_score == 0
    assert profile.tier == Tier.UNVERIFIED
    assert profile.total_skills_count == 0
    assert profile.top_skill_id is None
    assert set(profile.tier_counts.values()) == {0}


def test_mean_counts_and_top_skill() -> None:
    profile = aggregate_profile([_result("rust", 80), _result("go", 55), _result("zig", 24)])
    assert profile.overall_score == 53
    assert profile.tier == Tier.EMERGING
    assert profile.proven_skills_count == 2
    assert profile.total_skills_count == 3
    assert profile.top_skill_id == "rust"
    assert profile.tier_counts == {
        Tier.UNVERIFIED: 1,
        Tier.EMERGING: 0,
        Tier.PROVEN: 1,
        Tier.EXPERT: 1,
    }


def test_mean_rounds_half_up() -> None:
    assert aggregate_profile([_result("a", 50), _result("b", 51)]).overall_score == 51


def test_top_skill_ties_break_on_id() -> None:
    assert aggregate_profile([_result("b", 70), _result("a", 70)]).top_skill_id == "a"


def test_commutative() -> None:
    results = [_result("rust", 89), _result("go", 36), _result("ts", 61)]
    summaries = {
        ProfileCredibilityAggregator().aggregate(perm).model_dump_json()
        for perm in itertools.permutations(results)
    }
    assert len(summaries) == 1
