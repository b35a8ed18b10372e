"""Tests for per-item evidence weighting."""

from __future__ import annotations

import pytest

from factories import make_evidence
from skill_scoring.models import EvidenceKind, VerificationStatus
from skill_scoring.rules import MAX_EVIDENCE_WEIGHT
from skill_scoring.scorer import kind_weight, score_evidence, verification_multiplier
from verification_engine.platform_detector import detect

COMMIT_URL = "https://github.com/acme/widget/commit/abc1234"


def _weight(kind: EvidenceKind, proof_ref: str | None, **kwargs) -> float:
    evidence = make_evidence("e", kind=kind, proof_ref=proof_ref, **kwargs)
    return score_evidence(evidence, detect(proof_ref))


class TestScoreEvidence:

    def test_high_confidence_commit_is_max_weight(self) -> None:
        assert _weight(EvidenceKind.CODE_COMMIT, COMMIT_URL) == pytest.approx(MAX_EVIDENCE_WEIGHT)

    def test_medium_confidence_deployment(self) -> None:
        assert _weight(EvidenceKind.DEPLOYMENT, "https://my-app.vercel.app") == pytest.approx(0.8 * 0.7)

    def test_generic_link_is_low_confidence(self) -> None:
        assert _weight(EvidenceKind.LINK, "https://example.com/post") == pytest.approx(0.45 * 0.4)

    def test_unparsable_proof_gets_floor_multiplier(self) -> None:
        assert _weight(EvidenceKind.MANUAL_CLAIM, None) == pytest.approx(0.2 * 0.1)

    def test_failed_verification_discounts(self) -> None:
        w = _weight(
            EvidenceKind.CODE_COMMIT, COMMIT_URL,
            verification_status=VerificationStatus.FAILED,
        )
        assert w == pytest.approx(0.25)

    def test_verified_and_unchecked_weigh_the_same(self) -> None:
        verified = _weight(
            EvidenceKind.CODE_COMMIT, COMMIT_URL,
            verification_status=VerificationStatus.VERIFIED,
        )
        assert verified == _weight(EvidenceKind.CODE_COMMIT, COMMIT_URL)

    def test_stronger_kinds_outrank_weaker(self) -> None:
        ref = "https://example.com/post"
        assert (
            _weight(EvidenceKind.CODE_COMMIT, ref)
            > _weight(EvidenceKind.DEPLOYMENT, ref)
            > _weight(EvidenceKind.DOCUMENT, ref)
            > _weight(EvidenceKind.MANUAL_CLAIM, ref)
        )

    def test_missing_platform_uses_floor(self) -> None:
        evidence = make_evidence("e", kind=EvidenceKind.CODE_COMMIT)
        assert score_evidence(evidence, None) == pytest.approx(0.1)


class TestMalformedInput:

    def test_unknown_kind_gets_lowest_weight(self) -> None:
        assert kind_weight("telepathy") == pytest.approx(0.2)
        assert kind_weight(None) == pytest.approx(0.2)

    def test_unknown_status_is_neutral(self) -> None:
        assert verification_multiplier("maybe") == 1.0

    def test_non_evidence_object_does_not_raise(self) -> None:
        assert score_evidence(object(), detect(None)) == pytest.approx(0.02)
