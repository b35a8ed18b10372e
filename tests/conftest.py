"""Shared fixtures for credibility engine tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from factories import NOW, make_evidence
from skill_scoring.models import Evidence, EvidenceKind


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def rust_publishes() -> list[Evidence]:
    """Five versioned crate publishes spread over two years."""
    return [
        make_evidence(
            f"rust-{i}",
            kind=EvidenceKind.PACKAGE_PUBLISH,
            proof_ref=f"https://crates.io/crates/serde/1.0.{i}",
            skill_refs={"rust"},
            days_ago=days,
            project_id=f"proj-{i % 2}",
        )
        for i, days in enumerate((730, 550, 370, 190, 10))
    ]


@pytest.fixture
def go_single_commit() -> list[Evidence]:
    return [
        make_evidence(
            "go-1",
            kind=EvidenceKind.CODE_COMMIT,
            proof_ref="https://github.com/acme/gopher/commit/4f2a9c1d8e7b6a5f4e3d2c1b0a9f8e7d6c5b4a39",
            skill_refs={"go"},
            days_ago=400,
        )
    ]
