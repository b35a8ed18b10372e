"""Evidence builders shared across test modules."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from skill_scoring.models import Evidence, EvidenceKind, VerificationStatus

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_evidence(
    id: str,
    kind: EvidenceKind = EvidenceKind.CODE_COMMIT,
    proof_ref: str | None = None,
    skill_refs: set[str] | None = None,
    days_ago: float = 0,
    project_id: str | None = None,
    verification_status: VerificationStatus = VerificationStatus.UNCHECKED,
) -> Evidence:
    """Build an Evidence record that happened ``days_ago`` before NOW."""
    return Evidence(
        id=id,
        kind=kind,
        proof_ref=proof_ref,
        skill_refs=skill_refs if skill_refs is not None else set(),
        occurred_at=NOW - timedelta(days=days_ago),
        created_at=NOW,
        project_id=project_id,
        verification_status=verification_status,
    )
