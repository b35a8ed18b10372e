"""
Backend — Evidence Store
==========================

The evidence store is the only source of truth; scores are derived from
it on every request and never written back.

``EvidenceStore`` is the read interface the routers depend on.
``InMemoryEvidenceStore`` serves a fixed snapshot, optionally loaded
from a JSON seed file of the form::

    {
      "profiles": {"alice": {"skills": {"rust": "Rust", "go": "Go"}}},
      "evidence": [
        {"id": "e1", "kind": "package-publish",
         "proof_ref": "https://crates.io/crates/serde/1.0.0",
         "skill_refs": ["rust"], "created_at": "2024-01-01T00:00:00Z"}
      ]
    }

Skill ids are unique across profiles.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Mapping, Protocol

from skill_scoring.exceptions import UnknownProfileError, UnknownSkillError
from skill_scoring.models import Evidence

logger = logging.getLogger("backend.store")


class EvidenceStore(Protocol):
    def fetch_evidence_for_skill(self, skill_id: str) -> list[Evidence]: ...

    def fetch_all_skills_for_profile(self, profile_id: str) -> list[str]: ...

    def skill_name(self, skill_id: str) -> str: ...


class InMemoryEvidenceStore:
    """Read-only snapshot of profiles, skills and evidence."""

    def __init__(
        self,
        profiles: Mapping[str, Mapping[str, str]] | None = None,
        evidence: Iterable[Evidence] = (),
    ) -> None:
        self._profiles: dict[str, dict[str, str]] = {
            pid: dict(skills) for pid, skills in (profiles or {}).items()
        }
        self._skill_names: dict[str, str] = {}
        for skills in self._profiles.values():
            self._skill_names.update(skills)
        self._evidence: tuple[Evidence, ...] = tuple(evidence)

    @classmethod
    def from_seed(cls, data: Mapping) -> "InMemoryEvidenceStore":
        profiles = {
            pid: body.get("skills", {})
            for pid, body in data.get("profiles", {}).items()
        }
        evidence = [Evidence.model_validate(item) for item in data.get("evidence", [])]
        return cls(profiles=profiles, evidence=evidence)

    @classmethod
    def from_file(cls, path: Path) -> "InMemoryEvidenceStore":
        with open(path, encoding="utf-8") as f:
            store = cls.from_seed(json.load(f))
        logger.info(
            "Loaded evidence store from %s — %d profile(s), %d evidence item(s)",
            path, len(store._profiles), len(store._evidence),
        )
        return store

    def _require_skill(self, skill_id: str) -> None:
        if skill_id not in self._skill_names:
            raise UnknownSkillError(skill_id)

    def fetch_evidence_for_skill(self, skill_id: str) -> list[Evidence]:
        self._require_skill(skill_id)
        return [
            e.model_copy(deep=True)
            for e in self._evidence
            if skill_id in e.skill_refs
        ]

    def fetch_all_skills_for_profile(self, profile_id: str) -> list[str]:
        if profile_id not in self._profiles:
            raise UnknownProfileError(profile_id)
        return sorted(self._profiles[profile_id])

    def skill_name(self, skill_id: str) -> str:
        self._require_skill(skill_id)
        return self._skill_names[skill_id]
