"""Tests for the in-memory evidence store and runtime settings."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from backend.config import Settings, load_settings
from backend.store import InMemoryEvidenceStore
from skill_scoring.exceptions import UnknownProfileError, UnknownSkillError

SEED = {
    "profiles": {"alice": {"skills": {"rust": "Rust", "go": "Go"}}},
    "evidence": [
        {
            "id": "e1",
            "kind": "package-publish",
            "proof_ref": "https://crates.io/crates/serde/1.0.0",
            "skill_refs": ["rust"],
            "created_at": "2024-01-01T00:00:00Z",
        },
        {
            "id": "e2",
            "kind": "code-commit",
            "proof_ref": "https://github.com/acme/gopher/commit/abc1234",
            "skill_refs": ["go", "rust"],
            "created_at": "2024-02-01T00:00:00Z",
        },
    ],
}


@pytest.fixture
def seeded(tmp_path: Path) -> InMemoryEvidenceStore:
    seed_file = tmp_path / "seed.json"
    seed_file.write_text(json.dumps(SEED))
    return InMemoryEvidenceStore.from_file(seed_file)


class TestInMemoryEvidenceStore:

    def test_skills_for_profile(self, seeded) -> None:
        assert seeded.fetch_all_skills_for_profile("alice") == ["go", "rust"]

    def test_evidence_follows_skill_refs(self, seeded) -> None:
        assert [e.id for e in seeded.fetch_evidence_for_skill("rust")] == ["e1", "e2"]
        assert [e.id for e in seeded.fetch_evidence_for_skill("go")] == ["e2"]

    def test_returned_evidence_is_a_snapshot(self, seeded) -> None:
        first = seeded.fetch_evidence_for_skill("go")
        first[0].skill_refs.add("python")
        assert seeded.fetch_evidence_for_skill("go")[0].skill_refs == {"go", "rust"}

    def test_skill_name(self, seeded) -> None:
        assert seeded.skill_name("rust") == "Rust"

    def test_unknown_profile(self, seeded) -> None:
        with pytest.raises(UnknownProfileError):
            seeded.fetch_all_skills_for_profile("nobody")

    def test_unknown_skill(self, seeded) -> None:
        with pytest.raises(UnknownSkillError):
            seeded.fetch_evidence_for_skill("cobol")
        with pytest.raises(UnknownSkillError):
            seeded.skill_name("cobol")


ENV_VARS = ("CREDIBILITY_SEED_FILE", "GITHUB_TOKEN", "VERIFY_TIMEOUT_SECONDS", "LOG_LEVEL")


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    yield
    # load_dotenv writes straight into os.environ
    for var in ENV_VARS:
        os.environ.pop(var, None)


class TestSettings:

    def test_defaults(self, clean_env) -> None:
        settings = Settings.from_env()
        assert settings.seed_file is None
        assert settings.github_token is None
        assert settings.verify_timeout_seconds == 10.0
        assert settings.log_level == "INFO"

    def test_reads_dotenv_file(self, clean_env, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("GITHUB_TOKEN=t0k\nLOG_LEVEL=debug\nVERIFY_TIMEOUT_SECONDS=2.5\n")
        settings = load_settings(env_file)
        assert settings.github_token == "t0k"
        assert settings.log_level == "DEBUG"
        assert settings.verify_timeout_seconds == 2.5
