"""
Backend — Shared Configuration
================================

Runtime settings read from the environment (and an optional ``.env``
file at the project root).

Variables:
    CREDIBILITY_SEED_FILE   — JSON seed for the in-memory evidence store
    GITHUB_TOKEN            — token for GitHub proof checks
    VERIFY_TIMEOUT_SECONDS  — HTTP timeout for proof checks
    LOG_LEVEL               — root logging level (default INFO)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

logger = logging.getLogger("backend.config")

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseModel):
    seed_file: Optional[Path] = None
    github_token: Optional[str] = None
    verify_timeout_seconds: float = Field(default=10.0, gt=0)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        seed = os.environ.get("CREDIBILITY_SEED_FILE")
        return cls(
            seed_file=Path(seed) if seed else None,
            github_token=os.environ.get("GITHUB_TOKEN") or None,
            verify_timeout_seconds=float(os.environ.get("VERIFY_TIMEOUT_SECONDS", "10")),
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )


def load_settings(env_file: Path | None = None) -> Settings:
    """Load ``.env`` (without overriding real env vars) and build Settings."""
    load_dotenv(env_file or PROJECT_ROOT / ".env")
    settings = Settings.from_env()
    logger.debug("Settings loaded — seed file: %s", settings.seed_file)
    return settings
