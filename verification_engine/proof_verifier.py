"""
Verification Engine — Proof Verifier
======================================

Shallow existence checks for proof references, driven by the
Platform Detector's classification.

Checks:
    • Source control   — GitHub repository (and commit, when pinned)
    • Package registry — npm, PyPI and crates.io registry JSON
    • Deployment / link — HEAD request answering below 400
    • Hash proof / none — not checkable remotely, left unchecked

A 404 from the authority marks the proof as failed. Rate limits,
server errors and transport failures leave it unchecked: an outage is
not evidence against the claim.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from skill_scoring.models import (
    DetectedPlatform,
    Evidence,
    Platform,
    VerificationStatus,
)
from verification_engine.platform_detector import (
    PlatformDetector,
    normalize_ref,
)

logger = logging.getLogger("verification.proof")

GITHUB_API = "https://api.github.com"
NPM_REGISTRY = "https://registry.npmjs.org"
PYPI_API = "https://pypi.org/pypi"
CRATES_API = "https://crates.io/api/v1/crates"

RATE_LIMIT_CODES = {403, 429}
MISSING_CODES = {404, 410}


class ProofCheck(BaseModel):
    """Outcome of checking one proof reference against its authority."""
    proof_ref: Optional[str] = None
    platform: DetectedPlatform
    status: VerificationStatus
    detail: str
    checked_url: Optional[str] = None


def _split_pinned(canonical: str) -> tuple[str, str | None]:
    idx = canonical.rfind("@")
    if idx <= 0:
        return canonical, None
    return canonical[:idx], canonical[idx + 1:]


class ProofVerifier:
    """Checks that a proof reference points at something that exists.

    Parameters
    ----------
    client:
        Shared ``httpx.AsyncClient``; the caller owns its lifecycle.
    github_token:
        Optional token for the GitHub REST API (raises rate limits).
    detector:
        Platform detector used to classify references.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        github_token: str | None = None,
        detector: PlatformDetector | None = None,
    ) -> None:
        self.client = client
        self.github_token = github_token
        self.detector = detector or PlatformDetector()

    def _github_headers(self) -> dict[str, str]:
        h = {"Accept": "application/vnd.github.v3+json"}
        if self.github_token:
            h["Authorization"] = f"token {self.github_token}"
        return h

    async def verify(self, proof_ref: str | None) -> ProofCheck:
        """Classify ``proof_ref`` and check it with the matching authority."""
        detected = self.detector.detect(proof_ref)

        if detected.platform == Platform.SOURCE_CONTROL:
            return await self._verify_source_control(proof_ref, detected)
        if detected.platform == Platform.PACKAGE_REGISTRY:
            return await self._verify_package(proof_ref, detected)
        if detected.platform in (Platform.DEPLOYMENT, Platform.GENERIC_LINK):
            url = normalize_ref(proof_ref).url
            return await self._check(proof_ref, detected, url, method="HEAD")

        return ProofCheck(
            proof_ref=proof_ref,
            platform=detected,
            status=VerificationStatus.UNCHECKED,
            detail="Not checkable remotely",
        )

    async def verify_evidence(self, evidence: Evidence) -> Evidence:
        """Return a copy of ``evidence`` carrying the checked status."""
        check = await self.verify(evidence.proof_ref)
        return evidence.model_copy(update={"verification_status": check.status})

    # ── Authorities ─────────────────────────────────────────────────────────
    async def _verify_source_control(
        self, proof_ref: str | None, detected: DetectedPlatform,
    ) -> ProofCheck:
        if detected.provider != "github":
            return ProofCheck(
                proof_ref=proof_ref,
                platform=detected,
                status=VerificationStatus.UNCHECKED,
                detail=f"No verifier for {detected.provider}",
            )

        location, pinned = _split_pinned(detected.canonical_id or "")
        owner, repo = location.split("/")[:2]

        repo_check = await self._check(
            proof_ref, detected,
            f"{GITHUB_API}/repos/{owner}/{repo}",
            headers=self._github_headers(),
        )
        if repo_check.status != VerificationStatus.VERIFIED or not pinned:
            return repo_check

        return await self._check(
            proof_ref, detected,
            f"{GITHUB_API}/repos/{owner}/{repo}/commits/{quote(pinned, safe='')}",
            headers=self._github_headers(),
        )

    async def _verify_package(
        self, proof_ref: str | None, detected: DetectedPlatform,
    ) -> ProofCheck:
        name, version = _split_pinned(detected.canonical_id or "")

        if detected.provider == "npm":
            url = f"{NPM_REGISTRY}/{quote(name, safe='@')}"
            if version:
                url += f"/{quote(version, safe='')}"
        elif detected.provider == "pypi":
            url = f"{PYPI_API}/{name}"
            if version:
                url += f"/{quote(version, safe='')}"
            url += "/json"
        elif detected.provider == "crates":
            url = f"{CRATES_API}/{name}"
            if version:
                url += f"/{quote(version, safe='')}"
        else:
            return ProofCheck(
                proof_ref=proof_ref,
                platform=detected,
                status=VerificationStatus.UNCHECKED,
                detail=f"No verifier for {detected.provider}",
            )

        return await self._check(proof_ref, detected, url)

    async def _check(
        self,
        proof_ref: str | None,
        detected: DetectedPlatform,
        url: str | None,
        method: str = "GET",
        headers: dict[str, str] | None = None,
    ) -> ProofCheck:
        def result(status: VerificationStatus, detail: str) -> ProofCheck:
            return ProofCheck(
                proof_ref=proof_ref,
                platform=detected,
                status=status,
                detail=detail,
                checked_url=url,
            )

        if url is None:
            return result(VerificationStatus.UNCHECKED, "No URL to check")

        try:
            r = await self.client.request(
                method, url, headers=headers, follow_redirects=True,
            )
        except httpx.HTTPError as exc:
            logger.warning("Proof check %s %s failed: %s", method, url, exc)
            return result(VerificationStatus.UNCHECKED, f"Request failed: {exc.__class__.__name__}")

        if r.status_code < 400:
            return result(VerificationStatus.VERIFIED, f"{r.status_code} from {r.url.host}")
        if r.status_code in MISSING_CODES:
            return result(VerificationStatus.FAILED, "Not found")
        if r.status_code in RATE_LIMIT_CODES:
            logger.warning("Rate limited by %s (%d)", r.url.host, r.status_code)
            return result(VerificationStatus.UNCHECKED, "Rate limited")
        if r.status_code >= 500:
            return result(VerificationStatus.UNCHECKED, f"Upstream error {r.status_code}")
        return result(VerificationStatus.FAILED, f"Rejected with {r.status_code}")
