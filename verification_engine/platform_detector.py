"""
Verification Engine — Platform Detector
========================================

Classifies a raw proof reference (URL or hash) into the platform that
issued it and extracts a canonical identifier for deduplication.

Matchers run in a fixed order and the first match wins:
    1. Source-control host   (github, gitlab, bitbucket, codeberg)
    2. Deployment host       (vercel, netlify, heroku, pages, ...)
    3. Package registry      (npm, pypi, crates, rubygems, go, nuget)
    4. Content hash          (sha256 / sha512 hex token anywhere)
    5. Generic link          (any other http(s) URL)
    6. None                  (empty or unparsable input)

Precedence is positional, never "most specific": some hosts appear
inside other hosts' URLs (pkg.go.dev/github.com/...), and a fixed order
keeps the function total and deterministic.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence
from urllib.parse import unquote, urlsplit

from pydantic import BaseModel

from skill_scoring.models import Confidence, DetectedPlatform, Platform
from skill_scoring.rules import (
    DEPLOYMENT_HOST_SUFFIXES,
    HASH_PROOF_LENGTHS,
    SOURCE_CONTROL_HOSTS,
    SOURCE_CONTROL_REF_SEGMENTS,
)

logger = logging.getLogger("verification.detector")

_SCHEMELESS_HOST_RE = re.compile(r"^[a-z0-9-]+(?:\.[a-z0-9-]+)+(?:[/:]|$)", re.I)
_HOST_RE = re.compile(
    r"^(?:[a-z0-9](?:[a-z0-9-]*[a-z0-9])?\.)+[a-z]{2,63}$"
    r"|^localhost$"
    r"|^\d{1,3}(?:\.\d{1,3}){3}$"
)
_HASH_RE = re.compile(
    r"(?<![0-9a-fA-F])(?:0x)?([0-9a-fA-F]{%d}|[0-9a-fA-F]{%d})(?![0-9a-fA-F])"
    % (max(HASH_PROOF_LENGTHS), min(HASH_PROOF_LENGTHS))
)
_NETLIFY_DEPLOY_RE = re.compile(r"^([0-9a-f]{24})--(.+)$")
_HEX_BUILD_RE = re.compile(r"^[0-9a-f]{7,40}$")
_VERCEL_BUILD_RE = re.compile(r"^[a-z0-9]{9}$")


# ─────────────────────────────────────────────────────────────────────────────
# Normalization
# ─────────────────────────────────────────────────────────────────────────────
class NormalizedRef(BaseModel):
    """A proof reference prepared for matching.

    ``raw`` is the trimmed input. ``url``, ``host`` and ``segments`` are
    only set when the input is a syntactically valid http(s) URL; the host
    is lowercased with any ``www.`` prefix removed, and the query string,
    fragment and trailing slashes are dropped.
    """
    raw: str
    url: Optional[str] = None
    host: Optional[str] = None
    segments: tuple[str, ...] = ()


def normalize_ref(proof_ref: str | None) -> NormalizedRef:
    raw = proof_ref.strip() if isinstance(proof_ref, str) else ""
    if not raw or any(ch.isspace() for ch in raw):
        return NormalizedRef(raw=raw)

    candidate = raw
    if "://" not in candidate and _SCHEMELESS_HOST_RE.match(candidate):
        candidate = "https://" + candidate

    try:
        parts = urlsplit(candidate)
        host = (parts.hostname or "").lower()
    except ValueError:
        return NormalizedRef(raw=raw)

    if parts.scheme.lower() not in ("http", "https") or not _HOST_RE.match(host):
        return NormalizedRef(raw=raw)

    if host.startswith("www."):
        host = host[4:]

    path = parts.path.rstrip("/")
    segments = tuple(unquote(s) for s in path.split("/") if s)
    return NormalizedRef(
        raw=raw,
        url=f"{parts.scheme.lower()}://{host}{path}",
        host=host,
        segments=segments,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Matchers
# ─────────────────────────────────────────────────────────────────────────────
class PlatformMatcher:
    """One independent pattern in the detector chain."""

    platform: Platform = Platform.NONE

    def match(self, ref: NormalizedRef) -> DetectedPlatform | None:
        raise NotImplementedError


class SourceControlMatcher(PlatformMatcher):
    """``host/owner/repo[/commit/<sha> | /tree/<ref>/<path> | /<path>]``."""

    platform = Platform.SOURCE_CONTROL

    def match(self, ref: NormalizedRef) -> DetectedPlatform | None:
        provider = SOURCE_CONTROL_HOSTS.get(ref.host or "")
        if provider is None or len(ref.segments) < 2:
            return None

        owner = ref.segments[0].lower()
        repo = ref.segments[1].lower()
        if repo.endswith(".git"):
            repo = repo[:-4]
        if not repo:
            return None

        rest = list(ref.segments[2:])
        if rest and rest[0] == "-":  # gitlab: /owner/repo/-/commit/<sha>
            rest = rest[1:]

        pinned_ref: str | None = None
        path: list[str] = []
        if rest:
            head = rest[0].lower()
            if head in SOURCE_CONTROL_REF_SEGMENTS and len(rest) >= 2:
                pinned_ref, path = rest[1], rest[2:]
            elif head == "releases" and len(rest) >= 3 and rest[1].lower() == "tag":
                pinned_ref = rest[2]
            else:
                path = rest

        canonical = f"{owner}/{repo}"
        if path:
            canonical += "/" + "/".join(path)
        if pinned_ref:
            canonical += "@" + pinned_ref

        return DetectedPlatform(
            platform=self.platform,
            confidence=Confidence.HIGH if (pinned_ref or path) else Confidence.MEDIUM,
            canonical_id=canonical,
            provider=provider,
            host=ref.host,
        )


class DeploymentMatcher(PlatformMatcher):
    """Hosted deployments, identified by host suffix."""

    platform = Platform.DEPLOYMENT

    def match(self, ref: NormalizedRef) -> DetectedPlatform | None:
        host = ref.host or ""
        for suffix, provider in DEPLOYMENT_HOST_SUFFIXES.items():
            if not host.endswith("." + suffix):
                continue
            label = host[: -len(suffix) - 1]
            slug, build_hash = _split_build_hash(label)

            # user.github.io/project serves one site per repository
            if provider == "github-pages" and ref.segments:
                slug = f"{slug}/{ref.segments[0].lower()}"

            canonical = f"{slug}@{build_hash}" if build_hash else slug
            return DetectedPlatform(
                platform=self.platform,
                confidence=Confidence.HIGH if build_hash else Confidence.MEDIUM,
                canonical_id=canonical,
                provider=provider,
                host=host,
            )
        return None


def _is_hex_build(token: str) -> bool:
    return bool(_HEX_BUILD_RE.match(token)) and any(c.isdigit() for c in token)


def _is_build_token(token: str) -> bool:
    """Hex commit/deploy id, or Vercel's 9-character preview id."""
    if _is_hex_build(token):
        return True
    return (
        bool(_VERCEL_BUILD_RE.match(token))
        and any(c.isdigit() for c in token)
        and any(c.isalpha() for c in token)
    )


def _split_build_hash(label: str) -> tuple[str, str | None]:
    """Split a deployment host label into (project slug, build hash)."""
    netlify = _NETLIFY_DEPLOY_RE.match(label)
    if netlify:
        return netlify.group(2), netlify.group(1)

    # <hash>.<project>.pages.dev
    if "." in label:
        first, _, remainder = label.partition(".")
        if _is_hex_build(first):
            return remainder, first
        return label, None

    # <project>-<hash>-<scope>.vercel.app; the hash never ends the label
    tokens = label.split("-")
    for idx in range(1, len(tokens) - 1):
        if _is_build_token(tokens[idx]):
            return "-".join(tokens[:idx]), tokens[idx]
    return label, None


class PackageRegistryMatcher(PlatformMatcher):
    """Package pages on the public registries."""

    platform = Platform.PACKAGE_REGISTRY

    def match(self, ref: NormalizedRef) -> DetectedPlatform | None:
        parser = _REGISTRY_PARSERS.get(ref.host or "")
        if parser is None:
            return None
        provider, parse = parser
        parsed = parse(ref.segments)
        if parsed is None:
            return None

        name, version = parsed
        return DetectedPlatform(
            platform=self.platform,
            confidence=Confidence.HIGH if version else Confidence.MEDIUM,
            canonical_id=f"{name}@{version}" if version else name,
            provider=provider,
            host=ref.host,
        )


def _parse_npm(segments: Sequence[str]) -> tuple[str, str | None] | None:
    # /package/<name>[/v/<version>], /package/@scope/<name>[/v/<version>]
    if len(segments) < 2 or segments[0] != "package":
        return None
    if segments[1].startswith("@"):
        if "/" in segments[1]:  # @scope%2Fname
            name, rest = segments[1], list(segments[2:])
        elif len(segments) >= 3:
            name, rest = f"{segments[1]}/{segments[2]}", list(segments[3:])
        else:
            return None
    else:
        name, rest = segments[1], list(segments[2:])
    version = rest[1] if len(rest) >= 2 and rest[0] == "v" else None
    return name.lower(), version


def _parse_pypi(segments: Sequence[str]) -> tuple[str, str | None] | None:
    # /project/<name>[/<version>]
    if len(segments) < 2 or segments[0] != "project":
        return None
    name = re.sub(r"[-_.]+", "-", segments[1]).lower()
    return name, segments[2] if len(segments) >= 3 else None


def _parse_crates(segments: Sequence[str]) -> tuple[str, str | None] | None:
    # /crates/<name>[/<version>]
    if len(segments) < 2 or segments[0] != "crates":
        return None
    return segments[1].lower(), segments[2] if len(segments) >= 3 else None


def _parse_rubygems(segments: Sequence[str]) -> tuple[str, str | None] | None:
    # /gems/<name>[/versions/<version>]
    if len(segments) < 2 or segments[0] != "gems":
        return None
    version = segments[3] if len(segments) >= 4 and segments[2] == "versions" else None
    return segments[1], version


def _parse_go(segments: Sequence[str]) -> tuple[str, str | None] | None:
    # /<module path>[@<version>]
    if not segments:
        return None
    module = "/".join(segments)
    if "@" in module:
        module, version = module.rsplit("@", 1)
        return module, version or None
    return module, None


def _parse_nuget(segments: Sequence[str]) -> tuple[str, str | None] | None:
    # /packages/<name>[/<version>]
    if len(segments) < 2 or segments[0] != "packages":
        return None
    return segments[1].lower(), segments[2] if len(segments) >= 3 else None


_REGISTRY_PARSERS = {
    "npmjs.com": ("npm", _parse_npm),
    "pypi.org": ("pypi", _parse_pypi),
    "crates.io": ("crates", _parse_crates),
    "rubygems.org": ("rubygems", _parse_rubygems),
    "pkg.go.dev": ("go", _parse_go),
    "nuget.org": ("nuget", _parse_nuget),
}


class HashProofMatcher(PlatformMatcher):
    """A fixed-length hex digest anywhere in the reference."""

    platform = Platform.HASH_PROOF

    def match(self, ref: NormalizedRef) -> DetectedPlatform | None:
        # URLs are matched without their query string and fragment
        found = _HASH_RE.search(ref.url if ref.url is not None else ref.raw)
        if not found:
            return None
        digest = found.group(1).lower()
        return DetectedPlatform(
            platform=self.platform,
            confidence=Confidence.HIGH,
            canonical_id=digest,
            provider="sha512" if len(digest) == 128 else "sha256",
            host=ref.host,
        )


class GenericLinkMatcher(PlatformMatcher):
    """Any other syntactically valid http(s) URL."""

    platform = Platform.GENERIC_LINK

    def match(self, ref: NormalizedRef) -> DetectedPlatform | None:
        if ref.url is None:
            return None
        return DetectedPlatform(
            platform=self.platform,
            confidence=Confidence.LOW,
            host=ref.host,
        )


DEFAULT_MATCHERS: tuple[PlatformMatcher, ...] = (
    SourceControlMatcher(),
    DeploymentMatcher(),
    PackageRegistryMatcher(),
    HashProofMatcher(),
    GenericLinkMatcher(),
)


# ─────────────────────────────────────────────────────────────────────────────
# Detector
# ─────────────────────────────────────────────────────────────────────────────
class PlatformDetector:
    """Runs proof references through an ordered matcher chain.

    Usage:
        detector = PlatformDetector()
        detected = detector.detect("https://github.com/acme/widget/commit/abc123")
    """

    def __init__(self, matchers: Sequence[PlatformMatcher] | None = None) -> None:
        self.matchers = tuple(matchers) if matchers is not None else DEFAULT_MATCHERS

    def detect(self, proof_ref: str | None) -> DetectedPlatform:
        ref = normalize_ref(proof_ref)
        for matcher in self.matchers:
            result = matcher.match(ref)
            if result is not None:
                logger.debug(
                    "Detected %s (%s) for %r",
                    result.platform.value, result.confidence.value, ref.raw,
                )
                return result
        return DetectedPlatform(platform=Platform.NONE, confidence=Confidence.LOW)


_default_detector = PlatformDetector()


def detect(proof_ref: str | None) -> DetectedPlatform:
    """Classify ``proof_ref`` with the default matcher chain."""
    return _default_detector.detect(proof_ref)
