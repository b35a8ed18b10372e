"""Verification Engine — Package."""

from verification_engine.platform_detector import PlatformDetector, detect
from verification_engine.proof_verifier import ProofCheck, ProofVerifier

__all__ = [
    "PlatformDetector",
    "ProofCheck",
    "ProofVerifier",
    "detect",
]
