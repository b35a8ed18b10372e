"""Credibility engine exception hierarchy.

The scoring path itself never raises; these are raised by the action
layer around it when a caller's request cannot be served.
"""


class CredibilityError(Exception):
    """Base exception for all credibility engine errors."""


class ContractViolationError(CredibilityError):
    """Raised when strict scoring is requested and evidence was rejected.

    Carries the rejected evidence so callers can report what was wrong.
    """

    def __init__(self, skill_id: str, rejected: list) -> None:
        self.skill_id = skill_id
        self.rejected = rejected
        super().__init__(
            f"{len(rejected)} evidence item(s) rejected for skill {skill_id}"
        )


class UnknownProfileError(CredibilityError):
    """Raised when the evidence store has no such profile."""


class UnknownSkillError(CredibilityError):
    """Raised when the evidence store has no such skill."""
