"""
Verifier Chain
==============

Checks a generated statement must pass before it reaches the database.
"""

from abc import ABC, abstractmethod

from data_agent.models import VerificationResult, VerificationStatus


class Verifier(ABC):
    """One pre-execution check over candidate SQL."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def verify(self, sql: str, context: dict) -> VerificationResult:
        """
        Judge a candidate statement.

        Args:
            sql: Candidate SQL, exactly as the Coder produced it
            context: ``original_request`` and ``schema`` of the running extraction
        """


def default_verifiers() -> list[Verifier]:
    from data_agent.verifiers.safety import ReadOnlyQueryVerifier

    return [ReadOnlyQueryVerifier()]


class VerificationChain:
    """
    Ordered verifiers; the first rejection ends the run.

    The agent treats a rejection as a security block and reports the failing
    result's message.
    """

    def __init__(self, verifiers: list[Verifier] | None = None) -> None:
        self.verifiers = default_verifiers() if verifiers is None else verifiers

    def run(self, sql: str, context: dict) -> tuple[bool, list[VerificationResult]]:
        """Return ``(passed, results)``; on rejection the last result is the failure."""
        results: list[VerificationResult] = []

        for verifier in self.verifiers:
            result = verifier.verify(sql, context)
            results.append(result)
            if result.status is VerificationStatus.FAILED:
                return False, results

        return True, results
