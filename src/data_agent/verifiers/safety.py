"""
Read-Only Query Policy
======================

Keyword filter that admits a single SELECT statement and nothing else.

This is a deny-list / allow-shape check, not a SQL parser. It is one layer of
defense: the executor also opens read-only connections. Known limits:

- a column or alias literally named ``update`` (or any other denied word) is
  rejected, as is a semicolon inside a string literal;
- a SELECT that calls a side-effecting function is accepted.
"""

import re

from data_agent.models import SafetyVerdict, VerificationResult, VerificationStatus
from data_agent.verifiers.base import Verifier

DENIED_KEYWORDS = (
    "INSERT",
    "UPDATE",
    "DELETE",
    "DROP",
    "ALTER",
    "ATTACH",
    "DETACH",
    "PRAGMA",
    "CREATE",
    "TRUNCATE",
    "VACUUM",
    "REINDEX",
    "GRANT",
    "REVOKE",
)

_DENIED_PATTERN = re.compile(
    r"\b(" + "|".join(DENIED_KEYWORDS) + r")\b",
    re.IGNORECASE,
)
_LEADING_SELECT = re.compile(r"^\s*SELECT\b", re.IGNORECASE)
# A semicolon with anything but whitespace after it.
_SECOND_STATEMENT = re.compile(r";\s*\S")


def validate_query(sql: str) -> SafetyVerdict:
    """
    Check a candidate statement against the read-only policy.

    Args:
        sql: Candidate SQL text, exactly as generated

    Returns:
        SafetyVerdict with ``safe`` set and, when rejected, a reason
    """
    if not sql or not sql.strip():
        return SafetyVerdict(safe=False, reason="Query is empty")

    if _SECOND_STATEMENT.search(sql):
        return SafetyVerdict(
            safe=False,
            reason="Multiple statements are not allowed",
        )

    if not _LEADING_SELECT.match(sql):
        return SafetyVerdict(
            safe=False,
            reason="Only SELECT statements are allowed",
        )

    match = _DENIED_PATTERN.search(sql)
    if match:
        return SafetyVerdict(
            safe=False,
            reason=f"Forbidden keyword detected: {match.group(1).upper()}",
        )

    return SafetyVerdict(safe=True)


class ReadOnlyQueryVerifier(Verifier):
    """Chain adapter for validate_query."""

    @property
    def name(self) -> str:
        return "ReadOnlyQueryVerifier"

    def verify(self, sql: str, context: dict) -> VerificationResult:
        verdict = validate_query(sql)

        if not verdict.safe:
            return VerificationResult(
                verifier_name=self.name,
                status=VerificationStatus.FAILED,
                message=verdict.reason or "Query rejected",
                details={"safe": False},
            )

        return VerificationResult(
            verifier_name=self.name,
            status=VerificationStatus.PASSED,
            message="Single read-only SELECT statement",
            details={"safe": True},
        )
