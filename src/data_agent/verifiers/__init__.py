"""
Verifiers Module
================

Pre-execution verification chain for generated SQL.
"""

from data_agent.verifiers.base import Verifier, VerificationChain
from data_agent.verifiers.safety import ReadOnlyQueryVerifier, validate_query

__all__ = [
    "Verifier",
    "VerificationChain",
    "ReadOnlyQueryVerifier",
    "validate_query",
]
