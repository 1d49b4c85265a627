"""Aggregate hygiene checks."""

from trainpilot.hygiene.base import HygieneCheck, HygieneContext, HygieneFinding, HygieneSummary, Severity
from trainpilot.hygiene.checks import (
    DEFAULT_CHECKS,
    IterationAlignmentCheck,
    MemberCountCheck,
    NotesDocumentationCheck,
    StateConsistencyCheck,
)
from trainpilot.hygiene.service import HygieneService

__all__ = [
    "DEFAULT_CHECKS",
    "HygieneCheck",
    "HygieneContext",
    "HygieneFinding",
    "HygieneService",
    "HygieneSummary",
    "IterationAlignmentCheck",
    "MemberCountCheck",
    "NotesDocumentationCheck",
    "Severity",
    "StateConsistencyCheck",
]
