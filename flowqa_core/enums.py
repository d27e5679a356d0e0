"""
Core enumerations for the flowchart quality analyzer.

This module defines the closed vocabularies shared by the data model, the rule
catalog and the quality report:
- NodeType: kinds of flowchart steps
- IssueKind: broad category of a finding (error, warning, info)
- Severity: ranking used for scoring and ordering of findings

All enums mix in ``str`` so that raw values coming from an editor document
(``"start"``, ``"high"``, ...) compare equal to the members.
"""

from enum import Enum


class NodeType(str, Enum):
    """
    Types of nodes in a flowchart.

    - START: Entry point of the process (exactly one expected)
    - PROCESS: An ordinary step
    - DECISION: A branching question with labelled outcomes
    - END: A termination point (one or more expected)
    """

    START = "start"
    """Entry point of the process."""

    PROCESS = "process"
    """Ordinary processing step."""

    DECISION = "decision"
    """Branching question; outgoing connections carry outcome labels."""

    END = "end"
    """Termination point of the process."""


class IssueKind(str, Enum):
    """Category of a quality finding."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Severity(str, Enum):
    """
    Severity of a quality finding.

    Members are declared from most to least severe; ``rank`` follows that
    declaration order and drives issue ordering in reports.
    """

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Sort rank: 0 for CRITICAL up to 4 for INFO."""
        return list(Severity).index(self)
