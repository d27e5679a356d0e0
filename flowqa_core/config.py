"""
Configuration objects for the flowchart quality analyzer.

Exposes the scoring weights and the few tunable rule thresholds so that
experiments do not require editing core logic. Defaults reproduce the
canonical scoring and rule behavior.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from .enums import Severity


def _default_severity_weights() -> Dict[Severity, int]:
    return {
        Severity.CRITICAL: 25,
        Severity.HIGH: 15,
        Severity.MEDIUM: 5,
        Severity.LOW: 2,
        Severity.INFO: 1,
    }


@dataclass
class AnalyzerConfig:
    """
    Configuration for `FlowQualityAnalyzer` scoring and rule thresholds.
    """

    # Points subtracted per issue, by severity
    severity_weights: Dict[Severity, int] = field(default_factory=_default_severity_weights)

    # Maximum bonus, scaled by the fraction of rules that passed
    pass_bonus: float = 10.0

    # Decision nodes are expected to phrase a question containing this marker
    question_marker: str = "?"

    # Minimum number of outgoing connections a decision node should have
    min_decision_outputs: int = 2

    def weight_for(self, severity: Severity) -> int:
        """Return the penalty for one issue of the given severity (0 if unset)."""
        return self.severity_weights.get(Severity(severity), 0)
