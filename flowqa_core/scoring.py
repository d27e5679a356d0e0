"""
Scoring and ordering of quality issues.

The score starts at 100, loses a fixed weight per issue by severity, gains a
bonus proportional to the fraction of passed rules, and is then rounded and
clamped to [0, 100]. The order of those steps is fixed; changing it moves
results at the boundaries.
"""

from __future__ import annotations

import math
from typing import Iterable, List

from .config import AnalyzerConfig
from .report import QualityIssue

MAX_SCORE = 100
MIN_SCORE = 0


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(value + 0.5))


def calculate_score(
    issues: Iterable[QualityIssue],
    passed_checks: int,
    total_checks: int,
    config: AnalyzerConfig | None = None,
) -> int:
    """
    Compute the overall quality score.

    Args:
        issues: Every issue found (penalties apply per issue, not per rule)
        passed_checks: Number of rules that passed
        total_checks: Number of rules evaluated
        config: Scoring weights; defaults to `AnalyzerConfig()`

    Returns:
        Integer score in [0, 100]
    """
    config = config or AnalyzerConfig()

    score = float(MAX_SCORE)
    for issue in issues:
        score -= config.weight_for(issue.severity)

    if total_checks > 0:
        score += (passed_checks / total_checks) * config.pass_bonus

    return max(MIN_SCORE, min(MAX_SCORE, round_half_up(score)))


def sort_issues_by_severity(issues: Iterable[QualityIssue]) -> List[QualityIssue]:
    """Stable sort by severity rank; ties keep their input order."""
    return sorted(issues, key=lambda issue: issue.severity.rank)
