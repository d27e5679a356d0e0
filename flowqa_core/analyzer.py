"""
Flowchart quality analyzer.

This module orchestrates a single analysis of a flowchart snapshot:

1. Rules: every rule of the catalog runs against (nodes, connections)
2. Issues: failed rules contribute their issues, passed rules their names
3. Metrics: counters derived from the graph and the issues found
4. Score: penalties per issue plus a bonus for passed rules
5. Report: issues sorted by severity and assembled into a QualityAnalysis

The analyzer is stateless between calls, performs no I/O and never mutates
its inputs. An empty node list is treated as a flowchart that has not been
started yet and receives a perfect score.
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

from .config import AnalyzerConfig
from .graph import Connection, FlowNode
from .metrics import calculate_metrics
from .report import QualityAnalysis, QualityIssue
from .rules import RULES, Rule
from .scoring import MAX_SCORE, calculate_score, sort_issues_by_severity

logger = logging.getLogger(__name__)


class FlowQualityAnalyzer:
    """
    Rule-based quality analyzer for flowcharts.

    Attributes:
        config: Scoring weights and rule thresholds
        rules: The ordered rule catalog evaluated on every call
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()
        self.rules: Tuple[Rule, ...] = RULES

    def analyze(
        self, nodes: Sequence[FlowNode], connections: Sequence[Connection]
    ) -> QualityAnalysis:
        """
        Analyze a flowchart snapshot.

        Args:
            nodes: Flowchart nodes
            connections: Flowchart connections; dangling endpoints are tolerated

        Returns:
            QualityAnalysis report for this snapshot
        """
        nodes = tuple(nodes)
        connections = tuple(connections)

        if not nodes:
            return self._empty_analysis()

        issues: list[QualityIssue] = []
        passed_checks: list[str] = []

        for rule in self.rules:
            result = rule.validate(nodes, connections, self.config)
            logger.debug(
                "Rule %r (%s): %s, %d issue(s)",
                rule.name,
                rule.tag,
                "passed" if result.passed else "failed",
                len(result.issues),
            )
            if result.passed:
                passed_checks.append(rule.name)
            else:
                issues.extend(result.issues)

        metrics = calculate_metrics(nodes, connections, issues)
        score = calculate_score(issues, len(passed_checks), len(self.rules), self.config)
        logger.debug(
            "Analyzed %d node(s), %d connection(s): score=%d issues=%d",
            len(nodes),
            len(connections),
            score,
            len(issues),
        )

        sorted_issues = tuple(sort_issues_by_severity(issues))
        return QualityAnalysis(
            score=score,
            issues=sorted_issues,
            metrics=metrics,
            passed_checks=tuple(passed_checks),
            failed_checks=tuple(issue.rule for issue in sorted_issues),
        )

    def _empty_analysis(self) -> QualityAnalysis:
        return QualityAnalysis(
            score=MAX_SCORE,
            issues=(),
            metrics=calculate_metrics((), (), ()),
            passed_checks=(),
            failed_checks=(),
        )


def analyze(
    nodes: Sequence[FlowNode],
    connections: Sequence[Connection],
    config: AnalyzerConfig | None = None,
) -> QualityAnalysis:
    """Analyze a flowchart snapshot with a fresh `FlowQualityAnalyzer`."""
    return FlowQualityAnalyzer(config).analyze(nodes, connections)
