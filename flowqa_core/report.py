"""
Quality report value objects.

Every analysis produces a fresh QualityAnalysis holding the sorted findings
(QualityIssue), derived counters (QualityMetrics), and the pass/fail record of
the rule catalog. All objects are frozen; ``to_dict``/``from_dict`` convert
them to and from plain JSON-compatible data without loss.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .enums import IssueKind, Severity


def _as_tuple(values) -> Tuple[str, ...] | None:
    if values is None:
        return None
    return tuple(values)


@dataclass(frozen=True)
class QualityIssue:
    """
    One concrete defect found in a flowchart.

    Attributes:
        id: Deterministic identifier built from the rule and its subject
        type: Broad category (error, warning, info)
        severity: Ranking used for scoring and ordering
        title: Short human-readable name of the defect
        description: Human-readable explanation naming the subject
        rule: Catalog reference code of the rule, e.g. '2.1'
        suggested_fix: Remediation hint
        node_ids: Ids of implicated nodes, if any
        connection_ids: Ids of implicated connections, if any
    """

    id: str
    type: IssueKind
    severity: Severity
    title: str
    description: str
    rule: str
    suggested_fix: str
    node_ids: Tuple[str, ...] | None = None
    connection_ids: Tuple[str, ...] | None = None

    def __post_init__(self):
        # Accept raw strings and lists; store enum members and tuples.
        object.__setattr__(self, "type", IssueKind(self.type))
        object.__setattr__(self, "severity", Severity(self.severity))
        object.__setattr__(self, "node_ids", _as_tuple(self.node_ids))
        object.__setattr__(self, "connection_ids", _as_tuple(self.connection_ids))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "title": self.title,
            "description": self.description,
            "rule": self.rule,
            "suggested_fix": self.suggested_fix,
        }
        if self.node_ids is not None:
            result["node_ids"] = list(self.node_ids)
        if self.connection_ids is not None:
            result["connection_ids"] = list(self.connection_ids)
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QualityIssue":
        return cls(
            id=data["id"],
            type=IssueKind(data["type"]),
            severity=Severity(data["severity"]),
            title=data["title"],
            description=data["description"],
            rule=data["rule"],
            suggested_fix=data["suggested_fix"],
            node_ids=data.get("node_ids"),
            connection_ids=data.get("connection_ids"),
        )


@dataclass(frozen=True)
class StructuralMetrics:
    """Counts describing the shape of the flowchart."""

    start_nodes: int = 0
    end_nodes: int = 0
    unreachable_nodes: int = 0
    dead_end_nodes: int = 0


@dataclass(frozen=True)
class SemanticMetrics:
    """Counts describing how well decisions are expressed."""

    decision_nodes_without_question: int = 0
    decision_connections_without_label: int = 0


@dataclass(frozen=True)
class ComplexityMetrics:
    """
    Size counters and cyclomatic complexity.

    ``cyclomatic_complexity`` is ``connection_count - node_count + 2`` and is
    reported unclamped, so it can be negative for sparse diagrams.
    """

    node_count: int = 0
    connection_count: int = 0
    cyclomatic_complexity: int = 2


@dataclass(frozen=True)
class QualityMetrics:
    """Derived counters of a single analysis, grouped by concern."""

    structural: StructuralMetrics = field(default_factory=StructuralMetrics)
    semantic: SemanticMetrics = field(default_factory=SemanticMetrics)
    complexity: ComplexityMetrics = field(default_factory=ComplexityMetrics)

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            "structural": {
                "start_nodes": self.structural.start_nodes,
                "end_nodes": self.structural.end_nodes,
                "unreachable_nodes": self.structural.unreachable_nodes,
                "dead_end_nodes": self.structural.dead_end_nodes,
            },
            "semantic": {
                "decision_nodes_without_question": self.semantic.decision_nodes_without_question,
                "decision_connections_without_label": self.semantic.decision_connections_without_label,
            },
            "complexity": {
                "node_count": self.complexity.node_count,
                "connection_count": self.complexity.connection_count,
                "cyclomatic_complexity": self.complexity.cyclomatic_complexity,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, int]]) -> "QualityMetrics":
        return cls(
            structural=StructuralMetrics(**data["structural"]),
            semantic=SemanticMetrics(**data["semantic"]),
            complexity=ComplexityMetrics(**data["complexity"]),
        )


@dataclass(frozen=True)
class QualityAnalysis:
    """
    The complete quality report for one flowchart snapshot.

    Attributes:
        score: Overall quality score, an integer in [0, 100]
        issues: Findings sorted by severity (stable within a severity)
        metrics: Derived counters
        passed_checks: Names of the rules that passed, in catalog order
        failed_checks: Rule tag of every issue, one entry per issue
    """

    score: int
    issues: Tuple[QualityIssue, ...] = ()
    metrics: QualityMetrics = field(default_factory=QualityMetrics)
    passed_checks: Tuple[str, ...] = ()
    failed_checks: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "issues", tuple(self.issues))
        object.__setattr__(self, "passed_checks", tuple(self.passed_checks))
        object.__setattr__(self, "failed_checks", tuple(self.failed_checks))

    def to_dict(self) -> Dict[str, Any]:
        """Convert the report to plain JSON-compatible data."""
        return {
            "score": self.score,
            "issues": [issue.to_dict() for issue in self.issues],
            "metrics": self.metrics.to_dict(),
            "passed_checks": list(self.passed_checks),
            "failed_checks": list(self.failed_checks),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QualityAnalysis":
        """
        Rebuild a report from the output of ``to_dict``.

        Raises:
            KeyError: If a required field is missing
            ValueError: If an issue carries an unknown type or severity
        """
        return cls(
            score=int(data["score"]),
            issues=tuple(QualityIssue.from_dict(i) for i in data["issues"]),
            metrics=QualityMetrics.from_dict(data["metrics"]),
            passed_checks=tuple(data["passed_checks"]),
            failed_checks=tuple(data["failed_checks"]),
        )


def summarize(analysis: QualityAnalysis) -> Dict[str, Any]:
    """
    Generate a summary of a quality report.

    Args:
        analysis: Report returned by the analyzer

    Returns:
        Dictionary with the score, total issue count, counts per issue kind
        and counts for every severity level
    """
    summary: Dict[str, Any] = {
        "score": analysis.score,
        "total_issues": len(analysis.issues),
        "errors": 0,
        "warnings": 0,
        "infos": 0,
        "by_severity": {severity.value: 0 for severity in Severity},
    }

    for issue in analysis.issues:
        if issue.type is IssueKind.ERROR:
            summary["errors"] += 1
        elif issue.type is IssueKind.WARNING:
            summary["warnings"] += 1
        else:
            summary["infos"] += 1
        summary["by_severity"][issue.severity.value] += 1

    return summary
