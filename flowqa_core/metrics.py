"""
Metrics calculation for flowchart quality reports.

Structural unreachable/dead-end counts and the semantic counters are read off
the issues already found rather than recomputed, so metrics and issues always
agree. Complexity counters come straight from the graph.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from .enums import NodeType
from .graph import Connection, FlowNode, nodes_of_type
from .report import (
    ComplexityMetrics,
    QualityIssue,
    QualityMetrics,
    SemanticMetrics,
    StructuralMetrics,
)
from .rules import (
    DEAD_END_NODES_ID,
    DECISION_LABEL_PREFIX,
    DECISION_QUESTION_PREFIX,
    UNREACHABLE_NODES_ID,
)


def cyclomatic_complexity(node_count: int, connection_count: int) -> int:
    """Return ``E - N + 2``; not clamped, may be negative."""
    return connection_count - node_count + 2


def _bundled_node_count(issues: Sequence[QualityIssue], issue_id: str) -> int:
    """Length of the node id list of the first issue with ``issue_id``, or 0."""
    for issue in issues:
        if issue.id == issue_id:
            return len(issue.node_ids or ())
    return 0


def _count_prefixed(issues: Iterable[QualityIssue], prefix: str) -> int:
    return sum(1 for issue in issues if issue.id.startswith(prefix))


def calculate_metrics(
    nodes: Sequence[FlowNode],
    connections: Sequence[Connection],
    issues: Sequence[QualityIssue],
) -> QualityMetrics:
    """
    Derive the structural, semantic and complexity counters of an analysis.

    Args:
        nodes: Flowchart nodes
        connections: Flowchart connections
        issues: Issues already produced by the rule catalog

    Returns:
        QualityMetrics for this snapshot
    """
    return QualityMetrics(
        structural=StructuralMetrics(
            start_nodes=len(nodes_of_type(nodes, NodeType.START)),
            end_nodes=len(nodes_of_type(nodes, NodeType.END)),
            unreachable_nodes=_bundled_node_count(issues, UNREACHABLE_NODES_ID),
            dead_end_nodes=_bundled_node_count(issues, DEAD_END_NODES_ID),
        ),
        semantic=SemanticMetrics(
            decision_nodes_without_question=_count_prefixed(issues, DECISION_QUESTION_PREFIX),
            decision_connections_without_label=_count_prefixed(issues, DECISION_LABEL_PREFIX),
        ),
        complexity=ComplexityMetrics(
            node_count=len(nodes),
            connection_count=len(connections),
            cyclomatic_complexity=cyclomatic_complexity(len(nodes), len(connections)),
        ),
    )
