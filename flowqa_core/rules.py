"""
Rule catalog for flowchart quality analysis.

Each rule is a pure function ``(nodes, connections, config) -> RuleResult``.
Rules run independently and unconditionally, so a single analysis reports
every defect at once. The catalog is the static, ordered ``RULES`` tuple;
its order is the order in which rule verdicts and issues are reported.

Reference codes (``tag``) follow the flowchart style guide:
- 2.1: exactly one start node
- 2.3: decisions branch into labelled outcomes
- 2.4: end nodes exist and terminate the flow
- 3.2: decision text is phrased as a question
- 4.1: every node is reachable from the start
- 4.2: every path leads to an end
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Sequence

from .config import AnalyzerConfig
from .enums import IssueKind, NodeType, Severity
from .graph import (
    Connection,
    FlowNode,
    backward_co_reachable,
    forward_reachable,
    nodes_of_type,
    outgoing_connections,
    resolved_connections,
)
from .report import QualityIssue

# Issue id prefixes shared with the metrics calculator
UNREACHABLE_NODES_ID = "unreachable-nodes"
DEAD_END_NODES_ID = "dead-end-nodes"
DECISION_QUESTION_PREFIX = "decision-question-"
DECISION_LABEL_PREFIX = "decision-label-"


@dataclass(frozen=True)
class RuleResult:
    """Verdict of one rule: whether it passed and the issues it found."""

    passed: bool
    issues: List[QualityIssue] = field(default_factory=list)


RuleFunction = Callable[
    [Sequence[FlowNode], Sequence[Connection], AnalyzerConfig], RuleResult
]


@dataclass(frozen=True)
class Rule:
    """A named entry of the rule catalog."""

    name: str
    tag: str
    validate: RuleFunction


def _verdict(issues: List[QualityIssue]) -> RuleResult:
    return RuleResult(passed=not issues, issues=issues)


def validate_single_start_node(
    nodes: Sequence[FlowNode],
    connections: Sequence[Connection],
    config: AnalyzerConfig,
) -> RuleResult:
    """Exactly one start node must exist."""
    start_nodes = nodes_of_type(nodes, NodeType.START)
    if not start_nodes:
        return _verdict([
            QualityIssue(
                id="no-start",
                type=IssueKind.ERROR,
                severity=Severity.CRITICAL,
                title="No Start Node",
                description="The flowchart must have exactly one start node.",
                rule="2.1",
                suggested_fix="Add a [Start] node to the canvas.",
            )
        ])
    if len(start_nodes) > 1:
        return _verdict([
            QualityIssue(
                id="multiple-starts",
                type=IssueKind.ERROR,
                severity=Severity.CRITICAL,
                title="Multiple Start Nodes",
                description=f"Found {len(start_nodes)} start nodes. Only one is allowed.",
                node_ids=[n.id for n in start_nodes],
                rule="2.1",
                suggested_fix="Remove extra [Start] nodes.",
            )
        ])
    return _verdict([])


def validate_end_node_presence(
    nodes: Sequence[FlowNode],
    connections: Sequence[Connection],
    config: AnalyzerConfig,
) -> RuleResult:
    """At least one end node must exist."""
    if nodes_of_type(nodes, NodeType.END):
        return _verdict([])
    return _verdict([
        QualityIssue(
            id="no-end",
            type=IssueKind.ERROR,
            severity=Severity.HIGH,
            title="No End Node",
            description="The flowchart must have at least one end node.",
            rule="2.4",
            suggested_fix="Add one or more [End] nodes to represent termination points.",
        )
    ])


def validate_end_node_outputs(
    nodes: Sequence[FlowNode],
    connections: Sequence[Connection],
    config: AnalyzerConfig,
) -> RuleResult:
    """End nodes must not have outgoing connections."""
    issues = []
    for node in nodes_of_type(nodes, NodeType.END):
        if outgoing_connections(node.id, connections):
            issues.append(
                QualityIssue(
                    id=f"end-output-{node.id}",
                    type=IssueKind.ERROR,
                    severity=Severity.HIGH,
                    title="End Node Has Output",
                    description=f'End node "{node.text}" should not have outgoing connections.',
                    node_ids=[node.id],
                    rule="2.4",
                    suggested_fix="Remove connections originating from this [End] node.",
                )
            )
    return _verdict(issues)


def validate_decision_nodes(
    nodes: Sequence[FlowNode],
    connections: Sequence[Connection],
    config: AnalyzerConfig,
) -> RuleResult:
    """
    Decision nodes must branch, ask a question and label every outcome.

    Per decision node, in this order: too few outgoing connections, text
    without the question marker, then one issue per unlabelled outgoing
    connection.
    """
    issues = []
    for node in nodes_of_type(nodes, NodeType.DECISION):
        outgoing = outgoing_connections(node.id, connections)

        if len(outgoing) < config.min_decision_outputs:
            issues.append(
                QualityIssue(
                    id=f"decision-outputs-{node.id}",
                    type=IssueKind.ERROR,
                    severity=Severity.HIGH,
                    title="Insufficient Decision Outputs",
                    description=(
                        f'Decision node "{node.text}" must have at least '
                        f"{config.min_decision_outputs} outgoing connections (e.g., Sim/Não)."
                    ),
                    node_ids=[node.id],
                    rule="2.3",
                    suggested_fix="Add the missing outcome connection(s) from this node.",
                )
            )

        if config.question_marker not in node.text:
            issues.append(
                QualityIssue(
                    id=f"{DECISION_QUESTION_PREFIX}{node.id}",
                    type=IssueKind.WARNING,
                    severity=Severity.MEDIUM,
                    title="Decision Not a Question",
                    description=(
                        f'The text for decision node "{node.text}" should be a question '
                        f"ending with '{config.question_marker}'."
                    ),
                    node_ids=[node.id],
                    rule="3.2",
                    suggested_fix="Rephrase the node text as a question.",
                )
            )

        for conn in outgoing:
            if not conn.label:
                issues.append(
                    QualityIssue(
                        id=f"{DECISION_LABEL_PREFIX}{conn.id}",
                        type=IssueKind.ERROR,
                        severity=Severity.HIGH,
                        title="Missing Decision Label",
                        description=f'Connection from "{node.text}" needs a label (e.g., Sim/Não).',
                        node_ids=[node.id],
                        connection_ids=[conn.id],
                        rule="2.3",
                        suggested_fix="Add a label to the connection.",
                    )
                )
    return _verdict(issues)


def validate_connectivity(
    nodes: Sequence[FlowNode],
    connections: Sequence[Connection],
    config: AnalyzerConfig,
) -> RuleResult:
    """
    Every node must be reachable from the start node.

    Uses the first start node in declaration order. Connections with a
    missing endpoint are ignored. Without a start node the
    rule passes; that defect is reported by the single-start rule.
    """
    start_nodes = nodes_of_type(nodes, NodeType.START)
    if not start_nodes:
        return _verdict([])

    reachable = forward_reachable(
        start_nodes[0].id, resolved_connections(nodes, connections)
    )
    unreachable = [n for n in nodes if n.id not in reachable]
    if not unreachable:
        return _verdict([])
    return _verdict([
        QualityIssue(
            id=UNREACHABLE_NODES_ID,
            type=IssueKind.ERROR,
            severity=Severity.HIGH,
            title="Unreachable Nodes",
            description=f"{len(unreachable)} node(s) cannot be reached from the start node.",
            node_ids=[n.id for n in unreachable],
            rule="4.1",
            suggested_fix="Connect the highlighted nodes to the main flow.",
        )
    ])


def validate_termination(
    nodes: Sequence[FlowNode],
    connections: Sequence[Connection],
    config: AnalyzerConfig,
) -> RuleResult:
    """
    Every non-end node must have a path to some end node.

    Connections with a missing endpoint are ignored.
    Without end nodes the rule passes; that defect is reported by the
    end-presence rule.
    """
    end_ids = [n.id for n in nodes_of_type(nodes, NodeType.END)]
    if not end_ids:
        return _verdict([])

    can_reach_end = backward_co_reachable(end_ids, resolved_connections(nodes, connections))
    dead_ends = [
        n for n in nodes if n.id not in can_reach_end and not n.is_type(NodeType.END)
    ]
    if not dead_ends:
        return _verdict([])
    return _verdict([
        QualityIssue(
            id=DEAD_END_NODES_ID,
            type=IssueKind.ERROR,
            severity=Severity.HIGH,
            title="Dead End Paths",
            description=f"{len(dead_ends)} node(s) are on a path that does not lead to an end node.",
            node_ids=[n.id for n in dead_ends],
            rule="4.2",
            suggested_fix="Ensure all paths from these nodes eventually connect to an [End] node.",
        )
    ])


RULES: tuple[Rule, ...] = (
    Rule("Single Start Node", "2.1", validate_single_start_node),
    Rule("End Node Presence", "2.4", validate_end_node_presence),
    Rule("End Node Outputs", "2.4", validate_end_node_outputs),
    Rule("Decision Node Logic", "2.3", validate_decision_nodes),
    Rule("Connectivity", "4.1", validate_connectivity),
    Rule("Termination", "4.2", validate_termination),
)
