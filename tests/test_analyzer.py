"""
End-to-end tests of the flowchart quality analyzer.

These tests run complete analyses and check the report-level guarantees:
the empty-canvas special case, score bounds, per-issue scoring, ordering,
determinism and independence from input ordering.
"""

import itertools
import logging
import random

import pytest

from flowqa_core import FlowQualityAnalyzer, analyze
from flowqa_core.config import AnalyzerConfig
from flowqa_core.enums import Severity
from flowqa_core.graph import Connection, FlowNode


def n(node_id, node_type="process", text=""):
    return FlowNode(node_id, node_type, text)


def c(conn_id, src, dst, label=None):
    return Connection(conn_id, src, dst, label)


def build_order_approval():
    """A well-formed approval flow with one decision and two end nodes."""
    nodes = [
        n("s", "start", "Início"),
        n("p1", "process", "Receber pedido"),
        n("d", "decision", "Pedido válido?"),
        n("p2", "process", "Aprovar pedido"),
        n("p3", "process", "Notificar cliente"),
        n("e1", "end", "Pedido aprovado"),
        n("e2", "end", "Pedido recusado"),
    ]
    conns = [
        c("c1", "s", "p1"),
        c("c2", "p1", "d"),
        c("c3", "d", "p2", "Sim"),
        c("c4", "d", "p3", "Não"),
        c("c5", "p2", "e1"),
        c("c6", "p3", "e2"),
    ]
    return nodes, conns


def issue_ids(report):
    return [i.id for i in report.issues]


class TestEmptyGraph:
    """Test the empty-canvas short circuit."""

    def test_empty_canvas_is_perfect(self):
        """Test an empty canvas scores 100 with no checks run."""
        report = analyze([], [])

        assert report.score == 100
        assert report.issues == ()
        assert report.passed_checks == ()
        assert report.failed_checks == ()
        assert report.metrics.structural.start_nodes == 0
        assert report.metrics.complexity.node_count == 0
        assert report.metrics.complexity.connection_count == 0
        assert report.metrics.complexity.cyclomatic_complexity == 2

    def test_connections_without_nodes_still_short_circuit(self):
        """Test connections alone do not trigger the rules."""
        report = analyze([], [c("c1", "a", "b")])

        assert report.score == 100
        assert report.metrics.complexity.connection_count == 0


class TestWellFormedFlows:
    """Test flows that satisfy every rule."""

    def test_straight_chain(self):
        """Test a start-process-end chain passes every rule."""
        nodes = [n("s", "start", "Início"), n("p", "process", "Fazer"), n("e", "end", "Fim")]
        conns = [c("c1", "s", "p"), c("c2", "p", "e")]

        report = analyze(nodes, conns)

        assert report.score == 100
        assert report.issues == ()
        assert len(report.passed_checks) == 6
        assert report.metrics.structural.start_nodes == 1
        assert report.metrics.structural.end_nodes == 1
        assert report.metrics.complexity.cyclomatic_complexity == 1

    def test_order_approval(self):
        """Test the branching approval flow scores 100."""
        nodes, conns = build_order_approval()

        report = analyze(nodes, conns)

        assert report.issues == ()
        assert report.score == 100
        assert report.metrics.complexity.cyclomatic_complexity == 1


class TestDefectScenarios:
    """Test end-to-end reports for typical authoring mistakes."""

    def test_two_starts_no_connections(self):
        """Test two unconnected start nodes."""
        report = analyze([n("s1", "start"), n("s2", "start")], [])

        critical = [i for i in report.issues if i.severity is Severity.CRITICAL]
        assert len(critical) == 1
        assert critical[0].id == "multiple-starts"
        assert set(critical[0].node_ids) == {"s1", "s2"}
        # 100 - 25 (starts) - 15 (no end) - 15 (unreachable s2) + 3/6 * 10
        assert report.score == 50
        assert report.failed_checks == ("2.1", "2.4", "4.1")
        assert report.passed_checks == ("End Node Outputs", "Decision Node Logic", "Termination")

    def test_decision_with_single_labelled_output(self):
        """Test a decision with one labelled branch."""
        nodes = [n("s", "start"), n("d", "decision", "Aprovado?"), n("e", "end")]
        conns = [c("c1", "s", "d"), c("c2", "d", "e", "Sim")]

        report = analyze(nodes, conns)

        assert issue_ids(report) == ["decision-outputs-d"]
        assert report.issues[0].title == "Insufficient Decision Outputs"
        assert not any(i.title == "Missing Decision Label" for i in report.issues)
        assert report.score == 93

    def test_decision_not_a_question(self):
        """Test decision text without a question mark."""
        nodes = [
            n("s", "start"),
            n("d", "decision", "Aprovar pedido"),
            n("e1", "end"),
            n("e2", "end"),
        ]
        conns = [c("c1", "s", "d"), c("c2", "d", "e1", "Sim"), c("c3", "d", "e2", "Não")]

        report = analyze(nodes, conns)

        assert issue_ids(report) == ["decision-question-d"]
        assert report.issues[0].severity is Severity.MEDIUM
        assert report.metrics.semantic.decision_nodes_without_question == 1
        # 100 - 5 + 5/6 * 10 = 103.3, clamped
        assert report.score == 100

    def test_decision_not_a_question_with_too_few_outputs(self):
        """Test both decision issues on the same node."""
        nodes = [n("s", "start"), n("d", "decision", "Aprovar pedido"), n("e", "end")]
        conns = [c("c1", "s", "d"), c("c2", "d", "e", "Sim")]

        report = analyze(nodes, conns)

        assert set(issue_ids(report)) == {"decision-outputs-d", "decision-question-d"}

    def test_dead_end_path(self):
        """Test a branch that never reaches an end node."""
        nodes = [n("s", "start"), n("p"), n("x"), n("e", "end")]
        conns = [c("c1", "s", "p"), c("c2", "p", "e"), c("c3", "s", "x")]

        report = analyze(nodes, conns)

        assert issue_ids(report) == ["dead-end-nodes"]
        assert report.issues[0].node_ids == ("x",)
        assert report.metrics.structural.dead_end_nodes == 1
        assert report.metrics.structural.unreachable_nodes == 0

    def test_isolated_end_is_unreachable_but_not_dead_end(self):
        """Test an isolated end node is only unreachable."""
        nodes = [n("s", "start"), n("e1", "end"), n("e2", "end")]
        conns = [c("c1", "s", "e1")]

        report = analyze(nodes, conns)

        assert issue_ids(report) == ["unreachable-nodes"]
        assert report.issues[0].node_ids == ("e2",)

    def test_orphan_node_is_unreachable_and_dead_end(self):
        """Test an orphan process node fails both reachability rules."""
        nodes = [n("s", "start"), n("e", "end"), n("o", "process", "Criado mas solto")]
        conns = [c("c1", "s", "e")]

        report = analyze(nodes, conns)

        assert issue_ids(report) == ["unreachable-nodes", "dead-end-nodes"]
        assert report.issues[0].node_ids == ("o",)
        assert report.issues[1].node_ids == ("o",)
        assert report.metrics.structural.unreachable_nodes == 1
        assert report.metrics.structural.dead_end_nodes == 1
        # 100 - 30 + 4/6 * 10 = 76.67
        assert report.score == 77

    def test_no_start_no_end(self):
        """Test a graph with neither start nor end node."""
        report = analyze([n("a"), n("b")], [c("c1", "a", "b")])

        assert issue_ids(report) == ["no-start", "no-end"]
        assert "Connectivity" in report.passed_checks
        assert "Termination" in report.passed_checks

    def test_unknown_node_types_are_inert(self):
        """Test unknown node types behave like process nodes."""
        nodes = [n("s", "start"), n("x", "subprocess", "Sem pergunta"), n("e", "end")]
        conns = [c("c1", "s", "x"), c("c2", "x", "e")]

        report = analyze(nodes, conns)

        assert report.issues == ()

    def test_dangling_connections_never_raise(self):
        """Test connections to missing nodes are tolerated."""
        nodes = [n("s", "start"), n("d", "decision", "Ok?"), n("e", "end")]
        conns = [
            c("c1", "s", "d"),
            c("c2", "d", "ghost", "Sim"),
            c("c3", "d", "e", "Não"),
            c("c4", "phantom", "e"),
        ]

        report = analyze(nodes, conns)

        assert report.issues == ()
        assert report.metrics.complexity.connection_count == 4


class TestReportInvariants:
    """Test properties every report holds regardless of input."""

    def test_issues_sorted_and_failed_checks_follow(self):
        """Test issues are sorted and failed checks follow that order."""
        nodes = [n("s", "start"), n("d", "decision", "Aprovar"), n("e", "end")]
        conns = [c("c1", "s", "d"), c("c2", "d", "e"), c("c3", "e", "s")]

        report = analyze(nodes, conns)

        ranks = [i.severity.rank for i in report.issues]
        assert ranks == sorted(ranks)
        assert report.failed_checks == tuple(i.rule for i in report.issues)
        # end-output-e (rule 2.4) is emitted before the decision issues
        assert issue_ids(report) == [
            "end-output-e",
            "decision-outputs-d",
            "decision-label-c2",
            "decision-question-d",
        ]

    def test_one_failed_check_per_issue(self):
        """Test one failed check entry is recorded per issue."""
        nodes = [n("s", "start"), n("d", "decision", "Ok?"), n("a"), n("b"), n("e", "end")]
        conns = [
            c("c1", "s", "d"),
            c("c2", "d", "a"),
            c("c3", "d", "b"),
            c("c4", "a", "e"),
            c("c5", "b", "e"),
        ]

        report = analyze(nodes, conns)

        assert report.failed_checks == ("2.3", "2.3")
        assert "Decision Node Logic" not in report.passed_checks

    @pytest.mark.parametrize("seed", range(20))
    def test_score_always_in_bounds(self, seed):
        """Test the score stays within 0-100 on random graphs."""
        rng = random.Random(seed)
        types = ["start", "process", "decision", "end", "other"]
        nodes = [n(f"n{i}", rng.choice(types), rng.choice(["?", "x"])) for i in range(rng.randint(1, 15))]
        ids = [node.id for node in nodes] + ["ghost"]
        conns = [
            c(f"c{k}", rng.choice(ids), rng.choice(ids), rng.choice([None, "", "Sim"]))
            for k in range(rng.randint(0, 25))
        ]

        report = analyze(nodes, conns)

        assert 0 <= report.score <= 100
        assert isinstance(report.score, int)

    def test_idempotent(self):
        """Test analyzing twice gives the same report."""
        nodes, conns = build_order_approval()
        nodes.append(n("o", "decision", "Solto"))

        first = analyze(nodes, conns)
        second = analyze(nodes, conns)

        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_inputs_not_mutated(self):
        """Test the analyzer leaves its inputs untouched."""
        nodes, conns = build_order_approval()
        nodes_copy, conns_copy = list(nodes), list(conns)

        analyze(nodes, conns)

        assert nodes == nodes_copy
        assert conns == conns_copy


class TestOrderIndependence:
    """Test that input order does not change the report."""

    def _fingerprint(self, report):
        return (
            report.score,
            {(i.id, frozenset(i.node_ids or ()), frozenset(i.connection_ids or ())) for i in report.issues},
            report.metrics,
            frozenset(report.passed_checks),
        )

    def test_permutations(self):
        """Test shuffled nodes and connections give the same report."""
        nodes = [
            n("s", "start"),
            n("d", "decision", "Aprovar"),
            n("a"),
            n("x"),
            n("o"),
            n("e", "end"),
        ]
        conns = [
            c("c1", "s", "d"),
            c("c2", "d", "a"),
            c("c3", "a", "e"),
            c("c4", "s", "x"),
            c("c5", "e", "a"),
        ]
        expected = self._fingerprint(analyze(nodes, conns))

        rng = random.Random(7)
        for _ in range(25):
            shuffled_nodes = list(nodes)
            shuffled_conns = list(conns)
            rng.shuffle(shuffled_nodes)
            rng.shuffle(shuffled_conns)
            assert self._fingerprint(analyze(shuffled_nodes, shuffled_conns)) == expected

    def test_all_connection_orders_small_graph(self):
        """Test every connection order of a small graph."""
        nodes = [n("s", "start"), n("a"), n("b"), n("e", "end")]
        conns = [c("c1", "s", "a"), c("c2", "a", "b"), c("c3", "b", "e"), c("c4", "b", "a")]
        expected = self._fingerprint(analyze(nodes, conns))

        for perm in itertools.permutations(conns):
            assert self._fingerprint(analyze(nodes, list(perm))) == expected


class TestFlowQualityAnalyzer:
    """Test the analyzer class facade and its logging."""

    def test_class_and_function_agree(self):
        """Test the class and the module function agree."""
        nodes, conns = build_order_approval()

        assert FlowQualityAnalyzer().analyze(nodes, conns) == analyze(nodes, conns)

    def test_config_is_honoured(self):
        """Test a custom config changes the score."""
        nodes = [n("s", "start"), n("d", "decision", "Aprovado?"), n("e", "end")]
        conns = [c("c1", "s", "d"), c("c2", "d", "e", "Sim")]
        cfg = AnalyzerConfig(pass_bonus=0.0, min_decision_outputs=1)

        report = FlowQualityAnalyzer(cfg).analyze(nodes, conns)

        assert report.issues == ()
        assert report.score == 100

    def test_generators_are_accepted(self):
        """Test generators are accepted as inputs."""
        nodes, conns = build_order_approval()

        report = analyze((node for node in nodes), (conn for conn in conns))

        assert report.metrics.complexity.node_count == len(nodes)
        assert report.metrics.complexity.connection_count == len(conns)

    def test_debug_logging(self, caplog):
        """Test rule verdicts and the score are logged at DEBUG."""
        nodes, conns = build_order_approval()

        with caplog.at_level(logging.DEBUG, logger="flowqa_core.analyzer"):
            analyze(nodes, conns)

        assert any("Single Start Node" in r.getMessage() for r in caplog.records)
        assert any("score=100" in r.getMessage() for r in caplog.records)
