"""
flowqa Core Package.

This package contains the flowchart quality analyzer, including:

- Core data structures (FlowNode, Connection, Flowchart)
- Two-direction reachability primitives
- The ordered rule catalog and its issues
- Metrics, scoring and the QualityAnalysis report
- Loading flowchart documents from JSON/YAML

The analyzer is pure: it receives a snapshot of nodes and connections and
returns a report, without side effects or I/O.
"""

__version__ = "0.1.0"

from .enums import NodeType, IssueKind, Severity
from .graph import (
    Point,
    FlowNode,
    Connection,
    Flowchart,
    forward_reachable,
    backward_co_reachable,
)
from .config import AnalyzerConfig
from .report import (
    QualityIssue,
    QualityMetrics,
    QualityAnalysis,
    summarize,
)
from .rules import RULES, Rule, RuleResult
from .analyzer import FlowQualityAnalyzer, analyze
from .compiler import (
    compile_from_dict,
    compile_from_json,
    compile_from_yaml,
    compile_from_file,
)
