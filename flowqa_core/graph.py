"""
Graph data structures for flowchart quality analysis.

This module defines the snapshot of a flowchart handed over by the editor and
the reachability primitives the rule catalog is built on:
- Point, FlowNode: vertices with their (analysis-irrelevant) geometry
- Connection: directed, optionally labelled edges between nodes
- Flowchart: container pairing nodes and connections, with export helpers
- forward_reachable / backward_co_reachable: two-direction reachability

Connections may reference node ids that do not exist. Nothing here rejects
them; `resolved_connections` filters them out where reachability needs it.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set, Tuple

import networkx as nx

from .enums import NodeType


@dataclass(frozen=True)
class Point:
    """Canvas coordinate of a node's top-left corner."""

    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class FlowNode:
    """
    A step in the flowchart.

    Attributes:
        id: Caller-assigned identifier, unique across the flowchart
        type: One of the NodeType values; unknown strings are kept as-is
        text: Display text (decision nodes are expected to ask a question)
        position: Top-left corner on the canvas
        width: Rendered width
        height: Rendered height
    """

    id: str
    """Unique identifier of this node."""

    type: str
    """Node type value ('start', 'process', 'decision', 'end' or unknown)."""

    text: str = ""
    """Free-form display text."""

    position: Point = field(default_factory=Point)
    """Geometry shared with rendering; ignored by the analyzer."""

    width: float = 0.0
    height: float = 0.0

    def is_type(self, node_type: NodeType) -> bool:
        """Return True if this node is of the given type."""
        return self.type == node_type.value


@dataclass(frozen=True)
class Connection:
    """
    A directed edge between two nodes.

    Attributes:
        id: Unique identifier of the connection
        from_node_id: Source node id
        to_node_id: Target node id
        label: Optional outcome label, conventionally 'Sim' or 'Não'
    """

    id: str
    from_node_id: str
    to_node_id: str
    label: str | None = None


@dataclass(frozen=True)
class Flowchart:
    """
    Immutable snapshot of a flowchart: its nodes and connections.

    Node and connection order is preserved as supplied; the analyzer's output
    does not depend on it beyond the order of ids inside bundled issues.
    """

    nodes: Tuple[FlowNode, ...] = ()
    connections: Tuple[Connection, ...] = ()

    def to_dict(self) -> dict:
        """Convert to the editor's JSON document shape."""
        return {
            "nodes": [
                {
                    "id": n.id,
                    "type": getattr(n.type, "value", n.type),
                    "text": n.text,
                    "position": {"x": n.position.x, "y": n.position.y},
                    "width": n.width,
                    "height": n.height,
                }
                for n in self.nodes
            ],
            "connections": [_connection_to_dict(c) for c in self.connections],
        }

    def to_networkx(self) -> "nx.DiGraph":
        """
        Convert the flowchart to a NetworkX DiGraph for export/visualization.

        Connections whose endpoints are not both present are left out.

        Returns:
            NetworkX DiGraph keyed by node id
        """
        G = nx.DiGraph()
        for node in self.nodes:
            G.add_node(
                node.id,
                type=getattr(node.type, "value", node.type),
                text=node.text,
            )
        for conn in self.connections:
            if conn.from_node_id in G and conn.to_node_id in G:
                G.add_edge(
                    conn.from_node_id,
                    conn.to_node_id,
                    connection_id=conn.id,
                    label=conn.label or "",
                )
        return G

    def export_graphml(self, filepath: str) -> None:
        """
        Export the flowchart to GraphML format.

        Args:
            filepath: Path where the GraphML file should be saved
        """
        nx.write_graphml(self.to_networkx(), filepath)


def _connection_to_dict(conn: Connection) -> dict:
    result = {
        "id": conn.id,
        "fromNodeId": conn.from_node_id,
        "toNodeId": conn.to_node_id,
    }
    if conn.label is not None:
        result["label"] = conn.label
    return result


def nodes_of_type(nodes: Iterable[FlowNode], node_type: NodeType) -> List[FlowNode]:
    """Return the nodes of the given type, preserving input order."""
    return [n for n in nodes if n.is_type(node_type)]


def outgoing_connections(node_id: str, connections: Iterable[Connection]) -> List[Connection]:
    """Return the connections whose source is ``node_id``, preserving input order."""
    return [c for c in connections if c.from_node_id == node_id]


def resolved_connections(
    nodes: Iterable[FlowNode], connections: Iterable[Connection]
) -> List[Connection]:
    """Return the connections whose endpoints both name existing nodes."""
    node_ids = {n.id for n in nodes}
    return [
        c for c in connections
        if c.from_node_id in node_ids and c.to_node_id in node_ids
    ]


def forward_reachable(start_id: str, connections: Iterable[Connection]) -> Set[str]:
    """
    Collect every node id reachable from ``start_id`` following edge direction.

    Breadth-first traversal; each node is visited at most once and the result
    includes ``start_id`` itself. Targets that are not real nodes may appear
    in the result and are harmless to callers that filter by their node list.

    Args:
        start_id: Node id to start from
        connections: Directed connections to traverse

    Returns:
        Set of reachable node ids
    """
    successors: Dict[str, List[str]] = {}
    for conn in connections:
        successors.setdefault(conn.from_node_id, []).append(conn.to_node_id)

    reachable = {start_id}
    queue = deque([start_id])
    while queue:
        current = queue.popleft()
        for nxt in successors.get(current, []):
            if nxt not in reachable:
                reachable.add(nxt)
                queue.append(nxt)
    return reachable


def backward_co_reachable(
    terminal_ids: Iterable[str], connections: Iterable[Connection]
) -> Set[str]:
    """
    Collect every node id from which at least one terminal id can be reached.

    Saturation to a fixed point: starting from the terminals, any connection
    whose target is already in the set contributes its source, until a full
    pass over the connections adds nothing. Equivalent to reverse
    breadth-first search from all terminals.

    Args:
        terminal_ids: Ids of the terminal (end) nodes
        connections: Directed connections to traverse backwards

    Returns:
        Set of co-reachable node ids, including the terminals
    """
    conns = list(connections)
    can_reach = set(terminal_ids)
    changed = True
    while changed:
        changed = False
        for conn in conns:
            if conn.to_node_id in can_reach and conn.from_node_id not in can_reach:
                can_reach.add(conn.from_node_id)
                changed = True
    return can_reach
