"""
Flowchart document loader.

This module compiles an editor document into a `Flowchart` snapshot that the
analyzer can consume. The document shape is the editor's JSON export:

nodes:
  - id: n1
    type: start | process | decision | end
    text: Início
    position: {x: 100, y: 40}
    width: 80
    height: 80
connections:
  - id: c1
    fromNodeId: n1
    toNodeId: n2
    label: Sim        # optional

Notes:
- `text`, `position`, `width` and `height` are optional; missing sizes fall
  back to the editor's default dimensions for the node type.
- Snake-case connection keys (`from_node_id`, `to_node_id`) are accepted too.
- Unknown node types are kept verbatim; the analyzer treats them as inert.
- Connections pointing at missing nodes are kept; the analyzer tolerates them.
- YAML 1.1 reads bare `Yes`/`No` labels as booleans; they are turned back
  into "Yes"/"No". Quote labels in YAML to keep their exact spelling.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from .graph import Connection, Flowchart, FlowNode, Point

# Default node sizes used by the editor, per node type
NODE_DIMENSIONS: Dict[str, Dict[str, int]] = {
    "start": {"width": 80, "height": 80},
    "end": {"width": 80, "height": 80},
    "process": {"width": 160, "height": 80},
    "decision": {"width": 180, "height": 100},
}


def _require_list(data: Dict[str, Any], key: str) -> List[Any]:
    value = data.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def _require_id(entry: Any, kind: str, index: int) -> str:
    if not isinstance(entry, dict):
        raise ValueError(f"{kind} #{index} must be a mapping, got {type(entry).__name__}")
    entry_id = entry.get("id")
    if entry_id is None or entry_id == "":
        raise ValueError(f"{kind} #{index} is missing an 'id'")
    return str(entry_id)


def _compile_node(entry: Dict[str, Any], index: int) -> FlowNode:
    node_id = _require_id(entry, "Node", index)
    node_type = str(entry.get("type", "process"))
    size = NODE_DIMENSIONS.get(node_type, NODE_DIMENSIONS["process"])
    position = entry.get("position") or {}
    if not isinstance(position, dict):
        raise ValueError(
            f"Node '{node_id}' position must be a mapping, got {type(position).__name__}"
        )
    return FlowNode(
        id=node_id,
        type=node_type,
        text=str(entry.get("text") or ""),
        position=Point(x=position.get("x", 0), y=position.get("y", 0)),
        width=entry.get("width", size["width"]),
        height=entry.get("height", size["height"]),
    )


def _compile_connection(entry: Dict[str, Any], index: int) -> Connection:
    conn_id = _require_id(entry, "Connection", index)
    from_id = entry.get("fromNodeId", entry.get("from_node_id"))
    to_id = entry.get("toNodeId", entry.get("to_node_id"))
    if from_id is None or to_id is None:
        raise ValueError(f"Connection '{conn_id}' must name both fromNodeId and toNodeId")
    label = entry.get("label")
    if isinstance(label, bool):
        label = "Yes" if label else "No"
    return Connection(
        id=conn_id,
        from_node_id=str(from_id),
        to_node_id=str(to_id),
        label=None if label is None else str(label),
    )


def compile_from_dict(data: Dict[str, Any]) -> Flowchart:
    """
    Compile a parsed document into a `Flowchart`.

    Args:
        data: Parsed JSON/YAML document with `nodes` and `connections`

    Returns:
        Flowchart: The compiled snapshot

    Raises:
        ValueError: If the document or one of its entries is malformed
    """
    if not isinstance(data, dict):
        raise ValueError(f"Flowchart document must be a mapping, got {type(data).__name__}")

    nodes = tuple(
        _compile_node(entry, i) for i, entry in enumerate(_require_list(data, "nodes"))
    )
    connections = tuple(
        _compile_connection(entry, i)
        for i, entry in enumerate(_require_list(data, "connections"))
    )
    return Flowchart(nodes=nodes, connections=connections)


def compile_from_json(json_text: str) -> Flowchart:
    """Compile from JSON text into a `Flowchart`."""
    return compile_from_dict(json.loads(json_text) if json_text.strip() else {})


def compile_from_yaml(yaml_text: str) -> Flowchart:
    """Compile from YAML text into a `Flowchart`."""
    data = yaml.safe_load(yaml_text) or {}
    return compile_from_dict(data)


def compile_from_file(path: str) -> Flowchart:
    """Compile from a JSON (``.json``) or YAML file path into a `Flowchart`."""
    with open(path, "r", encoding="utf-8") as f:
        txt = f.read()
    if str(path).lower().endswith(".json"):
        return compile_from_json(txt)
    return compile_from_yaml(txt)
