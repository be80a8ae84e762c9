"""
Format Renderers
================
One pure function per output dialect. Every renderer takes a MindmapGraph
(or a raw mapping / None) and returns text; graphs that are empty or do not
validate render the dialect's "No data" placeholder.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Set, Union

from pydantic import ValidationError

from mindmap_service.schemas.mindmap import DiagramGraph, MindmapGraph

logger = logging.getLogger(__name__)

AnyGraph = Union[MindmapGraph, DiagramGraph]

# ── Placeholders (output contract, keep literal) ─────────────────────────────
NO_DATA_FLOWCHART = "flowchart TD\n  A[No data]"
NO_DATA_MINDMAP = "mindmap\n  root((No data))"
NO_DATA_GRAPH = "graph TD\n  A[No data]"
NO_DATA_SEQUENCE = "sequenceDiagram\n  participant A as No data"
NO_DATA_CLASS = "classDiagram\n  class NoData"
NO_DATA_MARKDOWN = "# No data\n"
NO_DATA_JSON = json.dumps({"nodes": [], "connections": []}, indent=2)

_UNSAFE_ID_CHARS = re.compile(r"[^A-Za-z0-9_]")
_LEADING_DIGIT = re.compile(r"^(\d)")

MARKDOWN_MAX_HEADING_DEPTH = 3


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# SHARED HELPERS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def sanitize_node_id(node_id: str) -> str:
    """Map an id onto `[A-Za-z0-9_]`, prefixing `n` when it starts with a digit."""
    return _LEADING_DIGIT.sub(r"n\1", _UNSAFE_ID_CHARS.sub("_", node_id))


def escape_text(text: str) -> str:
    """Make a label safe inside a double-quoted, single-line context."""
    return text.replace('"', '\\"').replace("\n", " ").replace("\r", " ").strip()


def coerce_graph(data: Any) -> Optional[AnyGraph]:
    """
    Accept a MindmapGraph or a mapping shaped like one.

    Mappings that are a complete graph become a MindmapGraph. Mappings that
    only carry usable nodes/connections (no metadata, unknown node types)
    become a DiagramGraph. Anything else returns None.
    """
    if isinstance(data, (MindmapGraph, DiagramGraph)):
        return data
    if not isinstance(data, dict):
        return None
    try:
        return MindmapGraph.model_validate(data)
    except ValidationError:
        pass
    try:
        return DiagramGraph.model_validate(data)
    except ValidationError as e:
        logger.warning(f"[EXPORT] Malformed graph payload: {e.error_count()} validation errors")
        return None


def _renderable(data: Any) -> Optional[AnyGraph]:
    graph = coerce_graph(data)
    if graph is None or not graph.nodes:
        return None
    return graph


def _children_of(graph: AnyGraph, parent_id: str) -> list:
    """Direct children in node order."""
    child_ids = {conn.to for conn in graph.connections if conn.from_ == parent_id}
    return [node for node in graph.nodes if node.id in child_ids]


def _edge_lines(connections: list) -> List[str]:
    return [
        f"  {sanitize_node_id(conn.from_)} --> {sanitize_node_id(conn.to)}"
        for conn in connections
    ]


def _join(lines: List[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# MERMAID DIALECTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def render_flowchart(data: Any) -> str:
    graph = _renderable(data)
    if graph is None:
        return NO_DATA_FLOWCHART

    lines = ["flowchart TD"]
    for node in graph.nodes:
        lines.append(f'  {sanitize_node_id(node.id)}["{escape_text(node.text)}"]')
    lines.extend(_edge_lines(graph.connections))
    return _join(lines)


def render_mindmap(data: Any) -> str:
    """
    Root plus two tiers of descendants.
    Nodes deeper than the root's grandchildren are not rendered.
    """
    graph = _renderable(data)
    if graph is None:
        return NO_DATA_MINDMAP

    lines = ["mindmap"]
    root = next((node for node in graph.nodes if node.level in (0, 1)), None)
    if root is not None:
        lines.append(f'  root(("{escape_text(root.text)}"))')
        for child in _children_of(graph, root.id):
            lines.append(f"    {escape_text(child.text)}")
            for grandchild in _children_of(graph, child.id):
                lines.append(f"      {escape_text(grandchild.text)}")
    return _join(lines)


def render_graph(data: Any) -> str:
    graph = _renderable(data)
    if graph is None:
        return NO_DATA_GRAPH

    lines = ["graph TD"]
    for node in graph.nodes:
        node_id = sanitize_node_id(node.id)
        text = escape_text(node.text)
        if node.level <= 1:
            lines.append(f'  {node_id}(("{text}"))')
        elif node.level == 2:
            lines.append(f'  {node_id}["{text}"]')
        else:
            lines.append(f'  {node_id}("{text}")')
    lines.extend(_edge_lines(graph.connections))
    return _join(lines)


def render_sequence(data: Any) -> str:
    """Participants are root/level-1 nodes; edges touching deeper nodes are skipped."""
    graph = _renderable(data)
    if graph is None:
        return NO_DATA_SEQUENCE

    lines = ["sequenceDiagram"]
    by_id: Dict[str, Any] = {}
    for node in graph.nodes:
        by_id.setdefault(node.id, node)
        if node.level <= 1:
            lines.append(
                f"  participant {sanitize_node_id(node.id)} as {escape_text(node.text)}"
            )

    for conn in graph.connections:
        source = by_id.get(conn.from_)
        target = by_id.get(conn.to)
        if source is None or target is None:
            continue
        if source.level > 1 or target.level > 1:
            continue
        lines.append(
            f"  {sanitize_node_id(source.id)}->>{sanitize_node_id(target.id)}: "
            f"{escape_text(target.text)}"
        )
    return _join(lines)


def render_class(data: Any) -> str:
    graph = _renderable(data)
    if graph is None:
        return NO_DATA_CLASS

    lines = ["classDiagram"]
    for node in graph.nodes:
        lines.append(f"  class {sanitize_node_id(node.id)} {{")
        lines.append(f"    {escape_text(node.text)}")
        lines.append("  }")
    lines.extend(_edge_lines(graph.connections))
    return _join(lines)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# DOCUMENT DIALECTS
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def render_markdown(data: Any) -> str:
    """
    Outline of the hierarchy: shallow levels become headings, deeper ones
    nested bullets. Orphans start their own branch where they appear.
    """
    graph = _renderable(data)
    if graph is None:
        return NO_DATA_MARKDOWN

    offset = 1 if any(node.level == 0 for node in graph.nodes) else 0
    by_id: Dict[str, Any] = {}
    for node in graph.nodes:
        by_id.setdefault(node.id, node)
    children: Dict[str, List[str]] = {}
    for conn in graph.connections:
        children.setdefault(conn.from_, []).append(conn.to)
    child_ids = {conn.to for conn in graph.connections}

    lines: List[str] = []
    visited: Set[str] = set()

    def walk(start: Any) -> None:
        stack = [start]
        while stack:
            node = stack.pop()
            if node.id in visited:
                continue
            visited.add(node.id)
            text = node.text.replace("\n", " ").replace("\r", " ").strip()
            depth = max(node.level + offset, 1)
            if depth <= MARKDOWN_MAX_HEADING_DEPTH:
                lines.append(f"{'#' * depth} {text}")
            else:
                indent = "  " * (depth - MARKDOWN_MAX_HEADING_DEPTH - 1)
                lines.append(f"{indent}- {text}")
            # Reversed so the first connection is popped first.
            for child_id in reversed(children.get(node.id, [])):
                child = by_id.get(child_id)
                if child is not None and child.id not in visited:
                    stack.append(child)

    for node in graph.nodes:
        if node.id not in child_ids:
            walk(node)
    # Nodes only reachable through a cycle in a hand-built graph.
    for node in graph.nodes:
        walk(node)
    return _join(lines)


def render_json(data: Any) -> str:
    """Pretty-printed graph using its wire (camelCase) field names."""
    graph = coerce_graph(data)
    if graph is None:
        return NO_DATA_JSON
    return graph.model_dump_json(indent=2, by_alias=True)
