from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

NodeType = Literal["root", "heading", "concept"]
ConnectionType = Literal["hierarchy", "association", "flow"]

# Frozen models: a graph is handed to renderers as an immutable value.
# Wire names are camelCase aliases; python attributes stay snake_case.
_GRAPH_MODEL_CONFIG = {"frozen": True, "populate_by_name": True}


# ── Graph ────────────────────────────────────────────────────────────────────

class Node(BaseModel):
    """A single heading or concept in the hierarchy."""
    model_config = _GRAPH_MODEL_CONFIG

    id: str
    text: str
    level: int = Field(..., ge=0, description="0 = synthesized root, 1+ = extracted depth")
    type: NodeType
    line_number: Optional[int] = Field(default=None, alias="lineNumber")


class Connection(BaseModel):
    """Directed edge from a structural parent to its child."""
    model_config = _GRAPH_MODEL_CONFIG

    from_: str = Field(..., alias="from")
    to: str
    type: ConnectionType = "hierarchy"


class GraphMetadata(BaseModel):
    model_config = _GRAPH_MODEL_CONFIG

    source_type: str = Field(..., alias="sourceType")
    generated_at: datetime = Field(..., alias="generatedAt")
    node_count: int = Field(..., ge=0, alias="nodeCount")


class MindmapGraph(BaseModel):
    """Nodes, hierarchy connections and generation metadata."""
    model_config = _GRAPH_MODEL_CONFIG

    nodes: List[Node]
    connections: List[Connection]
    metadata: GraphMetadata


# ── Render view ──────────────────────────────────────────────────────────────

class DiagramNode(BaseModel):
    """Lenient node view for caller-supplied graphs: any type tag is accepted."""
    model_config = _GRAPH_MODEL_CONFIG

    id: str
    text: str
    level: int
    type: str = "concept"
    line_number: Optional[int] = Field(default=None, alias="lineNumber")


class DiagramConnection(BaseModel):
    model_config = _GRAPH_MODEL_CONFIG

    from_: str = Field(..., alias="from")
    to: str
    type: str = "hierarchy"


class DiagramGraph(BaseModel):
    """What a renderer needs: nodes and connections. Metadata is optional."""
    model_config = _GRAPH_MODEL_CONFIG

    nodes: List[DiagramNode]
    connections: List[DiagramConnection]
    metadata: Optional[Dict[str, Any]] = None


# ── Export catalog ───────────────────────────────────────────────────────────

class ExportFormat(BaseModel):
    """Presentation entry for one export dialect."""
    id: str
    name: str
    description: str


class ExportedFile(BaseModel):
    """Rendered content plus the save hints a download collaborator needs."""
    content: str
    filename: str
    mime_type: str


# ── Requests ─────────────────────────────────────────────────────────────────

class HeadingsRequest(BaseModel):
    """Request body for generation from a whole document."""
    content: str = Field(default="", description="Markdown document text")


class SelectionRequest(BaseModel):
    """Request body for generation from a selected fragment."""
    text: str = Field(default="", description="Selected text fragment")


class ExportRequest(BaseModel):
    """
    Graph + target format.
    The graph is taken as raw JSON so malformed payloads still render a placeholder.
    """
    graph: Any = None
    format: str


class InsertRequest(BaseModel):
    graph: Any = None
    format: Optional[str] = None


# ── Responses ────────────────────────────────────────────────────────────────

class GenerateResponse(BaseModel):
    """Generated graph; advisory is set when the input produced nothing."""
    status: str = "success"
    graph: MindmapGraph
    advisory: Optional[str] = None


class ExportResponse(ExportedFile):
    format: str


class InsertResponse(BaseModel):
    content: str
