"""
Export Facade
=============
Single dispatch point from a format id to its renderer, plus the file-name /
MIME hints and the mermaid code-fence wrapper used when a diagram is inserted
back into a document.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from mindmap_service.core.config import settings
from mindmap_service.core.errors import UnsupportedFormatError
from mindmap_service.schemas.mindmap import ExportedFile, ExportFormat
from mindmap_service.services.renderers import (
    render_class,
    render_flowchart,
    render_graph,
    render_json,
    render_markdown,
    render_mindmap,
    render_sequence,
)

logger = logging.getLogger(__name__)

EXPORT_FORMATS: List[ExportFormat] = [
    ExportFormat(id="json", name="JSON Data", description="Raw mindmap data structure"),
    ExportFormat(id="flowchart", name="Mermaid Flowchart", description="Process flow diagram"),
    ExportFormat(id="mindmap", name="Mermaid Mindmap", description="Hierarchical mindmap"),
    ExportFormat(id="graph", name="Mermaid Graph", description="General graph diagram"),
    ExportFormat(id="sequence", name="Mermaid Sequence", description="Sequence diagram"),
    ExportFormat(id="class", name="Mermaid Class", description="Class diagram"),
    ExportFormat(id="markdown", name="Markdown", description="Structured markdown document"),
]

RENDERERS: Dict[str, Callable[[Any], str]] = {
    "json": render_json,
    "flowchart": render_flowchart,
    "mindmap": render_mindmap,
    "graph": render_graph,
    "sequence": render_sequence,
    "class": render_class,
    "markdown": render_markdown,
}

MERMAID_FORMATS = frozenset({"flowchart", "mindmap", "graph", "sequence", "class"})

if [fmt.id for fmt in EXPORT_FORMATS] != list(RENDERERS):
    raise RuntimeError("Export catalog and renderer table list different formats")


def get_export_formats() -> List[ExportFormat]:
    """Catalog of available formats, for presentation only."""
    return list(EXPORT_FORMATS)


def export_mindmap(graph: Any, format_id: str) -> str:
    """
    Render `graph` in the dialect named by `format_id`.
    Raises UnsupportedFormatError for ids outside the catalog.
    """
    renderer = RENDERERS.get(format_id)
    if renderer is None:
        logger.warning(f"[EXPORT] Unsupported format requested: {format_id!r}")
        raise UnsupportedFormatError(format_id)
    return renderer(graph)


def export_file(graph: Any, format_id: str) -> ExportedFile:
    """Rendered content with the conventional file name and MIME type."""
    content = export_mindmap(graph, format_id)
    if format_id == "json":
        filename, mime_type = "mindmap.json", "application/json"
    elif format_id == "markdown":
        filename, mime_type = "mindmap.md", "text/markdown"
    else:
        filename, mime_type = f"mindmap.{format_id}.md", "text/markdown"
    logger.info(f"[EXPORT] ✓ {filename} ({len(content)} chars)")
    return ExportedFile(content=content, filename=filename, mime_type=mime_type)


def insert_into_document(graph: Any, format_id: Optional[str] = None) -> str:
    """
    Mermaid code block ready to paste into a markdown document.
    Non-mermaid or unknown ids fall back to a flowchart.
    """
    format_id = format_id or settings.DEFAULT_INSERT_FORMAT
    if format_id not in MERMAID_FORMATS:
        format_id = "flowchart"
    return f"```mermaid\n{export_mindmap(graph, format_id)}\n```"
