import logging
from typing import List

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from mindmap_service.core.config import settings
from mindmap_service.core.errors import InputTooLargeError, UnsupportedFormatError
from mindmap_service.schemas.common import ErrorResponse
from mindmap_service.schemas.mindmap import (
    ExportFormat,
    ExportRequest,
    ExportResponse,
    GenerateResponse,
    HeadingsRequest,
    InsertRequest,
    InsertResponse,
    SelectionRequest,
)
from mindmap_service.services.export_service import (
    export_file,
    get_export_formats,
    insert_into_document,
)
from mindmap_service.services.mindmap_generator import MindmapGenerator

logger = logging.getLogger(__name__)

router = APIRouter()


def _new_generator() -> MindmapGenerator:
    """Fresh generator per request so node ids never leak between runs."""
    return MindmapGenerator(max_lines=settings.MAX_INPUT_LINES or None)


def _too_large(e: InputTooLargeError) -> JSONResponse:
    body = ErrorResponse(status="error", message=str(e))
    return JSONResponse(status_code=413, content=body.model_dump())


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 1. GENERATION
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.post(
    "/mindmap/headings",
    response_model=GenerateResponse,
    responses={413: {"model": ErrorResponse}},
)
async def generate_from_headings(request: HeadingsRequest):
    """Generate a mindmap from the headings of a markdown document."""
    try:
        graph = _new_generator().generate_from_headings(request.content)
    except InputTooLargeError as e:
        return _too_large(e)

    advisory = None
    if not request.content.strip():
        advisory = "No content to generate mindmap from"
    elif not graph.nodes:
        advisory = "No headings found in document"
    return GenerateResponse(graph=graph, advisory=advisory)


@router.post(
    "/mindmap/selection",
    response_model=GenerateResponse,
    responses={413: {"model": ErrorResponse}},
)
async def generate_from_selection(request: SelectionRequest):
    """Generate a flat concept mindmap from a selected text fragment."""
    try:
        graph = _new_generator().generate_from_selection(request.text)
    except InputTooLargeError as e:
        return _too_large(e)

    advisory = None
    if not request.text.strip():
        advisory = "No text selected"
    elif not graph.nodes:
        advisory = "No key concepts found in selection"
    return GenerateResponse(graph=graph, advisory=advisory)


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# 2. EXPORT
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

@router.get("/mindmap/formats", response_model=List[ExportFormat])
async def list_formats():
    """Available export formats."""
    return get_export_formats()


@router.post(
    "/mindmap/export",
    response_model=ExportResponse,
    responses={400: {"model": ErrorResponse}},
)
async def export(request: ExportRequest):
    """Render a graph in one of the supported dialects."""
    try:
        exported = export_file(request.graph, request.format)
    except UnsupportedFormatError as e:
        body = ErrorResponse(status="error", message=str(e), detail=e.format_id)
        return JSONResponse(status_code=400, content=body.model_dump())
    return ExportResponse(format=request.format, **exported.model_dump())


@router.post("/mindmap/insert", response_model=InsertResponse)
async def insert(request: InsertRequest):
    """Mermaid code block for pasting the diagram into a document."""
    return InsertResponse(content=insert_into_document(request.graph, request.format))
