# ─────────────────────────────────────────────────────────────────────────────
# Imagery + Vision Routes — Street View, satellite and image analysis
# ─────────────────────────────────────────────────────────────────────────────
# Addresses go through the same sanitizer as generation requests. Without a
# Maps key the fetch endpoints answer {base64: null, mock: true}.
# ─────────────────────────────────────────────────────────────────────────────

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from diorama.dependencies import get_pipeline_orchestrator
from diorama.schemas import (
    ImageryFetchResponse,
    StreetViewImageResponse,
    VisionAnalyzeRequest,
    VisionAnalyzeResponse,
)
from diorama.services.pipeline import PipelineOrchestrator

router = APIRouter()

_SIZE_PATTERN = r"^\d{2,4}x\d{2,4}$"

AddressQuery = Annotated[str, Query(min_length=1)]
SizeQuery = Annotated[str, Query(pattern=_SIZE_PATTERN)]


@router.get("/streetview/metadata")
async def street_view_metadata(
    address: AddressQuery,
    orchestrator: PipelineOrchestrator = Depends(get_pipeline_orchestrator),
) -> dict[str, Any]:
    """Raw Street View metadata: status, pano_id, location, date."""
    return await orchestrator.street_view_metadata(address)


@router.get("/streetview/image", response_model=StreetViewImageResponse)
async def street_view_image(
    address: AddressQuery,
    size: SizeQuery = "640x480",
    fov: Annotated[int, Query(ge=10, le=120)] = 90,
    pitch: Annotated[int, Query(ge=-90, le=90)] = 10,
    heading: Annotated[int | None, Query(ge=0, le=360)] = None,
    orchestrator: PipelineOrchestrator = Depends(get_pipeline_orchestrator),
) -> StreetViewImageResponse:
    """Street View Static URL for the address (a placeholder in mock mode)."""
    return orchestrator.street_view_image(address, size, fov=fov, pitch=pitch, heading=heading)


@router.get("/streetview/fetch", response_model=ImageryFetchResponse)
async def street_view_fetch(
    address: AddressQuery,
    size: SizeQuery = "640x480",
    orchestrator: PipelineOrchestrator = Depends(get_pipeline_orchestrator),
) -> ImageryFetchResponse:
    """Street View image as base64."""
    return await orchestrator.fetch_street_view(address, size)


@router.get("/aerialview/fetch", response_model=ImageryFetchResponse)
async def aerial_view_fetch(
    address: AddressQuery,
    size: SizeQuery = "640x640",
    zoom: Annotated[int, Query(ge=1, le=21)] = 19,
    orchestrator: PipelineOrchestrator = Depends(get_pipeline_orchestrator),
) -> ImageryFetchResponse:
    """Satellite image as base64."""
    return await orchestrator.fetch_aerial_view(address, size, zoom)


@router.post("/vision/analyze", response_model=VisionAnalyzeResponse)
async def vision_analyze(
    body: VisionAnalyzeRequest,
    orchestrator: PipelineOrchestrator = Depends(get_pipeline_orchestrator),
) -> VisionAnalyzeResponse:
    """One-paragraph semantic description of an uploaded property photo."""
    return await orchestrator.analyze_image(body)
