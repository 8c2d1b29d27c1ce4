# ─────────────────────────────────────────────────────────────────────────────
# Generation endpoints (THIN) — /generate-v2, legacy /generate, retired /imagen
# ─────────────────────────────────────────────────────────────────────────────


from fastapi import APIRouter, Depends, Request

from diorama.dependencies import get_pipeline_orchestrator
from diorama.exceptions import EndpointRetiredError
from diorama.rate_limit import generation_limited
from diorama.schemas import (
    FallbackResponse,
    GenerateRequest,
    GenerateV2Response,
    LegacyGenerateResponse,
)
from diorama.services.pipeline import PipelineOrchestrator

router = APIRouter()


@router.post("/generate-v2", response_model=GenerateV2Response | FallbackResponse)
@generation_limited
async def generate_v2(
    request: Request,
    body: GenerateRequest,
    orchestrator: PipelineOrchestrator = Depends(get_pipeline_orchestrator),
) -> GenerateV2Response | FallbackResponse:
    """Stylize the house at an address: identity extraction + reference synthesis.

    Addresses without street-level coverage, or with privacy-blurred imagery,
    get a pre-rendered famous home in the same style (200, flagged).
    Validation is Pydantic + sanitize(). Errors are exceptions. Logic is in
    the orchestrator. This endpoint is just wiring.
    """
    return await orchestrator.generate_v2(body)


@router.post("/generate", response_model=LegacyGenerateResponse)
@generation_limited
async def generate(
    request: Request,
    body: GenerateRequest,
    orchestrator: PipelineOrchestrator = Depends(get_pipeline_orchestrator),
) -> LegacyGenerateResponse:
    """Legacy single-shot pipeline: dual image analysis, then synthesis."""
    return await orchestrator.generate_legacy(body)


@router.post("/imagen/generate", status_code=410)
async def imagen_generate() -> None:
    """Retired: it forwarded caller-supplied prompts straight to the model."""
    raise EndpointRetiredError("/imagen/generate", "/generate-v2 with a styleId")
