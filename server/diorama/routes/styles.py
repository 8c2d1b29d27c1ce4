# GET /styles — registry listing for client style pickers.

from fastapi import APIRouter, Depends

from diorama.dependencies import get_fallback_catalog, get_style_registry
from diorama.pipeline.fallback_catalog import FallbackCatalog
from diorama.pipeline.styles import StyleRegistry
from diorama.schemas import StyleInfo, StylesResponse

router = APIRouter()


@router.get("/styles", response_model=StylesResponse)
async def list_styles(
    registry: StyleRegistry = Depends(get_style_registry),
    catalog: FallbackCatalog = Depends(get_fallback_catalog),
) -> StylesResponse:
    """Every accepted styleId. Prompts stay server-side."""
    fallback_styles = catalog.styles()
    return StylesResponse(
        styles=[
            StyleInfo(
                id=style.id,
                display_name=style.display_name,
                use_reference=style.use_reference,
                has_fallback=style.id in fallback_styles,
            )
            for style in registry.list_styles()
        ]
    )
