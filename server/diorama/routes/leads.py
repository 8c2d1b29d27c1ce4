# POST /capture-email — opt-in lead capture (THIN)

from fastapi import APIRouter, Depends

from diorama.dependencies import get_lead_store
from diorama.schemas import CaptureEmailRequest, CaptureEmailResponse
from diorama.services.leads import LeadStore

router = APIRouter()


@router.post("/capture-email", response_model=CaptureEmailResponse)
async def capture_email(
    body: CaptureEmailRequest,
    leads: LeadStore = Depends(get_lead_store),
) -> CaptureEmailResponse:
    """Append the email (lower-cased) and optional address to the leads file."""
    await leads.capture(body.email, address=body.address, timestamp=body.timestamp)
    return CaptureEmailResponse()
