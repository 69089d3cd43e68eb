"""Billing helper and chatbot routes."""

from fastapi import APIRouter, Depends, status

from shopledger.api.dependencies import get_components, get_request_context
from shopledger.auth import RequestContext
from shopledger.models.insight import ChatRequest, ChatResponse
from shopledger.models.transaction import BillingResult, SaleRecord
from shopledger.orchestrator import AppComponents


router = APIRouter(prefix="/api", tags=["assistant"])


@router.post(
    "/billing",
    response_model=BillingResult,
    status_code=status.HTTP_201_CREATED,
)
async def record_sale(
    payload: SaleRecord,
    ctx: RequestContext = Depends(get_request_context),
    components: AppComponents = Depends(get_components),
) -> BillingResult:
    return await components.billing.record_sale(ctx, payload)


@router.post("/chatbot", response_model=ChatResponse)
async def chatbot(
    payload: ChatRequest,
    ctx: RequestContext = Depends(get_request_context),
    components: AppComponents = Depends(get_components),
) -> ChatResponse:
    """Always 200 once the question is valid; provider failures come back as a reply."""
    reply = await components.insight.ask(ctx, payload.message)
    return ChatResponse(reply=reply)
