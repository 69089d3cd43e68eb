"""Transaction CRUD routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Response, status

from shopledger.api.dependencies import (
    get_components,
    get_date_range,
    get_request_context,
)
from shopledger.auth import RequestContext
from shopledger.models.transaction import (
    CATEGORY_SUGGESTIONS,
    DateRange,
    Transaction,
    TransactionFields,
)
from shopledger.orchestrator import AppComponents


router = APIRouter(prefix="/api", tags=["transactions"])


@router.get("/categories")
async def list_categories(
    ctx: RequestContext = Depends(get_request_context),
) -> dict[str, list[str]]:
    return {t.value: categories for t, categories in CATEGORY_SUGGESTIONS.items()}


@router.get("/transactions", response_model=list[Transaction])
async def list_transactions(
    ctx: RequestContext = Depends(get_request_context),
    date_range: Optional[DateRange] = Depends(get_date_range),
    components: AppComponents = Depends(get_components),
) -> list[Transaction]:
    return await components.ledger.list_transactions(ctx, date_range)


@router.post(
    "/transactions",
    response_model=Transaction,
    status_code=status.HTTP_201_CREATED,
)
async def create_transaction(
    payload: TransactionFields,
    ctx: RequestContext = Depends(get_request_context),
    components: AppComponents = Depends(get_components),
) -> Transaction:
    return await components.ledger.create_transaction(ctx, payload)


@router.put("/transactions/{transaction_id}", response_model=Transaction)
async def update_transaction(
    transaction_id: int,
    payload: TransactionFields,
    ctx: RequestContext = Depends(get_request_context),
    components: AppComponents = Depends(get_components),
) -> Transaction:
    return await components.ledger.update_transaction(ctx, transaction_id, payload)


@router.delete(
    "/transactions/{transaction_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_transaction(
    transaction_id: int,
    ctx: RequestContext = Depends(get_request_context),
    components: AppComponents = Depends(get_components),
) -> Response:
    await components.ledger.delete_transaction(ctx, transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
