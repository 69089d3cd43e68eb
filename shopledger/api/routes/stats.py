"""Summary and chart data routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from shopledger.api.dependencies import (
    get_components,
    get_date_range,
    get_request_context,
)
from shopledger.auth import RequestContext
from shopledger.models.transaction import (
    CategoryShare,
    DateRange,
    MonthlyTotals,
    Summary,
    TransactionType,
)
from shopledger.orchestrator import AppComponents


router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/summary", response_model=Summary)
async def summary(
    ctx: RequestContext = Depends(get_request_context),
    date_range: Optional[DateRange] = Depends(get_date_range),
    components: AppComponents = Depends(get_components),
) -> Summary:
    return await components.ledger.summary(ctx, date_range)


@router.get("/monthly", response_model=list[MonthlyTotals])
async def monthly(
    months: int = Query(default=6, ge=1, le=24),
    ctx: RequestContext = Depends(get_request_context),
    components: AppComponents = Depends(get_components),
) -> list[MonthlyTotals]:
    return await components.ledger.monthly(ctx, months=months)


@router.get("/categories", response_model=list[CategoryShare])
async def categories(
    transaction_type: TransactionType = Query(default=TransactionType.EXPENSE, alias="type"),
    ctx: RequestContext = Depends(get_request_context),
    date_range: Optional[DateRange] = Depends(get_date_range),
    components: AppComponents = Depends(get_components),
) -> list[CategoryShare]:
    return await components.ledger.categories(ctx, transaction_type, date_range)
