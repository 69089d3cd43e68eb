"""
Request-scoped dependencies.

Handlers never read "the current user" from global state. They
declare a RequestContext parameter and FastAPI builds it from the
session for that request only.
"""

from datetime import datetime
from typing import Optional

from fastapi import Depends, Query, Request

from shopledger.auth import AuthenticationError, RequestContext
from shopledger.models.transaction import DateRange
from shopledger.orchestrator import AppComponents
from shopledger.queries import Period, resolve_period
from shopledger.telemetry import create_correlation_id


SESSION_USER_KEY = "user_id"


def get_components(request: Request) -> AppComponents:
    return request.app.state.components


async def get_request_context(
    request: Request,
    components: AppComponents = Depends(get_components),
) -> RequestContext:
    """
    Resolve the authenticated user for this request.

    Raises:
        AuthenticationError: No session, or the session's user no longer exists
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        raise AuthenticationError("Not authenticated")

    user = await components.accounts.get_user(int(user_id))
    if user is None:
        request.session.clear()
        raise AuthenticationError("Not authenticated")

    correlation_id = getattr(request.state, "correlation_id", None) or create_correlation_id()
    return RequestContext(user=user, correlation_id=correlation_id)


def get_date_range(
    period: Optional[Period] = Query(default=None),
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
) -> Optional[DateRange]:
    """Optional period filter; None means all time."""
    if period is None and start is None and end is None:
        return None
    return resolve_period(period.value if period else None, start, end)
