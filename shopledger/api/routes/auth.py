"""Registration, login and session routes."""

from fastapi import APIRouter, Depends, Request, status

from shopledger.api.dependencies import (
    SESSION_USER_KEY,
    get_components,
    get_request_context,
)
from shopledger.auth import RequestContext
from shopledger.models.user import LoginRequest, PublicUser, RegisterRequest
from shopledger.orchestrator import AppComponents


router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/register", response_model=PublicUser, status_code=status.HTTP_201_CREATED)
async def register(
    payload: RegisterRequest,
    request: Request,
    components: AppComponents = Depends(get_components),
) -> PublicUser:
    user = await components.accounts.register(payload)
    request.session[SESSION_USER_KEY] = user.id
    return user


@router.post("/login", response_model=PublicUser)
async def login(
    payload: LoginRequest,
    request: Request,
    components: AppComponents = Depends(get_components),
) -> PublicUser:
    user = await components.accounts.authenticate(payload.username, payload.password)
    request.session.clear()
    request.session[SESSION_USER_KEY] = user.id
    return user


@router.post("/logout")
async def logout(request: Request) -> dict:
    request.session.clear()
    return {"message": "Logged out"}


@router.get("/user", response_model=PublicUser)
async def current_user(ctx: RequestContext = Depends(get_request_context)) -> PublicUser:
    return ctx.user
