"""Account API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, ConfigDict, Field

from .accounts_service import AccountService

router = APIRouter(prefix="/api", tags=["accounts"])


class CredentialsRequest(BaseModel):
    email: str
    password: str


class RegisterResponse(BaseModel):
    success: bool = True


class UserSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str
    plan: str
    videos_processed: int = Field(alias="videosProcessed")


class LoginResponse(BaseModel):
    success: bool = True
    user: UserSchema


def get_account_service(request: Request) -> AccountService:
    try:
        return request.app.state.account_service  # type: ignore[attr-defined]
    except AttributeError as exc:
        raise RuntimeError("AccountService is not configured") from exc


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: CredentialsRequest,
    service: AccountService = Depends(get_account_service),
) -> RegisterResponse:
    service.register(payload.email, payload.password)
    return RegisterResponse()


@router.post("/login", response_model=LoginResponse)
def login(
    payload: CredentialsRequest,
    service: AccountService = Depends(get_account_service),
) -> LoginResponse:
    account = service.login(payload.email, payload.password)
    return LoginResponse(
        user=UserSchema(
            email=account.email,
            plan=account.plan.value,
            videos_processed=account.videos_processed,
        )
    )
