"""
Auth Router - registration, login, token refresh and the current-user lookup.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Header, Request, status

from ..errors import Unauthorized
from ..schemas import (
    AuthResponse,
    CurrentUserResponse,
    RefreshRequest,
    RefreshResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)
from ..service import AuthResult, AuthenticationService, UserView

router = APIRouter(prefix="/api/auth", tags=["auth"])


def get_auth_service(request: Request) -> AuthenticationService:
    return request.app.state.auth_service


def _bearer_token(authorization: Optional[str]) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise Unauthorized("Not authenticated")
    return authorization.split(" ", 1)[1].strip()


def get_current_user(
    service: AuthenticationService = Depends(get_auth_service),
    authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> UserView:
    return service.authenticate(_bearer_token(authorization))


def require_role(*roles: str):
    """Dependency factory: the caller must hold one of `roles`, read fresh from the store."""

    def dependency(
        service: AuthenticationService = Depends(get_auth_service),
        authorization: Optional[str] = Header(default=None, alias="Authorization"),
    ) -> UserView:
        return service.authorize(_bearer_token(authorization), roles)

    return dependency


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        token=result.access_token,
        refresh_token=result.refresh_token,
        user=UserResponse.model_validate(result.user),
    )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(payload: UserCreate, service: AuthenticationService = Depends(get_auth_service)):
    result = service.register(payload.name, payload.email, payload.password, payload.role)
    return _auth_response(result)


@router.post("/login", response_model=AuthResponse)
def login(payload: UserLogin, service: AuthenticationService = Depends(get_auth_service)):
    result = service.login(payload.email, payload.password)
    return _auth_response(result)


@router.post("/refresh", response_model=RefreshResponse)
def refresh(payload: RefreshRequest, service: AuthenticationService = Depends(get_auth_service)):
    return RefreshResponse(token=service.refresh(payload.refresh_token))


@router.get("/me", response_model=CurrentUserResponse)
def me(user: UserView = Depends(get_current_user)):
    return CurrentUserResponse(user=UserResponse.model_validate(user))
