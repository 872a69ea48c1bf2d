from typing import Optional
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from storefront.db.session import get_session
from storefront.core.auth_gate import Identity
from storefront.core.exceptions import UnauthorizedError
from storefront.core.security import TokenService
from storefront.core.logging import get_logger
from storefront.schemas.auth import (
    AuthFailure,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from storefront.services.auth import AuthService, RegistrationError

logger = get_logger(__name__)

router = APIRouter()

# Same message for unknown user and wrong password
LOGIN_FAILED_MESSAGE = "用戶名或密碼錯誤"


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service

def get_auth_service(
    session: Session = Depends(get_session),
    token_service: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(session, token_service)

def get_current_identity_optional(request: Request) -> Optional[Identity]:
    return getattr(request.state, "identity", None)

def get_current_identity(identity: Optional[Identity] = Depends(get_current_identity_optional)) -> Identity:
    if identity is None:
        raise UnauthorizedError("Invalid or missing credentials, please log in")
    return identity


def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=AuthFailure(message=message).model_dump())


@router.post(
    "/register",
    response_model=RegisterResponse,
    responses={409: {"model": AuthFailure}, 500: {"model": AuthFailure}},
)
def register(user_in: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    user, error = service.register(user_in.username, user_in.email, user_in.password)

    if error is RegistrationError.SYSTEM_ERROR:
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, error.message)
    if error is not None:
        return _failure(status.HTTP_409_CONFLICT, error.message)

    return RegisterResponse(success=True, message="Registration successful", username=user.username)


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": AuthFailure}, 500: {"model": AuthFailure}},
)
def login(credentials: LoginRequest, service: AuthService = Depends(get_auth_service)):
    try:
        result = service.login(credentials.username, credentials.password)
    except Exception as e:
        logger.error(f"Login error: username={credentials.username}, error={e}", exc_info=True)
        return _failure(status.HTTP_500_INTERNAL_SERVER_ERROR, "Login failed, please try again later")

    if result is None:
        return _failure(status.HTTP_401_UNAUTHORIZED, LOGIN_FAILED_MESSAGE)

    user, token = result
    return LoginResponse(
        success=True,
        message="Login successful",
        username=user.username,
        userId=user.id,
        token=token,
    )


@router.post("/logout")
def logout():
    # Tokens are stateless; the client discards its copy
    return {"success": True, "message": "Logout successful"}
