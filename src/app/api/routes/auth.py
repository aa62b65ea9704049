"""Authentication endpoints: registration, login, remember-me and logout."""

from fastapi import APIRouter, Depends, Request, status

from app.api.deps import get_auth_service, get_current_user, get_session, get_session_manager
from app.models.user import User
from app.schemas.auth import (
    AuthResponse,
    AutoLoginRequest,
    CsrfTokenResponse,
    CurrentUser,
    LoginRequest,
    UserRegister,
    UserResponse,
)
from app.schemas.common import MessageResponse
from app.services.auth import AuthService
from app.services.session import Session, SessionManager

router = APIRouter(tags=["authentication"])


@router.get(
    "/csrf-token",
    response_model=CsrfTokenResponse,
    summary="Get CSRF token",
    description="Return the CSRF token of the current session, creating the session if needed.",
)
async def csrf_token(
    session: Session = Depends(get_session),
    sessions: SessionManager = Depends(get_session_manager),
) -> CsrfTokenResponse:
    return CsrfTokenResponse(csrf_token=sessions.issue_token(session))


@router.post(
    "/register",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Register new user",
    description="Create a new account and sign in to a fresh session.",
)
async def register(
    data: UserRegister,
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Register a new user account.

    Raises:
        400: Validation error or email already registered
    """
    result = await auth_service.register(
        email=data.email,
        password=data.password,
        name=data.name,
        session=session,
    )
    return AuthResponse(
        message="User registered successfully",
        user=UserResponse.model_validate(result.user),
        csrf_token=result.csrf_token,
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="User login",
    description="Authenticate with email and password. The session id and CSRF token are rotated.",
)
async def login(
    data: LoginRequest,
    request: Request,
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Authenticate a user.

    Returns:
        User, new CSRF token and, with rememberMe, a remember token

    Raises:
        401: Invalid credentials
        429: Too many failed attempts for this email and client
    """
    result = await auth_service.login(
        email=data.email,
        password=data.password,
        session=session,
        origin=request.client.host if request.client else None,
        remember_me=data.remember_me,
    )
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(result.user),
        csrf_token=result.csrf_token,
        remember_token=result.remember_token,
    )


@router.post(
    "/auto-login",
    response_model=AuthResponse,
    response_model_exclude_none=True,
    summary="Login with remember token",
)
async def auto_login(
    data: AutoLoginRequest,
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    Re-establish a session from a remember token.

    Raises:
        401: Token unknown, superseded or expired
    """
    result = await auth_service.auto_login(data.remember_token, session)
    return AuthResponse(
        message="Auto-login successful",
        user=UserResponse.model_validate(result.user),
        csrf_token=result.csrf_token,
    )


@router.post("/logout", response_model=MessageResponse, summary="Logout")
async def logout(
    session: Session = Depends(get_session),
    auth_service: AuthService = Depends(get_auth_service),
) -> MessageResponse:
    await auth_service.logout(session)
    return MessageResponse(message="Logged out successfully")


@router.get(
    "/me",
    response_model=CurrentUser,
    summary="Get current user",
)
async def me(current_user: User = Depends(get_current_user)) -> CurrentUser:
    """
    Get the authenticated user.

    Raises:
        401: Not signed in
    """
    return CurrentUser(user=UserResponse.model_validate(current_user))
