"""Signup and signin endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_auth_service
from schemas.auth import AccessTokenResponse, AuthRequest, SignupRequest
from services.auth_service import AuthService
from services.exceptions import (
    DuplicateEmailError,
    EncodingError,
    InvalidCredentialsError,
)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=AccessTokenResponse, status_code=201)
async def signup(
    data: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AccessTokenResponse:
    """Register a new account and return an access token."""
    try:
        token = await auth_service.signup(
            data.email,
            data.password,
            first_name=data.first_name,
            last_name=data.last_name,
        )
    except DuplicateEmailError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        ) from e
    except EncodingError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    return AccessTokenResponse(access_token=token)


@router.post("/signin", response_model=AccessTokenResponse)
async def signin(
    data: AuthRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AccessTokenResponse:
    """Exchange email and password for an access token."""
    try:
        token = await auth_service.signin(data.email, data.password)
    except InvalidCredentialsError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    return AccessTokenResponse(access_token=token)
