"""Endpoints for the authenticated user's own profile."""
from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_current_user, get_user_directory
from core.auth import BEARER_SCHEME
from schemas.user import UserPublic, UserUpdate
from services.exceptions import DuplicateEmailError, NotFoundError, UnauthenticatedError
from services.user_directory import SqlUserDirectory


router = APIRouter(
    prefix="/user",
    tags=["users"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/me", response_model=UserPublic)
async def get_me(current_user: UserPublic = Depends(get_current_user)) -> UserPublic:
    """Get the current authenticated user's info."""
    return current_user


@router.patch("", response_model=UserPublic)
async def update_me(
    data: UserUpdate,
    current_user: UserPublic = Depends(get_current_user),
    directory: SqlUserDirectory = Depends(get_user_directory),
) -> UserPublic:
    """Edit the current user's email or name. Only fields sent are changed."""
    try:
        user = await directory.update(
            current_user.id, data.model_dump(exclude_unset=True),
        )
    except DuplicateEmailError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        ) from e
    except NotFoundError as e:
        # Account removed between authentication and update
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(UnauthenticatedError()),
            headers={"WWW-Authenticate": BEARER_SCHEME},
        ) from e
    return UserPublic.model_validate(user)
