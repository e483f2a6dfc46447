"""Bookmark CRUD endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from schemas.bookmark import BookmarkCreate, BookmarkResponse, BookmarkUpdate
from schemas.user import UserPublic
from services import bookmark_service
from services.exceptions import ForbiddenError

router = APIRouter(
    prefix="/bookmarks",
    tags=["bookmarks"],
    dependencies=[Depends(get_current_user)],
)


def _forbidden(e: ForbiddenError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))


@router.get("/", response_model=list[BookmarkResponse])
async def list_bookmarks(
    offset: int = Query(default=0, ge=0, description="Pagination offset"),
    limit: int = Query(default=100, ge=1, le=500, description="Pagination limit"),
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> list[BookmarkResponse]:
    """List the current user's bookmarks, newest first."""
    bookmarks = await bookmark_service.list_bookmarks(
        db, current_user.id, offset=offset, limit=limit,
    )
    return [BookmarkResponse.model_validate(b) for b in bookmarks]


@router.post("/", response_model=BookmarkResponse, status_code=201)
async def create_bookmark(
    data: BookmarkCreate,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Create a new bookmark."""
    bookmark = await bookmark_service.create_bookmark(db, current_user.id, data)
    return BookmarkResponse.model_validate(bookmark)


@router.get("/{bookmark_id}", response_model=BookmarkResponse)
async def get_bookmark(
    bookmark_id: int,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Get a single bookmark by ID."""
    try:
        bookmark = await bookmark_service.get_bookmark(db, current_user.id, bookmark_id)
    except ForbiddenError as e:
        raise _forbidden(e) from e
    return BookmarkResponse.model_validate(bookmark)


@router.patch("/{bookmark_id}", response_model=BookmarkResponse)
async def update_bookmark(
    bookmark_id: int,
    data: BookmarkUpdate,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> BookmarkResponse:
    """Update a bookmark."""
    try:
        bookmark = await bookmark_service.update_bookmark(
            db, current_user.id, bookmark_id, data,
        )
    except ForbiddenError as e:
        raise _forbidden(e) from e
    return BookmarkResponse.model_validate(bookmark)


@router.delete("/{bookmark_id}", status_code=204)
async def delete_bookmark(
    bookmark_id: int,
    current_user: UserPublic = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> None:
    """Delete a bookmark."""
    try:
        await bookmark_service.delete_bookmark(db, current_user.id, bookmark_id)
    except ForbiddenError as e:
        raise _forbidden(e) from e
