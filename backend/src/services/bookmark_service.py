"""Service layer for bookmark CRUD operations."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.bookmark import Bookmark
from schemas.bookmark import BookmarkCreate, BookmarkUpdate
from services.ownership import authorize

# Columns that can't be set to NULL through a partial update
NON_NULLABLE_FIELDS = frozenset({"title", "link"})


async def list_bookmarks(
    db: AsyncSession,
    user_id: int,
    offset: int = 0,
    limit: int = 100,
) -> list[Bookmark]:
    """Get a user's bookmarks, newest first."""
    result = await db.execute(
        select(Bookmark)
        .where(Bookmark.user_id == user_id)
        .order_by(Bookmark.created_at.desc(), Bookmark.id.desc())
        .offset(offset)
        .limit(limit),
    )
    return list(result.scalars().all())


async def create_bookmark(
    db: AsyncSession,
    user_id: int,
    data: BookmarkCreate,
) -> Bookmark:
    """
    Create a new bookmark owned by `user_id`.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = Bookmark(user_id=user_id, **data.model_dump())
    db.add(bookmark)
    await db.flush()
    await db.refresh(bookmark)
    return bookmark


async def get_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
) -> Bookmark:
    """
    Get a bookmark owned by the user.

    Raises:
        ForbiddenError: Bookmark is missing or belongs to another user.
    """
    return await authorize(db, Bookmark, user_id, bookmark_id)


async def update_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
    data: BookmarkUpdate,
) -> Bookmark:
    """
    Apply the fields set in `data` to a bookmark owned by the user.

    Raises:
        ForbiddenError: Bookmark is missing or belongs to another user.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = await authorize(db, Bookmark, user_id, bookmark_id)

    update_data = data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            continue
        setattr(bookmark, field, value)

    await db.flush()
    await db.refresh(bookmark)
    return bookmark


async def delete_bookmark(
    db: AsyncSession,
    user_id: int,
    bookmark_id: int,
) -> None:
    """
    Delete a bookmark owned by the user.

    Raises:
        ForbiddenError: Bookmark is missing or belongs to another user.

    Note: Does not commit. Caller (session generator) handles commit at request end.
    """
    bookmark = await authorize(db, Bookmark, user_id, bookmark_id)
    await db.delete(bookmark)
    await db.flush()
