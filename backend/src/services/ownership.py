"""Per-resource ownership checks for user-owned rows."""
import logging
from typing import Protocol, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from services.exceptions import ForbiddenError

logger = logging.getLogger(__name__)


class Owned(Protocol):
    """Any mapped row carrying the id of the user who owns it."""

    user_id: int


OwnedT = TypeVar("OwnedT", bound=Owned)

# Primary keys are 32-bit INTEGER columns
MAX_RESOURCE_ID = 2**31 - 1


async def authorize(
    db: AsyncSession,
    model: type[OwnedT],
    requester_id: int,
    resource_id: int,
) -> OwnedT:
    """
    Load a row by id and return it only if `requester_id` owns it.

    A missing row and a row owned by someone else raise the same ForbiddenError,
    so a caller can't probe which ids exist. Callers must only mutate or return
    the row handed back by this function.

    Ids outside the key column's range can't name a row and count as missing.

    Raises:
        ForbiddenError: Row is missing or owned by another user.
    """
    resource = None
    if 1 <= resource_id <= MAX_RESOURCE_ID:
        resource = await db.get(model, resource_id)
    if resource is None or resource.user_id != requester_id:
        logger.info(
            "User %s denied access to %s %s",
            requester_id,
            model.__name__,
            resource_id,
        )
        raise ForbiddenError()
    return resource
