"""
FastAPI dependencies - authentication for the booking and item endpoints.
The booking core trusts the user id resolved here and does not re-check user existence.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from shareit.config import get_settings
from shareit.db.session import DbSession
from shareit.db.repositories.base_repository import Page
from shareit.db.repositories.user_repository import UserRepository
from shareit.core.security import decode_access_token

settings = get_settings()
security = HTTPBearer(auto_error=False)


async def get_current_user_id(
    session: DbSession,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> int:
    """Resolve JWT to an active user id. Raises 401 if missing or invalid."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_access_token(credentials.credentials)
    if not payload or "sub" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    user = await UserRepository(session).get_by_id(int(payload["sub"]))
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")
    return user.id


def get_page(
    from_: Annotated[int | None, Query(alias="from", ge=0)] = None,
    size: Annotated[int | None, Query(ge=1, le=settings.max_page_size)] = None,
) -> Page | None:
    """Offset/limit from `from` and `size`. If either is missing the whole result set is returned."""
    if from_ is None or size is None:
        return None
    return Page(offset=from_, limit=size)


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
PageParams = Annotated[Page | None, Depends(get_page)]
