"""History endpoints - saved searches and building usage."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import get_current_user
from backend.app.config import get_settings
from backend.app.db.engine import get_session
from backend.app.db.histories import (
    create_history,
    get_history,
    increment_building_usage,
    list_building_usage,
    list_histories,
)
from backend.app.db.models import User
from backend.app.models.history import BuildingUsageRecord, HistoryCreate, HistoryRecord

router = APIRouter(prefix="/api", tags=["histories"])


@router.post("/histories", response_model=HistoryRecord, status_code=status.HTTP_201_CREATED)
async def save_history(
    payload: HistoryCreate,
    user: Annotated[User, Depends(get_current_user)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HistoryRecord:
    """Save a search and its path options, and count the buildings visited."""
    record = await create_history(session, user.id, payload)
    await increment_building_usage(session, user.id, payload.path_options)
    return record


@router.get("/histories", response_model=list[HistoryRecord])
async def get_histories(
    user: Annotated[User, Depends(get_current_user)],
    session: Annotated[AsyncSession, Depends(get_session)],
    limit: Annotated[int | None, Query()] = None,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[HistoryRecord]:
    """List the user's histories, newest first."""
    settings = get_settings()
    page = min(limit or settings.history_page_default, settings.history_page_max)
    return await list_histories(session, user.id, limit=max(page, 1), offset=offset)


@router.get("/histories/{history_id}", response_model=HistoryRecord)
async def get_history_by_id(
    history_id: int,
    user: Annotated[User, Depends(get_current_user)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> HistoryRecord:
    """Get one history owned by the user.

    Raises:
        HTTPException: 404 if not found or owned by someone else
    """
    record = await get_history(session, user.id, history_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return record


@router.get("/building-usage", response_model=list[BuildingUsageRecord])
async def get_building_usage(
    user: Annotated[User, Depends(get_current_user)],
    session: Annotated[AsyncSession, Depends(get_session)],
) -> list[BuildingUsageRecord]:
    """Building usage stats for the user, most used first."""
    return await list_building_usage(session, user.id)
