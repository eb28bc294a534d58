"""Repository functions for users, saved histories and building usage."""

from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.db.models import BuildingUsage, History, User
from backend.app.models.history import BuildingUsageRecord, HistoryCreate, HistoryRecord

UNKNOWN_BUILDING = "Unknown"


def _to_record(row: History) -> HistoryRecord:
    return HistoryRecord(
        id=row.id,
        user=row.user_id,
        title=row.title,
        subtitle=row.subtitle,
        user_request=row.user_request,
        requested_date=row.requested_date,
        metadata=row.meta or {},
        path_options=row.path_options or [],
        created_at=row.created_at,
    )


async def find_or_create_user(
    session: AsyncSession,
    auth_sub: str,
    email: str | None = None,
    name: str | None = None,
) -> User:
    """Get the user for an identity subject, creating it on first sight.

    Args:
        session: Database session
        auth_sub: Identity subject (Auth0 `sub` claim or guest id)
        email: Optional email, stored only on creation
        name: Optional display name, stored only on creation

    Returns:
        User row
    """
    result = await session.execute(select(User).where(User.auth_sub == auth_sub))
    user = result.scalar_one_or_none()
    if user is not None:
        return user

    user = User(auth_sub=auth_sub, email=email, name=name)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


async def create_history(
    session: AsyncSession, user_id: int, payload: HistoryCreate
) -> HistoryRecord:
    """Save a search and its path options.

    Missing title falls back to the user request; non-list path options
    are stored as an empty list.
    """
    row = History(
        user_id=user_id,
        title=payload.title or payload.user_request or "",
        subtitle=payload.subtitle or "",
        user_request=payload.user_request or "",
        requested_date=payload.requested_date,
        meta=payload.metadata or {},
        path_options=payload.path_options if isinstance(payload.path_options, list) else [],
    )
    session.add(row)
    await session.commit()
    await session.refresh(row)
    return _to_record(row)


async def list_histories(
    session: AsyncSession, user_id: int, limit: int = 20, offset: int = 0
) -> list[HistoryRecord]:
    """List a user's histories, newest first."""
    result = await session.execute(
        select(History)
        .where(History.user_id == user_id)
        .order_by(History.created_at.desc(), History.id.desc())
        .limit(limit)
        .offset(offset)
    )
    return [_to_record(row) for row in result.scalars()]


async def get_history(
    session: AsyncSession, user_id: int, history_id: int
) -> HistoryRecord | None:
    """Get a history by ID; None unless it belongs to the user."""
    result = await session.execute(
        select(History).where(History.id == history_id, History.user_id == user_id)
    )
    row = result.scalar_one_or_none()
    return _to_record(row) if row is not None else None


def _locations(path_options: Iterable[Any]) -> list[str]:
    locations: list[str] = []
    for path in path_options:
        schedule = path.get("schedule") if isinstance(path, dict) else None
        if not isinstance(schedule, list):
            continue
        for item in schedule:
            location = item.get("location") if isinstance(item, dict) else None
            locations.append(str(location) if location else UNKNOWN_BUILDING)
    return locations


async def increment_building_usage(
    session: AsyncSession, user_id: int, path_options: Any
) -> None:
    """Count one visit per saved stop, keyed by lower-cased building name."""
    if not isinstance(path_options, list):
        return

    now = datetime.now(UTC)
    pending: dict[str, BuildingUsage] = {}
    for building in _locations(path_options):
        key = building.lower()
        usage = pending.get(key)
        if usage is None:
            result = await session.execute(
                select(BuildingUsage).where(
                    BuildingUsage.user_id == user_id, BuildingUsage.key == key
                )
            )
            usage = result.scalar_one_or_none()
            if usage is None:
                usage = BuildingUsage(
                    user_id=user_id, key=key, building=building, count=0, created_at=now
                )
                session.add(usage)
            pending[key] = usage

        usage.count += 1
        usage.updated_at = now

    await session.commit()


async def list_building_usage(session: AsyncSession, user_id: int) -> list[BuildingUsageRecord]:
    """List a user's building usage, most used first."""
    result = await session.execute(
        select(BuildingUsage)
        .where(BuildingUsage.user_id == user_id)
        .order_by(BuildingUsage.count.desc(), BuildingUsage.key)
    )
    return [
        BuildingUsageRecord(
            key=row.key,
            building=row.building,
            count=row.count,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
        for row in result.scalars()
    ]
