"""URL slugs for clubs."""

import re
import uuid
from typing import Optional

from services.clubs_service.models import Club
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(name: str) -> str:
    """``"Sydney  Club!"`` -> ``"sydney-club"``; falls back to ``"club"``."""
    slug = _NON_ALNUM.sub("-", name.lower()).strip("-")
    return slug or "club"


async def unique_slug(
    db: AsyncSession, name: str, exclude_id: Optional[uuid.UUID] = None
) -> str:
    """First free slug among ``base``, ``base-1``, ``base-2``, ...

    ``exclude_id`` lets a club being renamed keep its own slug.
    """
    base = slugify(name)
    query = select(Club.slug).where(
        (Club.slug == base) | Club.slug.startswith(f"{base}-", autoescape=True)
    )
    if exclude_id is not None:
        query = query.where(Club.id != exclude_id)
    taken = set((await db.execute(query)).scalars().all())

    if base not in taken:
        return base
    counter = 1
    while f"{base}-{counter}" in taken:
        counter += 1
    return f"{base}-{counter}"
