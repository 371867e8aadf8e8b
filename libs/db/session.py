from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from libs.common.errors import AppError, ConflictError, StoreError
from libs.common.logging import get_logger
from libs.db.config import AsyncSessionLocal

logger = get_logger(__name__)


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an async database session.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


@asynccontextmanager
async def atomic(db: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run a multi-row mutation as one unit of work.

    Everything written inside the block is committed together on exit, or
    rolled back together if anything raises. Reads issued before entering
    the block belong to the same transaction (the session autobegins), so a
    ``SELECT ... FOR UPDATE`` taken earlier is held until the commit.

    Unique/partial-index violations surface as ``ConflictError``; any other
    driver failure surfaces as ``StoreError``.
    """
    try:
        yield db
        await db.commit()
    except AppError:
        await db.rollback()
        raise
    except IntegrityError as exc:
        await db.rollback()
        logger.info("Integrity violation rolled back: %s", exc.orig)
        raise ConflictError("Request conflicts with existing data") from exc
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Unit of work rolled back after store failure")
        raise StoreError() from exc
    except BaseException:
        await db.rollback()
        raise
