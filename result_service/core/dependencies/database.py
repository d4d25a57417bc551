"""Database dependencies for FastAPI route handlers.

`get_db_session()` wraps the framework-agnostic `get_async_session()` context
manager so the session lifecycle is tied to the HTTP request. CLI commands use
`get_async_session()` directly.
"""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from result_service.infra.database import get_async_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """FastAPI dependency for database session.

    Yields:
        Database session that is automatically closed after request.

    Example:
        @router.get("/results")
        async def list_results(session: AsyncSession = Depends(get_db_session)):
            ...
    """
    async with get_async_session() as session:
        yield session
