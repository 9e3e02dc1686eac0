"""Shared API dependencies."""

from typing import Annotated

from fastapi import Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from audittables.config import settings
from audittables.core.constants import MAX_ROW_ID
from audittables.core.database import get_db


# Type alias for database session dependency
DBSession = Annotated[AsyncSession, Depends(get_db, scope="function")]


class PageParams:
    """Page-number pagination for list endpoints (1-indexed)."""

    def __init__(
        self,
        page: Annotated[int, Query(ge=1)] = 1,
        page_size: Annotated[int | None, Query(ge=1)] = None,
    ) -> None:
        self.page = page
        self.page_size = min(page_size or settings.default_page_size, settings.max_page_size)


Pagination = Annotated[PageParams, Depends(PageParams)]


# Primary keys and revision numbers accepted in paths; values outside the
# column range are rejected with 422 before reaching the database
RowId = Annotated[int, Path(ge=1, le=MAX_ROW_ID)]
