"""Revision number allocation."""

from typing import Annotated

import structlog
from fastapi import Depends

from audittables.api.dependencies import DBSession
from audittables.core.audit.context import get_audit_context
from audittables.core.audit.models import Revision
from audittables.core.constants import MAX_REQUEST_ID_LENGTH
from audittables.core.database.errors import storage_errors


log = structlog.get_logger()


class RevisionSequencer:
    """Issues revision numbers by inserting rows into ``revisions``.

    The number is the row's database-generated key, so concurrent
    callers always receive distinct, increasing values without any
    read-then-write step. A number allocated in a transaction that rolls
    back never appears in the audit log.
    """

    def __init__(self, session: DBSession) -> None:
        self.session = session

    async def next_revision(self) -> Revision:
        """Allocate a new revision in the current transaction.

        Returns:
            The persisted revision, with number and timestamp loaded

        Raises:
            StorageError: If the database is unavailable
        """
        request_id = get_audit_context().get("request_id")
        if request_id is not None:
            request_id = request_id[:MAX_REQUEST_ID_LENGTH]
        revision = Revision(request_id=request_id)
        self.session.add(revision)

        with storage_errors("revision_allocate"):
            await self.session.flush()
            await self.session.refresh(revision)

        log.debug(
            "revision_allocated",
            revision_number=revision.id,
            request_id=revision.request_id,
        )
        return revision


# Type alias for dependency injection
Sequencer = Annotated[RevisionSequencer, Depends(RevisionSequencer)]
