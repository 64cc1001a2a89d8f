"""Record service — owner-scoped CRUD for books and movies.

Learn: Every query here filters on BOTH user_id and user_local_id. A book
that exists but belongs to someone else comes back exactly like a book
that doesn't exist: same single query shape, same NotFoundError message.
There is no "exists, but forbidden" branch to leak through.

Creation is the only path that touches SequenceAllocator. Numbers are
reserved first (one block per batch, in submission order), then all the
rows are written in one transaction.
"""

from typing import Sequence

import structlog
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.db.models import MAX_INTEGER, RECORD_MODELS, Book, Movie, RecordKind
from bookshelf.errors import InternalError, NotFoundError, ValidationError
from bookshelf.services.sequence import SequenceAllocator

logger = structlog.get_logger()

Record = Book | Movie


class RecordService:
    """Business logic for one kind of record (books or movies)."""

    def __init__(
        self,
        db: AsyncSession,
        allocator: SequenceAllocator,
        kind: RecordKind,
    ):
        self.db = db
        self.allocator = allocator
        self.kind = kind
        self.model = RECORD_MODELS[kind]
        self.label = kind.value.capitalize()

    def _not_found(self) -> NotFoundError:
        return NotFoundError(f"{self.label} not found")

    async def _commit(self, action: str, user_id: int) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            logger.exception(
                "records.store_error", action=action, kind=self.kind.value, user_id=user_id
            )
            raise InternalError() from None

    # ─── Read ───────────────────────────────────────────

    async def list_records(self, user_id: int) -> list[Record]:
        result = await self.db.execute(
            select(self.model)
            .where(self.model.user_id == user_id)
            .order_by(self.model.user_local_id)
        )
        return list(result.scalars().all())

    async def get_record(self, user_id: int, local_id: int) -> Record:
        # Numbers outside the column range can never have been allocated
        if not 1 <= local_id <= MAX_INTEGER:
            raise self._not_found()
        result = await self.db.execute(
            select(self.model).where(
                self.model.user_id == user_id,
                self.model.user_local_id == local_id,
            )
        )
        record = result.scalars().first()
        if record is None:
            raise self._not_found()
        return record

    # ─── Create ─────────────────────────────────────────

    async def create_records(
        self, user_id: int, items: Sequence[BaseModel]
    ) -> list[Record]:
        """Create one or more records, numbered in the order given.

        Items are already validated by their Create schema.
        """
        if not items:
            raise ValidationError(f"At least one {self.kind.value} is required")

        local_ids = await self.allocator.reserve(user_id, self.kind, len(items))

        records = [
            self.model(user_id=user_id, user_local_id=local_id, **item.model_dump())
            for item, local_id in zip(items, local_ids)
        ]
        self.db.add_all(records)
        await self._commit("create", user_id)

        logger.info(
            "records.created",
            kind=self.kind.value,
            user_id=user_id,
            user_local_ids=local_ids,
        )
        return records

    # ─── Update ─────────────────────────────────────────

    async def update_record(
        self, user_id: int, local_id: int, fields: BaseModel
    ) -> Record:
        """Replace the editable fields. Ownership and numbering never change."""
        record = await self.get_record(user_id, local_id)

        for name, value in fields.model_dump().items():
            setattr(record, name, value)
        await self._commit("update", user_id)

        logger.info(
            "records.updated", kind=self.kind.value, user_id=user_id, user_local_id=local_id
        )
        return record

    # ─── Delete ─────────────────────────────────────────

    async def delete_record(self, user_id: int, local_id: int) -> None:
        record = await self.get_record(user_id, local_id)

        await self.db.delete(record)
        await self._commit("delete", user_id)

        logger.info(
            "records.deleted", kind=self.kind.value, user_id=user_id, user_local_id=local_id
        )
