"""Per-user sequence numbers for books and movies.

Learn: Reading "current max user_local_id" and then inserting max+1 as two
steps is a race: two concurrent requests read the same max and both
insert the same number. Instead each (user, kind) pair has a counter row
that one statement bumps and reads back:

    INSERT INTO sequence_counters (user_id, kind, value) VALUES (:u, :k, :n)
    ON CONFLICT (user_id, kind) DO UPDATE SET value = sequence_counters.value + :n
    RETURNING value

The database serializes concurrent upserts on the same row, so every
caller gets its own block of numbers. The first call for a pair inserts
the row, so numbering starts at 1.

Allocation commits in its own short transaction, before the records are
written. If the record insert later fails, the reserved numbers are
simply never used again (burned). Nothing tries to hand them back.
"""

import structlog
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from bookshelf.db.engine import Database
from bookshelf.db.models import RecordKind, SequenceCounter
from bookshelf.errors import InternalError

logger = structlog.get_logger()

# Dialects that support INSERT ... ON CONFLICT DO UPDATE ... RETURNING
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SequenceAllocator:
    """Hands out strictly increasing, never-repeated numbers per (user, kind)."""

    def __init__(self, database: Database):
        try:
            self._insert = _UPSERT_INSERTS[database.dialect]
        except KeyError:
            raise ValueError(
                f"Sequence allocation is not supported on {database.dialect!r}"
            ) from None
        self.database = database

    async def next_sequence(self, user_id: int, kind: RecordKind) -> int:
        """Allocate a single number."""
        numbers = await self.reserve(user_id, kind, 1)
        return numbers[0]

    async def reserve(self, user_id: int, kind: RecordKind, count: int) -> list[int]:
        """Allocate `count` consecutive numbers, in ascending order.

        Learn: A batch of N records takes one block of N numbers with a
        single upsert, so the block is contiguous even if other requests
        for the same pair are in flight.
        """
        if count < 1:
            raise ValueError("count must be at least 1")

        stmt = (
            self._insert(SequenceCounter)
            .values(user_id=user_id, kind=kind.value, value=count)
            .on_conflict_do_update(
                index_elements=[SequenceCounter.user_id, SequenceCounter.kind],
                set_={"value": SequenceCounter.value + count},
            )
            .returning(SequenceCounter.value)
        )

        try:
            async with self.database.session() as session:
                result = await session.execute(stmt)
                last = result.scalar_one()
                await session.commit()
        except SQLAlchemyError:
            logger.exception(
                "sequence.allocation_failed",
                user_id=user_id,
                kind=kind.value,
                count=count,
            )
            raise InternalError() from None

        first = last - count + 1
        logger.debug(
            "sequence.reserved",
            user_id=user_id,
            kind=kind.value,
            first=first,
            last=last,
        )
        return list(range(first, last + 1))
