"""Book and Movie API routes.

Learn: Books and movies have the same five routes, so one factory builds
a router per kind. The {local_id} in every path is the caller's own
number (user_local_id), never the global row id, and every service call
is scoped by the authenticated user's id.

    GET    /books              → all my books
    GET    /books/{local_id}   → one of my books
    POST   /books              → add one or more books (JSON array)
    PUT    /books/{local_id}   → replace a book's fields
    DELETE /books/{local_id}   → remove a book
"""

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf.auth.dependencies import CurrentIdentity, get_current_user
from bookshelf.db.engine import get_db
from bookshelf.db.models import RecordKind
from bookshelf.schemas.record import (
    BookCreate,
    BookRead,
    DeleteResponse,
    MovieCreate,
    MovieRead,
)
from bookshelf.services.record_service import RecordService
from bookshelf.services.sequence import SequenceAllocator


def get_sequence_allocator(request: Request) -> SequenceAllocator:
    return request.app.state.sequence_allocator


def record_router(
    kind: RecordKind,
    create_schema: type[BaseModel],
    read_schema: type[BaseModel],
) -> APIRouter:
    """Build the CRUD router for one record kind."""
    router = APIRouter(prefix=f"/{kind.value}s")
    label = kind.value.capitalize()

    def _svc(
        db: AsyncSession = Depends(get_db),
        allocator: SequenceAllocator = Depends(get_sequence_allocator),
    ) -> RecordService:
        return RecordService(db, allocator, kind)

    @router.get("", response_model=list[read_schema])
    async def list_records(
        identity: CurrentIdentity = Depends(get_current_user),
        svc: RecordService = Depends(_svc),
    ):
        return await svc.list_records(identity.user_id)

    @router.get("/{local_id}", response_model=read_schema)
    async def get_record(
        local_id: int,
        identity: CurrentIdentity = Depends(get_current_user),
        svc: RecordService = Depends(_svc),
    ):
        return await svc.get_record(identity.user_id, local_id)

    @router.post("", response_model=list[read_schema], status_code=201)
    async def create_records(
        body: list[create_schema],
        identity: CurrentIdentity = Depends(get_current_user),
        svc: RecordService = Depends(_svc),
    ):
        """Create one or more records. Numbers follow the array order."""
        return await svc.create_records(identity.user_id, body)

    @router.put("/{local_id}", response_model=read_schema)
    async def update_record(
        local_id: int,
        body: create_schema,
        identity: CurrentIdentity = Depends(get_current_user),
        svc: RecordService = Depends(_svc),
    ):
        return await svc.update_record(identity.user_id, local_id, body)

    @router.delete("/{local_id}", response_model=DeleteResponse)
    async def delete_record(
        local_id: int,
        identity: CurrentIdentity = Depends(get_current_user),
        svc: RecordService = Depends(_svc),
    ):
        await svc.delete_record(identity.user_id, local_id)
        return DeleteResponse(message=f"{label} deleted successfully")

    return router


books_router = record_router(RecordKind.BOOK, BookCreate, BookRead)
movies_router = record_router(RecordKind.MOVIE, MovieCreate, MovieRead)
