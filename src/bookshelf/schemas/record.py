"""Pydantic schemas for books and movies.

Learn: Pydantic v2 models validate request/response data. Separate
"Create" schemas (input) from "Read" schemas (output) for clean APIs.
PUT replaces every editable field, so updates reuse the Create schema.

The Read schemas never carry anything the owner can't see anyway:
`id` is the global row id, `user_local_id` is the number used in URLs.
"""

from pydantic import BaseModel, Field

from bookshelf.db.models import MAX_INTEGER


# ─── Books ──────────────────────────────────────────────

class BookCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=255)
    author: str = Field(..., min_length=3, max_length=255)
    publisher: str = Field(..., min_length=3, max_length=255)
    release_year: int = Field(..., gt=0, le=MAX_INTEGER)


class BookRead(BaseModel):
    id: int
    user_local_id: int
    user_id: int
    title: str
    author: str
    publisher: str
    release_year: int

    model_config = {"from_attributes": True}


# ─── Movies ─────────────────────────────────────────────

class MovieCreate(BaseModel):
    title: str = Field(..., min_length=2, max_length=255)
    release_year: int = Field(..., gt=1800, le=MAX_INTEGER)
    rating: int = Field(..., ge=1, le=10)


class MovieRead(BaseModel):
    id: int
    user_local_id: int
    user_id: int
    title: str
    release_year: int
    rating: int

    model_config = {"from_attributes": True}


class DeleteResponse(BaseModel):
    message: str
