from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from notes_database import NoteRecord, UserRecord


# Pydantic models for serialization and validation

class Credentials(BaseModel):
    username: str = Field(..., min_length=1, description="User's username")
    password: str = Field(..., min_length=1, description="Plaintext password")


class UserOut(BaseModel):
    id: str
    username: str
    token: str = Field(..., description="Value to send in the api-token header")

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserOut":
        return cls(id=user.id, username=user.username, token=user.token)


class NoteIn(BaseModel):
    # Stored as sent; only the body shape is checked
    title: Any = None
    content: Any = None


class AuthorOut(BaseModel):
    id: str
    username: str


class NoteCreatedOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: Any = None
    content: Any = None
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    @classmethod
    def from_record(cls, note: NoteRecord):
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class NoteOut(NoteCreatedOut):
    """Note as listed: carries the owner's id."""
    author_id: str = Field(..., alias="authorId")

    @classmethod
    def from_record(cls, note: NoteRecord):
        return cls(
            id=note.id,
            author_id=note.author_id,
            title=note.title,
            content=note.content,
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class NoteDetailOut(NoteCreatedOut):
    """Single note with the owner expanded."""
    author: AuthorOut

    @classmethod
    def from_record(cls, note: NoteRecord, user: UserRecord):
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            created_at=note.created_at,
            updated_at=note.updated_at,
            author=AuthorOut(id=user.id, username=user.username),
        )


class HealthOut(BaseModel):
    status: str
