from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

# Top-level collections of the JSON document
USERS = "users"
NOTES = "notes"

DB_DEFAULTS = {
    USERS: [],
    NOTES: [],
}

_timestamp = TypeAdapter(datetime)


# PUBLIC_INTERFACE
def to_timestamp(value: datetime) -> str:
    """Serializes a datetime the same way records store it."""
    return _timestamp.dump_python(value, mode="json")


# PUBLIC_INTERFACE
class UserRecord(BaseModel):
    """
    Persisted user, as stored in the `users` collection.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    username: str
    password_hash: str = Field(..., alias="passwordHash")
    token: str

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# PUBLIC_INTERFACE
class NoteRecord(BaseModel):
    """
    Persisted note, as stored in the `notes` collection.
    Only the user whose id equals `author_id` may see or change it.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    author_id: str = Field(..., alias="authorId")
    title: Any = None
    content: Any = None
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
