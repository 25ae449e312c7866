"""
Identity and note operations.

Plain functions taking the store first. They know nothing about HTTP: they
return records or raise the errors from errors.py.
"""
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from notes_database import NOTES, USERS, DocumentStore, NoteRecord, UserRecord, to_timestamp

from .config import NOTE_ID_LENGTH, TOKEN_LENGTH, USER_ID_LENGTH
from .errors import Conflict, InternalError, InvalidCredentials, NotFound
from .security import generate_id, get_password_hash, verify_password

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


#####################
# USERS
#####################

# PUBLIC_INTERFACE
def get_user_by_username(store: DocumentStore, username: str) -> Optional[UserRecord]:
    record = store.find_one(USERS, {"username": username})
    return UserRecord.model_validate(record) if record else None


# PUBLIC_INTERFACE
def get_user_by_token(store: DocumentStore, token: str) -> Optional[UserRecord]:
    record = store.find_one(USERS, {"token": token})
    return UserRecord.model_validate(record) if record else None


# PUBLIC_INTERFACE
def register_user(store: DocumentStore, username: str, password: str) -> UserRecord:
    """
    Create a user with a fresh id and a permanent token.
    Raises Conflict if the username is taken, InternalError if hashing fails.
    """
    if get_user_by_username(store, username) is not None:
        raise Conflict()

    try:
        password_hash = get_password_hash(password)
    except (ValueError, TypeError):
        logger.error("Password hashing failed for new user %r", username, exc_info=True)
        raise InternalError("There was an error storing the password")

    user = UserRecord(
        id=generate_id(USER_ID_LENGTH),
        username=username,
        password_hash=password_hash,
        token=generate_id(TOKEN_LENGTH),
    )
    # Another request may have taken the name while we were hashing
    if not store.insert_if_absent(USERS, {"username": username}, user.to_document()):
        raise Conflict()

    logger.info("Registered user %s (%s)", user.username, user.id)
    return user


# PUBLIC_INTERFACE
def authenticate_user(store: DocumentStore, username: str, password: str) -> UserRecord:
    """
    Check a username/password pair and return the user with its existing token.
    """
    user = get_user_by_username(store, username)
    if user is None:
        logger.warning("Login failed for %r: unknown username", username)
        raise InvalidCredentials()

    try:
        valid = verify_password(password, user.password_hash)
    except (ValueError, TypeError):
        logger.error("Password verification failed for user %s", user.id, exc_info=True)
        raise InternalError("There was an error checking the credentials")

    if not valid:
        logger.warning("Login failed for %r: wrong password", username)
        raise InvalidCredentials()
    return user


#####################
# NOTES
#####################

def _owned(user: UserRecord, note_id: str) -> dict:
    return {"authorId": user.id, "id": note_id}


# PUBLIC_INTERFACE
def list_notes(store: DocumentStore, user: UserRecord) -> List[NoteRecord]:
    """All notes authored by `user`, in storage order."""
    return [NoteRecord.model_validate(n) for n in store.filter(NOTES, {"authorId": user.id})]


# PUBLIC_INTERFACE
def get_note(store: DocumentStore, user: UserRecord, note_id: str) -> NoteRecord:
    """
    Notes owned by someone else are reported as NotFound, same as missing ones.
    """
    record = store.find_one(NOTES, _owned(user, note_id))
    if record is None:
        raise NotFound()
    return NoteRecord.model_validate(record)


# PUBLIC_INTERFACE
def create_note(
    store: DocumentStore, user: UserRecord, title: Any, content: Any
) -> NoteRecord:
    now = utcnow()
    note = NoteRecord(
        id=generate_id(NOTE_ID_LENGTH),
        author_id=user.id,
        title=title,
        content=content,
        created_at=now,
        updated_at=now,
    )
    store.insert(NOTES, note.to_document())
    logger.info("User %s created note %s", user.id, note.id)
    return note


# PUBLIC_INTERFACE
def update_note(
    store: DocumentStore,
    user: UserRecord,
    note_id: str,
    title: Any,
    content: Any,
) -> NoteRecord:
    """
    Overwrite title and content and refresh updatedAt.
    The returned note is the stored record after the update; id, authorId
    and createdAt are never changed.
    """
    changes = {
        "title": title,
        "content": content,
        "updatedAt": to_timestamp(utcnow()),
    }
    record = store.update(NOTES, _owned(user, note_id), changes)
    if record is None:
        raise NotFound()
    logger.info("User %s updated note %s", user.id, note_id)
    return NoteRecord.model_validate(record)


# PUBLIC_INTERFACE
def delete_note(store: DocumentStore, user: UserRecord, note_id: str) -> None:
    if not store.remove(NOTES, _owned(user, note_id)):
        raise NotFound()
    logger.info("User %s deleted note %s", user.id, note_id)
