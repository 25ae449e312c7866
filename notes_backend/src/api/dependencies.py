"""
Request-scoped dependencies: the store and the caller's identity.

Identity is resolved in two steps. `resolve_identity` runs for every /api
request and never fails; `require_user` is added only to protected routes
and raises Unauthenticated when nobody could be resolved.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import APIKeyHeader

from notes_database import DocumentStore, UserRecord, get_default_store

from .config import API_TOKEN_HEADER
from .errors import Unauthenticated
from .services import get_user_by_token

api_token_header = APIKeyHeader(name=API_TOKEN_HEADER, auto_error=False)


# DATABASE Dependency
def get_store() -> DocumentStore:
    return get_default_store()


@dataclass
class Identity:
    token: Optional[str] = None
    user: Optional[UserRecord] = None

    @property
    def authenticated(self) -> bool:
        return self.user is not None


# PUBLIC_INTERFACE
def resolve_identity(
    token: Optional[str] = Depends(api_token_header),
    store: DocumentStore = Depends(get_store),
) -> Identity:
    """Looks up the user owning the presented token, if any."""
    identity = Identity(token=token)
    if token is not None:
        identity.user = get_user_by_token(store, token)
    return identity


# PUBLIC_INTERFACE
def require_user(identity: Identity = Depends(resolve_identity)) -> UserRecord:
    """Guard for protected routes."""
    if identity.token is None:
        raise Unauthenticated("The token is not present in the request")
    if not identity.authenticated:
        raise Unauthenticated("There is no user associated with the token")
    return identity.user
