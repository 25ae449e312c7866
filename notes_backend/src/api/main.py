import logging
import sys
from contextlib import asynccontextmanager
from typing import List

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notes_database import DocumentStore, StorageError, UserRecord

from . import services
from .config import HOST, PORT, get_cors_origins, get_log_level
from .dependencies import get_store, require_user, resolve_identity
from .errors import NotesApiError
from .middleware import RequestLoggingMiddleware
from .schemas import (
    Credentials,
    HealthOut,
    NoteCreatedOut,
    NoteDetailOut,
    NoteIn,
    NoteOut,
    UserOut,
)

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    logging.basicConfig(
        level=get_log_level(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Opening the store creates the JSON document with empty collections if absent
    store = app.dependency_overrides.get(get_store, get_store)()
    logger.info("Notes API starting, database: %s", getattr(store, "path", "in memory"))
    yield
    logger.info("Notes API shutting down")


# FastAPI app config
app = FastAPI(
    title="Notes API",
    description="Backend API for user registration, login and personal notes.",
    version="1.0.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Authentication", "description": "User registration and login"},
        {"name": "Notes", "description": "Create, update, view and delete your own notes"},
    ],
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

# Every /api request resolves the caller first; protected routes add require_user
router = APIRouter(prefix="/api", dependencies=[Depends(resolve_identity)])


# Root Health Check
@router.get("", response_model=HealthOut, summary="Health Check", tags=["General"])
def health_check():
    """Simple health check endpoint."""
    return {"status": "ok"}


#####################
# AUTH ENDPOINTS
#####################

# PUBLIC_INTERFACE
@router.post("/register", response_model=UserOut, summary="Register a new user", tags=["Authentication"])
def register(credentials: Credentials, store: DocumentStore = Depends(get_store)):
    """
    Register a new user.
    Returns the id, username and the permanent api token (never the password).
    """
    user = services.register_user(store, credentials.username, credentials.password)
    return UserOut.from_record(user)


# PUBLIC_INTERFACE
@router.post("/login", response_model=UserOut, summary="Login and get the api token", tags=["Authentication"])
def login(credentials: Credentials, store: DocumentStore = Depends(get_store)):
    """
    User login.
    Returns the token issued at registration; logging in never rotates it.
    """
    user = services.authenticate_user(store, credentials.username, credentials.password)
    return UserOut.from_record(user)


#####################
# NOTES ENDPOINTS
#####################

# PUBLIC_INTERFACE
@router.get("/notes", response_model=List[NoteOut], summary="List all user notes", tags=["Notes"])
def list_notes(
    store: DocumentStore = Depends(get_store),
    current_user: UserRecord = Depends(require_user),
):
    """
    Get all notes of the authenticated user.
    """
    return [NoteOut.from_record(note) for note in services.list_notes(store, current_user)]


# PUBLIC_INTERFACE
@router.get("/notes/{note_id}", response_model=NoteDetailOut, summary="Get a single note", tags=["Notes"])
def get_note(
    note_id: str,
    store: DocumentStore = Depends(get_store),
    current_user: UserRecord = Depends(require_user),
):
    """
    Retrieve a single note belonging to the authenticated user.
    """
    note = services.get_note(store, current_user, note_id)
    return NoteDetailOut.from_record(note, current_user)


# PUBLIC_INTERFACE
@router.post("/notes", response_model=NoteCreatedOut, summary="Create a new note", tags=["Notes"])
def create_note(
    note: NoteIn,
    store: DocumentStore = Depends(get_store),
    current_user: UserRecord = Depends(require_user),
):
    """
    Create a new note for the authenticated user.
    """
    created = services.create_note(store, current_user, note.title, note.content)
    return NoteCreatedOut.from_record(created)


# PUBLIC_INTERFACE
@router.api_route(
    "/notes/{note_id}",
    methods=["PATCH", "PUT"],
    response_model=NoteDetailOut,
    summary="Update a note",
    tags=["Notes"],
)
def update_note(
    note_id: str,
    note: NoteIn,
    store: DocumentStore = Depends(get_store),
    current_user: UserRecord = Depends(require_user),
):
    """
    Replace title and content of a note belonging to the authenticated user.
    PATCH and PUT behave the same.
    """
    updated = services.update_note(store, current_user, note_id, note.title, note.content)
    return NoteDetailOut.from_record(updated, current_user)


# PUBLIC_INTERFACE
@router.delete("/notes/{note_id}", summary="Delete a note", tags=["Notes"])
def delete_note(
    note_id: str,
    store: DocumentStore = Depends(get_store),
    current_user: UserRecord = Depends(require_user),
):
    """
    Delete a note belonging to the authenticated user.
    """
    services.delete_note(store, current_user, note_id)
    return {}


app.include_router(router)


#####################
# ERROR HANDLERS
#####################

@app.exception_handler(NotesApiError)
def notes_api_error_handler(request: Request, exc: NotesApiError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StorageError)
def storage_error_handler(request: Request, exc: StorageError):
    logger.error("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "There was an error accessing the database"})


@app.exception_handler(RequestValidationError)
def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(StarletteHTTPException)
def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.error("Unexpected error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)
