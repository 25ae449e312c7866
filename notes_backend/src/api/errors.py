"""
Errors raised by the service layer and turned into `{"error": message}`
responses by the handlers registered in main.py.
"""


class NotesApiError(Exception):
    """
    Base class for API errors. `message` is safe to return to the client.
    """
    status_code = 500
    default_message = "An unexpected error occurred"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(NotesApiError):
    """No credential was sent, or it does not belong to any user."""
    status_code = 401
    default_message = "Authentication required"


class InvalidCredentials(NotesApiError):
    """Login failed. Unknown username and wrong password look the same."""
    status_code = 401
    default_message = "The credentials provided are not correct"


class Conflict(NotesApiError):
    status_code = 400
    default_message = "The username already exists"


class NotFound(NotesApiError):
    """The note does not exist or belongs to another user."""
    status_code = 404
    default_message = "The note does not exist"


class InternalError(NotesApiError):
    status_code = 500
