"""
Database initialization script.

Run this script to create the JSON document with empty `users` and `notes`
collections. An existing document is left untouched.
"""
from notes_database.db import open_store


# PUBLIC_INTERFACE
def init_db(path=None):
    """Creates the database document if it does not exist and returns its path."""
    return open_store(path).path


if __name__ == "__main__":
    location = init_db()
    print(f"Database document ready at {location}")
