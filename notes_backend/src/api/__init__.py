"""Notes API: user registration, login and per-user notes over HTTP."""

__version__ = "1.0.0"
