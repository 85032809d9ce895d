"""
Application package initializer.

``core`` holds configuration, logging, database access and error types;
``schemas`` describes the record shape and request validation;
``services`` contains the CRUD logic and ``api`` the HTTP routes.
"""

from .main import app  # noqa: F401
