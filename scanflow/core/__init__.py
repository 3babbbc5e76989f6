"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

This package provides:
- Custom exception handling with consistent error responses
- Exception factory functions for common error scenarios
- FastAPI dependencies for sessions, database and collaborators

Modules:
--------
- exceptions: AppException class and error factory functions
- dependencies: FastAPI dependency injection functions

Usage:
------
    from scanflow.core import AppException

    # Or use exception factory functions via module
    from scanflow.core import exceptions
    raise exceptions.group_not_found(str(group_id))

The dependencies module is imported explicitly by routers
(``from scanflow.core.dependencies import ...``).

==============================================================================
"""

from .exceptions import (
    AppException,
    SubmissionCancelled,
    SubmissionError,
    SubmissionRejected,
    SubmissionTimeout,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "SubmissionCancelled",
    "SubmissionError",
    "SubmissionRejected",
    "SubmissionTimeout",
    "register_exception_handlers",
]
