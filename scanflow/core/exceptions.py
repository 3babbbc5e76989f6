"""
Application Exception Handling

Single AppException class for all application errors with FastAPI integration.
Submission outcomes form a small subclass family under SubmissionError.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Group not found", "GROUP_NOT_FOUND", 404)
        raise AppException("Unsupported file type", "UNSUPPORTED_MEDIA_TYPE", 415, {"content_type": "text/plain"})

    Error Codes:
        Session:
            - GROUP_NOT_FOUND (404)
            - GROUP_FINALIZED (409)
            - ITEM_NOT_FOUND (404)
            - INVALID_CATEGORY (400)
            - INVALID_MODE (400)
            - INVALID_MESSAGE (WebSocket only)

        Reorder / Export:
            - REORDER_NOT_FOUND (404)
            - INVALID_MOVE (400)
            - NOTHING_TO_EXPORT (400)

        Upload:
            - UNSUPPORTED_MEDIA_TYPE (415)

        Submission:
            - SUBMISSION_TIMEOUT (504)
            - SUBMISSION_CANCELLED (499)
            - SUBMISSION_REJECTED (502)

        General:
            - VALIDATION_ERROR (422)
            - INTERNAL_ERROR (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "GROUP_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


class NothingToExport(AppException):
    """The selected content has no values to copy."""


class SubmissionError(AppException):
    """Base class for failed submissions to the barcode store."""


class SubmissionTimeout(SubmissionError):
    """The store did not answer within the configured timeout."""


class SubmissionCancelled(SubmissionError):
    """The caller cancelled the submission before it completed."""


class SubmissionRejected(SubmissionError):
    """The store refused the request or returned an unusable response."""


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Call this in main.py after creating the FastAPI instance.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def group_not_found(group_id: Optional[str] = None) -> AppException:
    """Create group not found exception."""
    details = {"group_id": group_id} if group_id else {}
    return AppException("Group not found", "GROUP_NOT_FOUND", 404, details)


def group_finalized(group_id: str) -> AppException:
    """Create exception for an attempt to edit a finalized group."""
    return AppException(
        "Finalized groups cannot be modified",
        "GROUP_FINALIZED",
        409,
        {"group_id": group_id}
    )


def item_not_found(item_id: str) -> AppException:
    """Create item not found exception."""
    return AppException("Scan item not found", "ITEM_NOT_FOUND", 404, {"item_id": item_id})


def invalid_category(category: str) -> AppException:
    return AppException(
        "Category must not be empty",
        "INVALID_CATEGORY",
        400,
        {"category": category}
    )


def invalid_mode(mode: str) -> AppException:
    return AppException(
        f"Unknown barcode mode '{mode}'. Expected Standard or Unique",
        "INVALID_MODE",
        400,
        {"mode": mode}
    )


def reorder_not_found(reorder_id: str) -> AppException:
    """Create reorder session not found exception."""
    return AppException(
        "Reorder session not found",
        "REORDER_NOT_FOUND",
        404,
        {"reorder_id": reorder_id}
    )


def invalid_move(from_index: int, to_index: int, size: int) -> AppException:
    """Create exception for an out-of-range reorder move."""
    return AppException(
        f"Cannot move entry {from_index} to {to_index} in a list of {size}",
        "INVALID_MOVE",
        400,
        {"from_index": from_index, "to_index": to_index, "size": size}
    )


def nothing_to_export() -> NothingToExport:
    return NothingToExport("Nothing to copy.", "NOTHING_TO_EXPORT", 400)


def unsupported_media_type(name: str, content_type: str) -> AppException:
    """Create unsupported upload type exception."""
    return AppException(
        f"File '{name}' is not an image ({content_type})",
        "UNSUPPORTED_MEDIA_TYPE",
        415,
        {"file": name, "content_type": content_type}
    )


def submission_timeout(timeout: float) -> SubmissionTimeout:
    """Create submission timeout exception."""
    return SubmissionTimeout(
        "Upload cancelled or timed out.",
        "SUBMISSION_TIMEOUT",
        504,
        {"timeout_seconds": timeout}
    )


def submission_cancelled() -> SubmissionCancelled:
    return SubmissionCancelled(
        "Upload cancelled or timed out.",
        "SUBMISSION_CANCELLED",
        499
    )


def submission_rejected(
    message: str,
    errors: Optional[list] = None,
    status: Optional[int] = None
) -> SubmissionRejected:
    """Create submission rejected exception."""
    details: Dict[str, Any] = {}
    if errors:
        details["errors"] = errors
    if status is not None:
        details["status"] = status
    return SubmissionRejected(message, "SUBMISSION_REJECTED", 502, details)


def internal_error(message: str = "Internal server error") -> AppException:
    """Create internal server error exception."""
    return AppException(message, "INTERNAL_ERROR", 500)
