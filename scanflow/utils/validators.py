"""
==============================================================================
Validation Utilities Module
==============================================================================

Validation of uploaded image files before decoding.

Rules:
------
- Size: at most ``max_bytes`` (20 MB by default)
- Content type: one of the configured types, or any ``image/*`` type
- A missing content type is treated as image/jpeg

==============================================================================
"""

from __future__ import annotations

from typing import Iterable, Optional, Tuple


DEFAULT_CONTENT_TYPE = "image/jpeg"
DEFAULT_MAX_BYTES = 20 * 1024 * 1024


class UploadValidator:
    """
    Validator for uploaded image files.

    Example:
        >>> validator = UploadValidator(["image/jpeg", "image/png"])
        >>> validator.normalize_content_type("")
        'image/jpeg'
        >>> validator.validate_content_type("application/pdf")
        (False, 'Unsupported file type: application/pdf')
    """

    def __init__(
        self,
        allowed_types: Iterable[str] = (DEFAULT_CONTENT_TYPE, "image/png", "image/heic", "image/heif"),
        max_bytes: int = DEFAULT_MAX_BYTES,
    ) -> None:
        self._allowed = {t.lower() for t in allowed_types}
        self.max_bytes = max_bytes

    @staticmethod
    def normalize_content_type(content_type: Optional[str]) -> str:
        """Lowercase, drop parameters, default to image/jpeg."""
        if not content_type or not content_type.strip():
            return DEFAULT_CONTENT_TYPE
        return content_type.split(";", 1)[0].strip().lower()

    def validate_content_type(self, content_type: Optional[str]) -> Tuple[bool, Optional[str]]:
        """
        Validate an upload's content type.

        Returns:
            Tuple of (is_valid, error_message)
        """
        normalized = self.normalize_content_type(content_type)
        if normalized in self._allowed or normalized.startswith("image/"):
            return True, None
        return False, f"Unsupported file type: {normalized}"

    def validate_size(self, size: int) -> Tuple[bool, Optional[str]]:
        """
        Validate an upload's size in bytes.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if size > self.max_bytes:
            return False, f"File too large (limit {self.max_bytes} bytes)"
        return True, None
