"""
==============================================================================
Utilities Package
==============================================================================

Utility classes and functions for the application.

Modules:
--------
- validators: Upload content type and size validation

==============================================================================
"""

from .validators import UploadValidator

__all__ = [
    "UploadValidator",
]
