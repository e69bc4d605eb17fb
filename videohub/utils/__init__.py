"""
Utility functions for the application
"""
from .validators import (
    validate_content_type,
    validate_file_size,
    format_size_mb,
)

__all__ = [
    "validate_content_type",
    "validate_file_size",
    "format_size_mb",
]
