"""
Custom validators for the application
"""
from typing import Optional


def validate_content_type(content_type: Optional[str], prefix: str) -> bool:
    """Validate MIME type family, e.g. prefix "video/" or "image/" """
    if not content_type:
        return False
    return content_type.lower().startswith(prefix)


def validate_file_size(file_size: int, max_size: int) -> bool:
    """Validate file size"""
    return 0 < file_size <= max_size


def format_size_mb(size: int) -> str:
    return f"{size / (1024 * 1024):.0f}MB"
