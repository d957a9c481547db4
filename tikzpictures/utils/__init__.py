"""
Shared utilities for tikzpictures.

Common functionality used across contexts:
- Logger setup
- PDF inspection
"""

from tikzpictures.utils.logger import setup_logger
from tikzpictures.utils.pdf_processing import page_count

__all__ = ["setup_logger", "page_count"]
