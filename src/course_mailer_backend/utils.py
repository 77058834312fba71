"""
Utility functions for file system checks and attachment naming.

This module provides helper functions for:
- Deriving the attachment filename sent to the registrant
- Checking for a PDF on disk without blocking the event loop
- Reading attachment bytes off the event loop
"""

from __future__ import annotations

import asyncio
import re
from pathlib import Path

# Runs of whitespace collapse to a single underscore in attachment names
WHITESPACE_PATTERN = re.compile(r"\s+")

PDF_EXTENSION = ".pdf"


def attachment_filename(specialization: str) -> str:
    """
    Build the filename a specialization's PDF is attached under.

    Args:
        specialization: Catalog name of the specialization

    Returns:
        The name with whitespace runs replaced by underscores, plus ``.pdf``

    Example:
        >>> attachment_filename("Computer Science Engineering")
        "Computer_Science_Engineering.pdf"
    """
    return f"{WHITESPACE_PATTERN.sub('_', specialization)}{PDF_EXTENSION}"


async def path_exists(path: Path) -> bool:
    """
    Report whether ``path`` refers to an existing regular file.

    The ``stat`` call runs in a worker thread so slow or network-mounted
    storage does not stall other requests.
    """
    return await asyncio.to_thread(path.is_file)


async def read_bytes(path: Path) -> bytes:
    """
    Read a file's contents in a worker thread.

    Raises:
        FileNotFoundError: If the file disappeared since it was checked
    """
    return await asyncio.to_thread(path.read_bytes)
