"""Adapters - I/O implementations of ports."""

from .rest_api import RestTaskAdapter
from .file_storage import FileTaskStorage

__all__ = [
    "RestTaskAdapter",
    "FileTaskStorage",
]
