"""Document store adapters.

Key/value persistence for configuration collections and small settings.
"""

from .json_file_store import JsonFileDocumentStore
from .memory_store import MemoryDocumentStore

__all__ = [
    "JsonFileDocumentStore",
    "MemoryDocumentStore",
]
