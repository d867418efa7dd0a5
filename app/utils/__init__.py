"""
Utilities package.
"""

from app.utils.storage import document_storage, DocumentStorage, StoredDocument

__all__ = [
    "document_storage",
    "DocumentStorage",
    "StoredDocument",
]
