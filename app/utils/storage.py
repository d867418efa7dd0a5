"""
Document storage utility.
In-memory storage for converted documents awaiting download.
"""

import time
import uuid
import logging
from dataclasses import dataclass, field
from typing import Optional

from app.config import settings

logger = logging.getLogger(__name__)


@dataclass
class StoredDocument:
    """A converted document and its download name."""
    doc_bytes: bytes
    filename: str
    created: float = field(default_factory=time.time)


class DocumentStorage:
    """
    In-memory storage for converted documents.

    Entries older than max_age_seconds are dropped whenever a new document
    is stored. Single process only.
    """

    def __init__(self, max_age_seconds: int = 3600):
        self.max_age_seconds = max_age_seconds
        self._storage: dict[str, StoredDocument] = {}

    def store(self, doc_bytes: bytes, filename: str) -> str:
        """Store a document and return its id."""
        self.cleanup()
        doc_id = uuid.uuid4().hex[:12]
        self._storage[doc_id] = StoredDocument(doc_bytes=doc_bytes, filename=filename)
        return doc_id

    def get(self, doc_id: str) -> Optional[StoredDocument]:
        """Retrieve a document by ID. Expired documents are dropped."""
        stored = self._storage.get(doc_id)
        if stored is None:
            return None
        if time.time() - stored.created > self.max_age_seconds:
            del self._storage[doc_id]
            return None
        return stored

    def delete(self, doc_id: str) -> bool:
        """Delete a document by ID."""
        return self._storage.pop(doc_id, None) is not None

    def cleanup(self, max_age_seconds: int | None = None) -> int:
        """Remove expired documents. Returns count removed."""
        max_age = self.max_age_seconds if max_age_seconds is None else max_age_seconds
        now = time.time()
        to_remove = [
            doc_id for doc_id, stored in self._storage.items()
            if now - stored.created > max_age
        ]
        for doc_id in to_remove:
            del self._storage[doc_id]
        if to_remove:
            logger.debug("Dropped %d expired document(s)", len(to_remove))
        return len(to_remove)

    def __len__(self) -> int:
        return len(self._storage)


# Singleton instance
document_storage = DocumentStorage(max_age_seconds=settings.STORAGE_TTL_SECONDS)
