"""Storage - Adapter do document store."""

from .document_store import PAGES_PATH, DocumentStoreClient

__all__ = ["DocumentStoreClient", "PAGES_PATH"]
