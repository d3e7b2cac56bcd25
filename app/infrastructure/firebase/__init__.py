"""Firestore integration: REST client and the document store built on it."""

from app.infrastructure.firebase.client import close_firebase, init_firebase
from app.infrastructure.firebase.document_store import FirestoreDocumentStore

__all__ = [
    "FirestoreDocumentStore",
    "close_firebase",
    "init_firebase",
]
