"""Application interfaces (ports): document store and repository protocols.

Define contracts for infrastructure implementations (DIP).
No runtime imports from app.infrastructure or app.api.
"""

from app.application.interfaces.document_store import (
    FILTER_OPS,
    DocumentStoreProtocol,
    FieldFilter,
)
from app.application.interfaces.repositories import IRatedEntityRepository

__all__ = [
    "FILTER_OPS",
    "DocumentStoreProtocol",
    "FieldFilter",
    "IRatedEntityRepository",
]
