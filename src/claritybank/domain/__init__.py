"""Domain layer for claritybank application.

Services are imported from their own modules; this package only exposes the
entities and errors so that the database layer can depend on it without
pulling services back in.
"""

from claritybank.domain.entities import (
    AuxiliaryFlags,
    BadgeId,
    BankAccount,
    EarnedBadge,
    Transaction,
    TransactionCategory,
    TransactionDirection,
    User,
)
from claritybank.domain.errors import (
    CatalogError,
    ConflictError,
    DomainError,
    NotFoundError,
    ValidationError,
)

__all__ = [
    "AuxiliaryFlags",
    "BadgeId",
    "BankAccount",
    "EarnedBadge",
    "Transaction",
    "TransactionCategory",
    "TransactionDirection",
    "User",
    "CatalogError",
    "ConflictError",
    "DomainError",
    "NotFoundError",
    "ValidationError",
]
