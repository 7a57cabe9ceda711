"""Core lead normalization and distribution logic."""

from .errors import (
    LeadSplitError,
    ValidationError,
    PreconditionError,
    NotFoundError,
    ConflictError,
    StorageError,
    AuthError,
)
from .normalizer import CanonicalRecord, normalize_row, normalize_rows
from .decoder import TabularFormat, detect_format, iter_rows
from .distributor import AGENT_COUNT, Assignment, allocation_sizes, distribute

__all__ = [
    "LeadSplitError",
    "ValidationError",
    "PreconditionError",
    "NotFoundError",
    "ConflictError",
    "StorageError",
    "AuthError",
    "CanonicalRecord",
    "normalize_row",
    "normalize_rows",
    "TabularFormat",
    "detect_format",
    "iter_rows",
    "AGENT_COUNT",
    "Assignment",
    "allocation_sizes",
    "distribute",
]
