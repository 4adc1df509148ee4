"""Core module - data models, types, configuration and exceptions."""

from .models import (
    Board,
    BoardList,
    Card,
    CheckItem,
    Checklist,
    BoardConfig,
    CollateConfig,
    AuthConfig,
    AuditEntry,
    ReconcileResult,
    BoardResult,
    PassResult,
)
from .types import (
    BoardErrorPolicy,
    CheckItemState,
    WORK_BUCKETS_LIST,
    FALLBACK_BUCKET,
    OPEN_CARDS_CHECKLIST,
    UNKNOWN_BUCKETS_CHECKLIST,
)
from .exceptions import (
    CollateError,
    DataSourceError,
    RateLimitError,
    ResponseFormatError,
    ConfigurationError,
)

__all__ = [
    # Models
    "Board",
    "BoardList",
    "Card",
    "CheckItem",
    "Checklist",
    "BoardConfig",
    "CollateConfig",
    "AuthConfig",
    "AuditEntry",
    "ReconcileResult",
    "BoardResult",
    "PassResult",
    # Types
    "BoardErrorPolicy",
    "CheckItemState",
    "WORK_BUCKETS_LIST",
    "FALLBACK_BUCKET",
    "OPEN_CARDS_CHECKLIST",
    "UNKNOWN_BUCKETS_CHECKLIST",
    # Exceptions
    "CollateError",
    "DataSourceError",
    "RateLimitError",
    "ResponseFormatError",
    "ConfigurationError",
]
