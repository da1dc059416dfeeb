"""
Market Tools Services

Service layer containing all business logic.
Each service has a defined interface (contract) and implementation.
"""

from market_tools.services.base import (
    BaseService,
    ServiceError,
    InvalidParameter,
    AlignmentMismatch,
    ProviderError,
)

__all__ = [
    "BaseService",
    "ServiceError",
    "InvalidParameter",
    "AlignmentMismatch",
    "ProviderError",
]
