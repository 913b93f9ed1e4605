"""
Laundry Ledger

This package provides:
- Customers with prepaid balances
- Laundry orders with a fixed lifecycle: pending → ongoing → ready → completed / cancelled
- Funds reserved on order, refunded on cancel, recognised as revenue on completion
- All-or-nothing writes for every lifecycle step
- In-memory and SQLite record stores
"""

from .errors import (
    ErrorKind,
    LaundryServiceError,
    NotFoundError,
    AlreadyExistsError,
    InsufficientBalanceError,
    InvalidStateError,
    UnauthorizedError,
    InvalidAmountError,
)
from .models import (
    TransactionStatus,
    TransactionType,
    ServiceType,
    Customer,
    Transaction,
    LaundryAccount,
)
from .pricing import price
from .service import LaundryService

__all__ = [
    "ErrorKind",
    "LaundryServiceError",
    "NotFoundError",
    "AlreadyExistsError",
    "InsufficientBalanceError",
    "InvalidStateError",
    "UnauthorizedError",
    "InvalidAmountError",
    "TransactionStatus",
    "TransactionType",
    "ServiceType",
    "Customer",
    "Transaction",
    "LaundryAccount",
    "price",
    "LaundryService",
]
