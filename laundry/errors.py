from decimal import Decimal
from enum import Enum

from .models import TransactionStatus


class ErrorKind(str, Enum):
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    INVALID_STATE = "INVALID_STATE"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_AMOUNT = "INVALID_AMOUNT"


class LaundryServiceError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(LaundryServiceError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, key: str):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key} not found")


class AlreadyExistsError(LaundryServiceError):
    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Customer {name} already exists")


class InsufficientBalanceError(LaundryServiceError):
    kind = ErrorKind.INSUFFICIENT_BALANCE

    def __init__(self, customer_id: str, balance: Decimal, amount: Decimal):
        self.customer_id = customer_id
        self.balance = balance
        self.amount = amount
        super().__init__(f"Balance is not enough! Required {amount}, available {balance}")


class InvalidStateError(LaundryServiceError):
    kind = ErrorKind.INVALID_STATE

    def __init__(self, transaction_id: str, status: TransactionStatus, action: str):
        self.transaction_id = transaction_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} transaction {transaction_id}: it is {status.value}")


class UnauthorizedError(LaundryServiceError):
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, transaction_id: str, customer_id: str):
        self.transaction_id = transaction_id
        self.customer_id = customer_id
        super().__init__(f"Transaction {transaction_id} does not belong to customer {customer_id}")


class InvalidAmountError(LaundryServiceError, ValueError):
    kind = ErrorKind.INVALID_AMOUNT

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value}: {reason}")
