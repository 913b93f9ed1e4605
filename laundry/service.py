import threading
from datetime import datetime, timezone
from functools import wraps
from typing import Callable, Optional
from uuid import uuid4

from .config import LaundrySettings, get_settings
from .customers import CustomerAccountManager
from .errors import LaundryServiceError
from .logging_utils import get_logger
from .models import (
    CreateCustomerRequest,
    CustomerBalance,
    CustomerResponse,
    LaundryAccount,
    LaundryBalance,
    Transaction,
    TransactionRequest,
    TransactionResponse,
    UpdateBalanceRequest,
)
from .storage import InMemoryStorage, LedgerStore, SqliteStorage
from .transactions import TransactionLifecycleManager

LOGGER = get_logger(__name__)


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def serialized(method):
    """Run ``method`` under the service lock so no caller sees a half-applied operation."""

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            try:
                return method(self, *args, **kwargs)
            except LaundryServiceError as e:
                LOGGER.debug("%s rejected: %s", method.__name__, e)
                raise

    return wrapper


def build_storage(settings: LaundrySettings) -> LedgerStore:
    if settings.storage_backend == "sqlite":
        return SqliteStorage(settings.database_path)
    return InMemoryStorage()


class LaundryService:
    """Entry point for every operation on customers, transactions and the laundry account."""

    def __init__(
        self,
        storage: Optional[LedgerStore] = None,
        settings: Optional[LaundrySettings] = None,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.settings = settings or get_settings()
        self.storage = storage or build_storage(self.settings)
        self.customers = CustomerAccountManager(self.storage, id_factory)
        self.transactions = TransactionLifecycleManager(self.storage, self.customers, id_factory, clock)
        self._lock = threading.RLock()
        self._open_laundry_account()

    def _open_laundry_account(self) -> None:
        """Seed the revenue account the first time a store is used."""
        if self.storage.get_laundry() is None:
            laundry = LaundryAccount(name=self.settings.laundry_name, location=self.settings.laundry_location)
            self.storage.commit(laundry=laundry)
            LOGGER.info("Opened laundry account %s (%s)", laundry.name, laundry.location)

    # Customers

    @serialized
    def create_customer(self, request: CreateCustomerRequest) -> CustomerResponse:
        customer = self.customers.create_customer(request.name, request.contact)
        return CustomerResponse(customer=customer, message=f"Customer {customer.name} added successfully.")

    @serialized
    def get_customer_balance(self, name: str) -> CustomerBalance:
        LOGGER.debug("Reading balance of customer %s", name)
        return CustomerBalance(name=name, balance=self.customers.get_balance(name))

    @serialized
    def update_balance(self, name: str, request: UpdateBalanceRequest) -> CustomerResponse:
        customer = self.customers.adjust_balance(name, request.amount)
        return CustomerResponse(customer=customer, message="Balance has been successfully updated")

    # Transactions

    @serialized
    def create_transaction(self, request: TransactionRequest) -> TransactionResponse:
        transaction = self.transactions.create(
            request.name, request.weight, request.transaction_type, request.service_type
        )
        return TransactionResponse(transaction=transaction, message="Transaction added successfully!")

    @serialized
    def update_transaction(self, transaction_id: str, request: TransactionRequest) -> TransactionResponse:
        transaction = self.transactions.update(
            request.name, request.weight, request.transaction_type, request.service_type, transaction_id
        )
        return TransactionResponse(transaction=transaction, message="Transaction updated successfully!")

    @serialized
    def carry_on_transaction(self, transaction_id: str) -> TransactionResponse:
        transaction = self.transactions.carry_on(transaction_id)
        return TransactionResponse(
            transaction=transaction, message=f"Transaction {transaction.id} is {transaction.status.value}."
        )

    @serialized
    def finish_working_transaction(self, transaction_id: str) -> TransactionResponse:
        transaction = self.transactions.finish_working(transaction_id)
        return TransactionResponse(
            transaction=transaction, message=f"Transaction {transaction.id} is {transaction.status.value}."
        )

    @serialized
    def finish_transaction(self, transaction_id: str) -> TransactionResponse:
        transaction, _ = self.transactions.finish(transaction_id)
        return TransactionResponse(
            transaction=transaction, message=f"Transaction {transaction.id} finished successfully!"
        )

    @serialized
    def cancel_transaction(self, transaction_id: str) -> TransactionResponse:
        transaction = self.transactions.cancel(transaction_id)
        return TransactionResponse(transaction=transaction, message=f"Transaction {transaction.id} cancelled!")

    # Queries

    @serialized
    def list_transactions(self) -> list[Transaction]:
        LOGGER.debug("Listing transactions")
        return self.storage.list_transactions()

    @serialized
    def get_transaction(self, transaction_id: str) -> Transaction:
        LOGGER.debug("Reading transaction %s", transaction_id)
        return self.transactions.get(transaction_id)

    @serialized
    def get_laundry_balance(self) -> LaundryBalance:
        LOGGER.debug("Reading laundry balance")
        laundry = self.transactions.laundry_account()
        return LaundryBalance(name=laundry.name, location=laundry.location, balance=laundry.balance)

    def close(self) -> None:
        self.storage.close()
