"""
Transaction lifecycle.

    Pending -> Ongoing -> Ready -> Completed
       |
       +-> Cancelled

Each transition pairs a status change with its balance effect:

* create:          debit the customer by the price
* update (edit):   credit the old price back, debit the new one
* finish:          credit the laundry account by the price
* cancel:          credit the customer by the price

Every method validates against the stored records first, builds the
resulting records as copies, and then writes them in a single commit.
Nothing is written when a check fails.
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable

from . import money
from .customers import CustomerAccountManager
from .errors import InvalidAmountError, InvalidStateError, NotFoundError, UnauthorizedError
from .logging_utils import get_logger
from .models import LaundryAccount, ServiceType, Transaction, TransactionStatus, TransactionType
from .pricing import price
from .storage import LedgerStore

LOGGER = get_logger(__name__)


def _validate_weight(weight: Decimal) -> Decimal:
    weight = money.to_decimal(weight, "weight")
    if weight <= 0:
        raise InvalidAmountError("weight", weight, "must be positive")
    return weight


class TransactionLifecycleManager:
    def __init__(
        self,
        storage: LedgerStore,
        customers: CustomerAccountManager,
        id_factory: Callable[[], str],
        clock: Callable[[], datetime],
    ):
        self.storage = storage
        self.customers = customers
        self.id_factory = id_factory
        self.clock = clock

    def get(self, transaction_id: str) -> Transaction:
        transaction = self.storage.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction", transaction_id)
        return transaction

    def laundry_account(self) -> LaundryAccount:
        laundry = self.storage.get_laundry()
        if laundry is None:
            raise NotFoundError("Laundry account", "default")
        return laundry

    def create(
        self,
        customer_name: str,
        weight: Decimal,
        transaction_type: TransactionType,
        service_type: ServiceType,
    ) -> Transaction:
        weight = _validate_weight(weight)
        service_type = ServiceType(service_type)
        transaction_type = TransactionType(transaction_type)
        customer = self.customers.find_by_name(customer_name)

        amount = price(weight, service_type, transaction_type)
        charged = self.customers.debit(customer, amount)
        transaction = Transaction(
            id=self.id_factory(),
            date=self.clock(),
            status=TransactionStatus.PENDING,
            customer_id=customer.id,
            price=amount,
            transaction_type=transaction_type,
            service_type=service_type,
            weight=weight,
        )

        self.storage.commit(customers=[charged], transactions=[transaction])
        LOGGER.info("Created transaction %s for %s at %s", transaction.id, customer.name, amount)
        return transaction

    def update(
        self,
        customer_name: str,
        weight: Decimal,
        transaction_type: TransactionType,
        service_type: ServiceType,
        transaction_id: str,
    ) -> Transaction:
        weight = _validate_weight(weight)
        service_type = ServiceType(service_type)
        transaction_type = TransactionType(transaction_type)
        customer = self.customers.find_by_name(customer_name)
        transaction = self.get(transaction_id)
        if transaction.customer_id != customer.id:
            raise UnauthorizedError(transaction.id, customer.id)
        if not transaction.can_edit():
            raise InvalidStateError(transaction.id, transaction.status, "update")

        amount = price(weight, service_type, transaction_type)
        refunded = self.customers.credit(customer, transaction.price)
        recharged = self.customers.debit(refunded, amount)
        edited = transaction.model_copy(update={
            "weight": weight,
            "price": amount,
            "transaction_type": transaction_type,
            "service_type": service_type,
        })

        self.storage.commit(customers=[recharged], transactions=[edited])
        LOGGER.info(
            "Updated transaction %s: price %s -> %s", transaction.id, transaction.price, amount
        )
        return edited

    def carry_on(self, transaction_id: str) -> Transaction:
        return self._advance(transaction_id, TransactionStatus.ONGOING, "carry on")

    def finish_working(self, transaction_id: str) -> Transaction:
        return self._advance(transaction_id, TransactionStatus.READY, "finish working on")

    def finish(self, transaction_id: str) -> tuple[Transaction, LaundryAccount]:
        transaction = self._transition(transaction_id, TransactionStatus.COMPLETED, "finish")
        laundry = self.laundry_account()
        earned = laundry.model_copy(update={"balance": money.add(laundry.balance, transaction.price)})

        self.storage.commit(transactions=[transaction], laundry=earned)
        LOGGER.info("Completed transaction %s, laundry balance now %s", transaction.id, earned.balance)
        return transaction, earned

    def cancel(self, transaction_id: str) -> Transaction:
        transaction = self._transition(transaction_id, TransactionStatus.CANCELLED, "cancel")
        customer = self.customers.get(transaction.customer_id)
        refunded = self.customers.credit(customer, transaction.price)

        self.storage.commit(customers=[refunded], transactions=[transaction])
        LOGGER.info("Cancelled transaction %s, refunded %s to %s", transaction.id, transaction.price, customer.name)
        return transaction

    def _advance(self, transaction_id: str, status: TransactionStatus, action: str) -> Transaction:
        transaction = self._transition(transaction_id, status, action)
        self.storage.commit(transactions=[transaction])
        LOGGER.info("Transaction %s is %s", transaction.id, transaction.status.value)
        return transaction

    def _transition(self, transaction_id: str, status: TransactionStatus, action: str) -> Transaction:
        """Return a copy of the transaction moved to ``status``, without writing it."""
        transaction = self.get(transaction_id)
        if not transaction.can_transition_to(status):
            raise InvalidStateError(transaction.id, transaction.status, action)
        return transaction.model_copy(update={"status": status})
