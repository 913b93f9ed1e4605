from decimal import Decimal
from typing import Callable

from . import money
from .errors import AlreadyExistsError, InsufficientBalanceError, NotFoundError
from .logging_utils import get_logger
from .models import Customer
from .storage import LedgerStore

LOGGER = get_logger(__name__)


class CustomerAccountManager:
    """Customer records and their prepaid balances.

    ``debit`` and ``credit`` only build updated copies; the caller decides
    when to commit them, together with whatever else the operation changes.
    """

    def __init__(self, storage: LedgerStore, id_factory: Callable[[], str]):
        self.storage = storage
        self.id_factory = id_factory

    def get(self, customer_id: str) -> Customer:
        customer = self.storage.get_customer(customer_id)
        if customer is None:
            raise NotFoundError("Customer", customer_id)
        return customer

    def find_by_name(self, name: str) -> Customer:
        customer_id = self.storage.find_customer_id(name)
        if customer_id is None:
            raise NotFoundError("Customer", name)
        return self.get(customer_id)

    def create_customer(self, name: str, contact: str) -> Customer:
        if self.storage.find_customer_id(name) is not None:
            raise AlreadyExistsError(name)

        customer = Customer(id=self.id_factory(), name=name, contact=contact, balance=Decimal("0"))
        self.storage.commit(customers=[customer])
        LOGGER.info("Created customer %s (%s)", customer.name, customer.id)
        return customer

    def get_balance(self, name: str) -> Decimal:
        return self.find_by_name(name).balance

    def adjust_balance(self, name: str, delta: Decimal) -> Customer:
        # No floor check: this is the manual deposit/withdrawal path.
        customer = self.find_by_name(name)
        balance = money.add(customer.balance, money.to_decimal(delta))
        updated = customer.model_copy(update={"balance": balance})
        self.storage.commit(customers=[updated])
        LOGGER.info("Adjusted balance of %s by %s to %s", name, delta, updated.balance)
        return updated

    def debit(self, customer: Customer, amount: Decimal) -> Customer:
        if customer.balance < amount:
            raise InsufficientBalanceError(customer.id, customer.balance, amount)
        return customer.model_copy(update={"balance": money.subtract(customer.balance, amount)})

    def credit(self, customer: Customer, amount: Decimal) -> Customer:
        return customer.model_copy(update={"balance": money.add(customer.balance, amount)})
