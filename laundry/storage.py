"""
Record stores for customers, transactions and the laundry account.

Two backends share the ``LedgerStore`` interface:

* ``InMemoryStorage`` keeps plain dicts, used by tests and the default
  ``memory`` backend.
* ``SqliteStorage`` keeps everything in one SQLite file so balances
  survive restarts.

Both keep a name -> id index for customers, so a lookup by name never
scans the table. Writes only happen through ``commit``, which applies a
whole batch or nothing.
"""

import sqlite3
from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Iterable, Optional, Union

from .logging_utils import get_logger
from .models import Customer, LaundryAccount, ServiceType, Transaction, TransactionStatus, TransactionType

LOGGER = get_logger(__name__)


class LedgerStore(ABC):
    @abstractmethod
    def get_customer(self, customer_id: str) -> Optional[Customer]:
        ...

    @abstractmethod
    def find_customer_id(self, name: str) -> Optional[str]:
        ...

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        ...

    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        ...

    @abstractmethod
    def get_laundry(self) -> Optional[LaundryAccount]:
        ...

    @abstractmethod
    def commit(
        self,
        customers: Iterable[Customer] = (),
        transactions: Iterable[Transaction] = (),
        laundry: Optional[LaundryAccount] = None,
    ) -> None:
        """Persist every given record, or none of them."""

    def close(self) -> None:
        pass


class InMemoryStorage(LedgerStore):
    def __init__(self):
        self.customers: dict[str, dict] = {}
        self.transactions: dict[str, dict] = {}
        self.customer_name_index: dict[str, str] = {}
        self.laundry: Optional[dict] = None

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        data = self.customers.get(customer_id)
        return Customer(**data) if data else None

    def find_customer_id(self, name: str) -> Optional[str]:
        return self.customer_name_index.get(name)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        data = self.transactions.get(transaction_id)
        return Transaction(**data) if data else None

    def list_transactions(self) -> list[Transaction]:
        return [Transaction(**data) for data in self.transactions.values()]

    def get_laundry(self) -> Optional[LaundryAccount]:
        return LaundryAccount(**self.laundry) if self.laundry else None

    def commit(
        self,
        customers: Iterable[Customer] = (),
        transactions: Iterable[Transaction] = (),
        laundry: Optional[LaundryAccount] = None,
    ) -> None:
        customers = list(customers)
        transactions = list(transactions)
        for customer in customers:
            owner = self.customer_name_index.get(customer.name)
            if owner is not None and owner != customer.id:
                raise ValueError(f"Customer name {customer.name!r} is already taken")

        for customer in customers:
            self.customers[customer.id] = customer.model_dump()
            self.customer_name_index[customer.name] = customer.id
        for transaction in transactions:
            self.transactions[transaction.id] = transaction.model_dump()
        if laundry is not None:
            self.laundry = laundry.model_dump()


SCHEMA = """
CREATE TABLE IF NOT EXISTS customers (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    contact TEXT NOT NULL,
    balance TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    date TEXT NOT NULL,
    status TEXT NOT NULL,
    customer_id TEXT NOT NULL REFERENCES customers(id),
    price TEXT NOT NULL,
    transaction_type TEXT NOT NULL,
    service_type INTEGER NOT NULL,
    weight TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS laundry (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    name TEXT NOT NULL,
    location TEXT NOT NULL,
    balance TEXT NOT NULL
);
"""


class SqliteStorage(LedgerStore):
    """SQLite-backed store. Decimals are kept as text so they round-trip exactly."""

    def __init__(self, path: Union[str, Path]):
        self.path = str(path)
        if self.path != ":memory:":
            Path(self.path).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
        # Access is serialized by LaundryService, so one shared connection is enough.
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._conn.executescript(SCHEMA)
        LOGGER.debug("Opened SQLite ledger store at %s", self.path)

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        row = self._conn.execute("SELECT * FROM customers WHERE id = ?", (customer_id,)).fetchone()
        return self._customer_from_row(row) if row else None

    def find_customer_id(self, name: str) -> Optional[str]:
        row = self._conn.execute("SELECT id FROM customers WHERE name = ?", (name,)).fetchone()
        return row["id"] if row else None

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        row = self._conn.execute("SELECT * FROM transactions WHERE id = ?", (transaction_id,)).fetchone()
        return self._transaction_from_row(row) if row else None

    def list_transactions(self) -> list[Transaction]:
        rows = self._conn.execute("SELECT * FROM transactions ORDER BY rowid").fetchall()
        return [self._transaction_from_row(row) for row in rows]

    def get_laundry(self) -> Optional[LaundryAccount]:
        row = self._conn.execute("SELECT * FROM laundry WHERE id = 1").fetchone()
        if not row:
            return None
        return LaundryAccount(name=row["name"], location=row["location"], balance=Decimal(row["balance"]))

    def commit(
        self,
        customers: Iterable[Customer] = (),
        transactions: Iterable[Transaction] = (),
        laundry: Optional[LaundryAccount] = None,
    ) -> None:
        # The connection context manager commits on success and rolls back on any error.
        with self._conn:
            for customer in customers:
                self._conn.execute(
                    """
                    INSERT INTO customers (id, name, contact, balance) VALUES (?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name = excluded.name, contact = excluded.contact, balance = excluded.balance
                    """,
                    (customer.id, customer.name, customer.contact, str(customer.balance)),
                )
            for transaction in transactions:
                self._conn.execute(
                    """
                    INSERT INTO transactions
                        (id, date, status, customer_id, price, transaction_type, service_type, weight)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        status = excluded.status, price = excluded.price,
                        transaction_type = excluded.transaction_type,
                        service_type = excluded.service_type, weight = excluded.weight
                    """,
                    (
                        transaction.id,
                        transaction.date.isoformat(),
                        transaction.status.value,
                        transaction.customer_id,
                        str(transaction.price),
                        transaction.transaction_type.value,
                        transaction.service_type.value,
                        str(transaction.weight),
                    ),
                )
            if laundry is not None:
                self._conn.execute(
                    """
                    INSERT INTO laundry (id, name, location, balance) VALUES (1, ?, ?, ?)
                    ON CONFLICT(id) DO UPDATE SET
                        name = excluded.name, location = excluded.location, balance = excluded.balance
                    """,
                    (laundry.name, laundry.location, str(laundry.balance)),
                )

    def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _customer_from_row(row: sqlite3.Row) -> Customer:
        return Customer(
            id=row["id"], name=row["name"], contact=row["contact"], balance=Decimal(row["balance"])
        )

    @staticmethod
    def _transaction_from_row(row: sqlite3.Row) -> Transaction:
        return Transaction(
            id=row["id"],
            date=datetime.fromisoformat(row["date"]),
            status=TransactionStatus(row["status"]),
            customer_id=row["customer_id"],
            price=Decimal(row["price"]),
            transaction_type=TransactionType(row["transaction_type"]),
            service_type=ServiceType(row["service_type"]),
            weight=Decimal(row["weight"]),
        )
