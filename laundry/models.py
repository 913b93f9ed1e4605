from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class TransactionStatus(str, Enum):
    PENDING = "Pending"
    ONGOING = "Ongoing"
    READY = "Ready"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


class TransactionType(str, Enum):
    REGULAR = "Regular"
    EXPRESS = "Express"

    @classmethod
    def from_express(cls, express: bool) -> "TransactionType":
        return cls.EXPRESS if express else cls.REGULAR


class ServiceType(int, Enum):
    FULL_SERVICE = 0
    WASH_ONLY = 1
    IRONED_ONLY = 2


# Pending -> Pending (edit) is not a status change and is checked separately.
ALLOWED_TRANSITIONS: dict[TransactionStatus, set[TransactionStatus]] = {
    TransactionStatus.PENDING: {TransactionStatus.ONGOING, TransactionStatus.CANCELLED},
    TransactionStatus.ONGOING: {TransactionStatus.READY},
    TransactionStatus.READY: {TransactionStatus.COMPLETED},
    TransactionStatus.COMPLETED: set(),
    TransactionStatus.CANCELLED: set(),
}


class Customer(BaseModel):
    id: str
    name: str
    contact: str
    balance: Decimal = Decimal("0")

    model_config = ConfigDict(from_attributes=True)


class Transaction(BaseModel):
    id: str
    date: datetime
    status: TransactionStatus = TransactionStatus.PENDING
    customer_id: str
    price: Decimal
    transaction_type: TransactionType
    service_type: ServiceType
    weight: Decimal

    model_config = ConfigDict(from_attributes=True)

    def can_edit(self) -> bool:
        return self.status == TransactionStatus.PENDING

    def can_transition_to(self, status: TransactionStatus) -> bool:
        return status in ALLOWED_TRANSITIONS[self.status]


class LaundryAccount(BaseModel):
    name: str
    location: str
    balance: Decimal = Decimal("0")

    model_config = ConfigDict(from_attributes=True)


class CreateCustomerRequest(BaseModel):
    name: str = Field(..., description="Unique, case-sensitive customer name")
    contact: str = ""

    model_config = ConfigDict(json_schema_extra={
        "example": {"name": "Budi", "contact": "+62 812 0000 0000"}
    })


class UpdateBalanceRequest(BaseModel):
    amount: Decimal = Field(..., description="Deposit (positive) or withdrawal (negative)")


class TransactionRequest(BaseModel):
    name: str = Field(..., description="Name of the customer placing the order")
    weight: Decimal = Field(..., gt=0)
    express: bool = False
    service_type: ServiceType = ServiceType.FULL_SERVICE

    model_config = ConfigDict(json_schema_extra={
        "example": {"name": "Budi", "weight": 2, "express": False, "service_type": 0}
    })

    @property
    def transaction_type(self) -> TransactionType:
        return TransactionType.from_express(self.express)


class CustomerResponse(BaseModel):
    customer: Customer
    message: str


class CustomerBalance(BaseModel):
    name: str
    balance: Decimal


class TransactionResponse(BaseModel):
    transaction: Transaction
    message: str


class LaundryBalance(BaseModel):
    name: str
    location: str
    balance: Decimal


class MessageResponse(BaseModel):
    message: str
    transaction_id: Optional[str] = None
