"""
Price calculation for laundry orders.

Prices are per unit of weight. Only full service has its own rate;
wash-only and ironed-only orders share the cheaper tier. Express orders
cost half again as much. Products go through ``money.multiply`` so a
price is either exact or rejected with ``InvalidAmountError``.
"""

from decimal import Decimal

from . import money
from .models import ServiceType, TransactionType

FULL_SERVICE_RATE = Decimal("8000")
BASIC_SERVICE_RATE = Decimal("6000")
EXPRESS_MULTIPLIER = Decimal("1.5")


def rate_for(service_type: ServiceType) -> Decimal:
    if service_type == ServiceType.FULL_SERVICE:
        return FULL_SERVICE_RATE
    return BASIC_SERVICE_RATE


def price(weight: Decimal, service_type: ServiceType, transaction_type: TransactionType) -> Decimal:
    """Return the price of an order. Does not validate ``weight``."""
    amount = money.multiply(rate_for(service_type), money.to_decimal(weight, "weight"))
    if transaction_type == TransactionType.EXPRESS:
        amount = money.multiply(amount, EXPRESS_MULTIPLIER)
    return amount
