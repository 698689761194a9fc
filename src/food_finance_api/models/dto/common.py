"""Shared DTO building blocks."""

from decimal import Decimal
from typing import Annotated

from pydantic import Field, StringConstraints

# Monetary input: non-negative, at most two decimal places
Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
PositiveMoney = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]
Quantity = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=3)]
PositiveQuantity = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=3)]

RequiredName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
PaymentMethodName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
