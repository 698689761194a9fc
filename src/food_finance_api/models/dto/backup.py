"""Backup DTOs for export/import functionality.

The backup file is a camelCase JSON document. The ``*Backup`` models below
describe one record of each collection as it appears in the file; they are
used to validate untrusted uploads before anything touches the database.
Unknown keys are ignored, which is how stale foreign keys such as a purchase
item's ``purchaseId`` or a row's ``userId`` are dropped on import.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

BACKUP_VERSION = "1.0.0"


class BackupRecord(BaseModel):
    """Base for records inside a backup file."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SupplierBackup(BackupRecord):
    """Supplier as stored in a backup."""

    name: str = Field(min_length=1, max_length=255)
    phone: str | None = None
    email: str | None = None
    address: str | None = None


class StockItemBackup(BackupRecord):
    """Stock item as stored in a backup."""

    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    unit: str = Field(min_length=1, max_length=20)
    quantity: Decimal
    unit_cost: Decimal
    total_value: Decimal


class EmployeeBackup(BackupRecord):
    """Employee as stored in a backup."""

    name: str = Field(min_length=1, max_length=255)
    cpf: str | None = None
    phone: str | None = None
    role: str = Field(min_length=1, max_length=100)
    base_salary: Decimal = Decimal("0")


class PaymentBackup(BackupRecord):
    """Payment as stored in a backup."""

    employee_id: UUID
    date: datetime
    description: str | None = None
    gross_value: Decimal
    discounts: Decimal = Decimal("0")
    net_value: Decimal


class ExpenseCategoryBackup(BackupRecord):
    """Expense category as stored in a backup."""

    name: str = Field(min_length=1, max_length=255)


class ExpenseBackup(BackupRecord):
    """Expense as stored in a backup."""

    category_id: UUID
    description: str | None = None
    value: Decimal
    date: datetime
    payment_method: str = Field(min_length=1, max_length=50)


class SaleBackup(BackupRecord):
    """Sale as stored in a backup."""

    date: datetime
    total_value: Decimal
    payment_method: str = Field(min_length=1, max_length=50)
    notes: str | None = None


class PurchaseItemBackup(BackupRecord):
    """Purchase line as stored in a backup (parent id is implied by nesting)."""

    stock_item_id: UUID
    quantity: Decimal
    unit_price: Decimal
    total: Decimal


class PurchaseBackup(BackupRecord):
    """Purchase with its nested items as stored in a backup."""

    supplier_id: UUID
    date: datetime
    payment_method: str = Field(min_length=1, max_length=50)
    notes: str | None = None
    total: Decimal
    items: list[PurchaseItemBackup] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class StoreBackup(BackupRecord):
    """Store profile as stored in a backup."""

    name: str = Field(min_length=1, max_length=255)
    cnpj: str | None = None
    phone: str | None = None
    address: str | None = None


class BackupData(BaseModel):
    """All collections of one tenant. Absent collections are empty."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    suppliers: list[SupplierBackup] = Field(default_factory=list)
    purchases: list[PurchaseBackup] = Field(default_factory=list)
    stock_items: list[StockItemBackup] = Field(default_factory=list)
    employees: list[EmployeeBackup] = Field(default_factory=list)
    payments: list[PaymentBackup] = Field(default_factory=list)
    expense_categories: list[ExpenseCategoryBackup] = Field(default_factory=list)
    expenses: list[ExpenseBackup] = Field(default_factory=list)
    sales: list[SaleBackup] = Field(default_factory=list)
    store: StoreBackup | None = None

    @field_validator(
        "suppliers",
        "purchases",
        "stock_items",
        "employees",
        "payments",
        "expense_categories",
        "expenses",
        "sales",
        mode="before",
    )
    @classmethod
    def none_is_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class BackupBundle(BaseModel):
    """A validated backup file."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    version: str
    exported_at: datetime | None = None
    user_id: str | None = None
    data: BackupData


class BackupSummary(BaseModel):
    """Record counts shown on the backup page."""

    suppliers: int = 0
    purchases: int = 0
    stock_items: int = 0
    employees: int = 0
    payments: int = 0
    expenses: int = 0
    sales: int = 0


class RestoreImportCounts(BaseModel):
    """Counts of imported entities during restore."""

    suppliers: int = 0
    stock_items: int = 0
    purchases: int = 0
    purchase_items: int = 0
    employees: int = 0
    payments: int = 0
    expense_categories: int = 0
    expenses: int = 0
    sales: int = 0
    store: int = 0


class RestoreResponse(BaseModel):
    """Response after importing a backup."""

    success: bool
    imported: RestoreImportCounts = Field(default_factory=RestoreImportCounts)
    error: str | None = None
    error_kind: str | None = None
    field_errors: dict[str, list[str]] = Field(default_factory=dict)


class BackupValidationResponse(BaseModel):
    """Result of checking a backup file without importing it."""

    valid: bool
    version: str | None = None
    exported_at: datetime | None = None
    counts: BackupSummary | None = None
    error: str | None = None
    error_kind: str | None = None
    field_errors: dict[str, list[str]] = Field(default_factory=dict)
