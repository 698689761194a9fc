"""Domain-specific exceptions for the Food Finance API.

These exceptions provide a clean separation between service-layer errors
and HTTP responses, avoiding string matching in routers.
"""

from enum import StrEnum
from typing import Any


class FoodFinanceError(Exception):
    """Base exception for all Food Finance API errors."""

    def __init__(self, message: str = "An error occurred", details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


# =============================================================================
# Resource Not Found Errors (404)
# =============================================================================


class NotFoundError(FoodFinanceError):
    """Raised when a record is absent or not owned by the caller's tenant."""

    def __init__(self, entity: str = "Resource", entity_id: str | None = None) -> None:
        details = {"id": str(entity_id)} if entity_id else {}
        super().__init__(f"{entity} not found", details)
        self.entity = entity


class SupplierNotFoundError(NotFoundError):
    def __init__(self, supplier_id: str | None = None) -> None:
        super().__init__("Supplier", supplier_id)


class StockItemNotFoundError(NotFoundError):
    def __init__(self, item_id: str | None = None) -> None:
        super().__init__("Stock item", item_id)


class EmployeeNotFoundError(NotFoundError):
    def __init__(self, employee_id: str | None = None) -> None:
        super().__init__("Employee", employee_id)


class PaymentNotFoundError(NotFoundError):
    def __init__(self, payment_id: str | None = None) -> None:
        super().__init__("Payment", payment_id)


class ExpenseCategoryNotFoundError(NotFoundError):
    def __init__(self, category_id: str | None = None) -> None:
        super().__init__("Expense category", category_id)


class ExpenseNotFoundError(NotFoundError):
    def __init__(self, expense_id: str | None = None) -> None:
        super().__init__("Expense", expense_id)


class SaleNotFoundError(NotFoundError):
    def __init__(self, sale_id: str | None = None) -> None:
        super().__init__("Sale", sale_id)


class PurchaseNotFoundError(NotFoundError):
    def __init__(self, purchase_id: str | None = None) -> None:
        super().__init__("Purchase", purchase_id)


# =============================================================================
# Conflict Errors (409)
# =============================================================================


class ConflictError(FoodFinanceError):
    """Base class for resource conflict errors."""

    pass


class ReferentialConflictError(ConflictError):
    """Raised when a delete is blocked by records that still reference the target."""

    def __init__(self, entity: str, referenced_by: str, count: int | None = None) -> None:
        if count is None:
            message = f"Cannot delete this {entity.lower()}: {referenced_by} still reference it"
        else:
            message = (
                f"Cannot delete this {entity.lower()}: "
                f"{count} associated {referenced_by} still reference it"
            )
        details: dict[str, Any] = {"referenced_by": referenced_by}
        if count is not None:
            details["count"] = count
        super().__init__(message, details)
        self.count = count


class DuplicateNameError(ConflictError):
    """Raised when a per-tenant unique name is already taken."""

    def __init__(self, entity: str, name: str) -> None:
        super().__init__(
            f"{entity} with this name already exists",
            {"field_errors": {"name": [f"{entity} with this name already exists"]}, "name": name},
        )


# =============================================================================
# Validation Errors (400)
# =============================================================================


class ValidationError(FoodFinanceError):
    """Base class for validation errors."""

    def __init__(
        self,
        message: str = "Invalid data",
        field_errors: dict[str, list[str]] | None = None,
    ) -> None:
        self.field_errors = field_errors or {}
        details = {"field_errors": self.field_errors} if self.field_errors else {}
        super().__init__(message, details)


class BackupValidationKind(StrEnum):
    """Reasons a backup payload is rejected before touching storage."""

    MALFORMED_JSON = "malformed_json"
    MISSING_FIELDS = "missing_fields"
    UNSUPPORTED_VERSION = "unsupported_version"
    INVALID_ENTITY = "invalid_entity"


class BackupValidationError(ValidationError):
    """Raised when a backup payload fails structural or version checks."""

    def __init__(
        self,
        kind: BackupValidationKind,
        message: str,
        field_errors: dict[str, list[str]] | None = None,
    ) -> None:
        super().__init__(message, field_errors)
        self.kind = kind
        self.details["kind"] = kind.value


# =============================================================================
# Backup Engine Errors
# =============================================================================


class ExportError(FoodFinanceError):
    """Raised when a tenant export cannot be completed."""

    def __init__(self) -> None:
        super().__init__("Failed to export backup")


class RestoreErrorKind(StrEnum):
    """Restore failure kinds."""

    TRANSACTION_FAILED = "transaction_failed"


class RestoreError(FoodFinanceError):
    """Raised when the restore transaction is rolled back."""

    def __init__(self, kind: RestoreErrorKind = RestoreErrorKind.TRANSACTION_FAILED) -> None:
        super().__init__("Failed to import backup. Check that the file is valid.", {"kind": kind.value})
        self.kind = kind
