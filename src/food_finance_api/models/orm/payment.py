"""Payroll payment ORM model."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from food_finance_api.models.orm.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class PaymentORM(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Payroll payment database model.

    ``net_value`` is gross minus discounts, computed when the payment is
    recorded and never recomputed.
    """

    __tablename__ = "payments"

    employee_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("employees.id", ondelete="RESTRICT"),
        nullable=False,
    )
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    description: Mapped[str | None] = mapped_column(String(500), nullable=True)
    gross_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    discounts: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    net_value: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    employee: Mapped["EmployeeORM"] = relationship("EmployeeORM", back_populates="payments")

    __table_args__ = (
        Index("idx_payments_employee_id", "employee_id"),
        Index("idx_payments_user_date", "user_id", "date"),
    )


from food_finance_api.models.orm.employee import EmployeeORM  # noqa: E402, F401
