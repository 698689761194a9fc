"""Employee ORM model."""

from decimal import Decimal

from sqlalchemy import Numeric, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from food_finance_api.models.orm.base import Base, TenantMixin, TimestampMixin, UUIDMixin


class EmployeeORM(Base, UUIDMixin, TimestampMixin, TenantMixin):
    """Employee database model."""

    __tablename__ = "employees"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    cpf: Mapped[str | None] = mapped_column(String(20), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    role: Mapped[str] = mapped_column(String(100), nullable=False)
    base_salary: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    # Relationships - use lazy="select" for collections to avoid N+1 queries
    # Load explicitly with selectinload() when needed
    payments: Mapped[list["PaymentORM"]] = relationship(
        "PaymentORM",
        back_populates="employee",
        lazy="select",
    )


from food_finance_api.models.orm.payment import PaymentORM  # noqa: E402, F401
