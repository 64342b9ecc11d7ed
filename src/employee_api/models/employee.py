"""Employee model: the record collection that exports are drawn from."""

from datetime import date

from sqlalchemy import Date, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from employee_api.models.base import Base, TimestampMixin


class Employee(Base, TimestampMixin):
    """A single employee record.

    Sensitive attributes arrive here already decrypted; the export pipeline
    only ever reads plain values.
    """

    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone_number: Mapped[str | None] = mapped_column(String(50), nullable=True)

    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    salary: Mapped[float | None] = mapped_column(Float, nullable=True)
    position: Mapped[str | None] = mapped_column(String(100), nullable=True)
    department: Mapped[str | None] = mapped_column(String(100), nullable=True)

    __table_args__ = (
        Index("ix_employee_email", "email"),
        Index("ix_employee_department", "department"),
        Index("ix_employee_position", "position"),
        Index("ix_employee_salary", "salary"),
        Index("ix_employee_hire_date", "hire_date"),
        Index("ix_employee_name", "first_name", "last_name"),
    )
