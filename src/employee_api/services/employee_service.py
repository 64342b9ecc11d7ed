"""Employee service: read-side queries over the employee record store.

Every list query is ordered by primary key so repeated calls against an
unchanged table return the same records in the same order.
"""

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from employee_api.models.employee import Employee


async def get_employee(session: AsyncSession, employee_id: int) -> Employee | None:
    """Get an employee by primary key."""
    return await session.get(Employee, employee_id)


async def get_employee_by_email(session: AsyncSession, email: str) -> Employee | None:
    """Get the employee with the given email (unique), if any."""
    result = await session.execute(select(Employee).where(Employee.email == email))
    return result.scalar_one_or_none()


async def list_employees_by_department(session: AsyncSession, department: str) -> list[Employee]:
    """List employees in a department (exact match)."""
    result = await session.execute(
        select(Employee).where(Employee.department == department).order_by(Employee.id)
    )
    return list(result.scalars().all())


async def list_employees_by_position(session: AsyncSession, position: str) -> list[Employee]:
    """List employees holding a position (exact match)."""
    result = await session.execute(select(Employee).where(Employee.position == position).order_by(Employee.id))
    return list(result.scalars().all())


async def list_employees_by_department_and_position(
    session: AsyncSession,
    department: str,
    position: str,
) -> list[Employee]:
    """List employees matching both department and position."""
    result = await session.execute(
        select(Employee)
        .where(Employee.department == department, Employee.position == position)
        .order_by(Employee.id)
    )
    return list(result.scalars().all())


async def search_employees_by_name(session: AsyncSession, name: str) -> list[Employee]:
    """Case-insensitive substring search on first name OR last name.

    LIKE wildcards in ``name`` are matched literally.
    """
    result = await session.execute(
        select(Employee)
        .where(
            or_(
                Employee.first_name.icontains(name, autoescape=True),
                Employee.last_name.icontains(name, autoescape=True),
            )
        )
        .order_by(Employee.id)
    )
    return list(result.scalars().all())


async def list_employees_with_salary_above(session: AsyncSession, min_salary: float) -> list[Employee]:
    """List employees whose salary is strictly greater than ``min_salary``.

    Employees without a salary never match.
    """
    result = await session.execute(
        select(Employee)
        .where(Employee.salary.is_not(None), Employee.salary > min_salary)
        .order_by(Employee.id)
    )
    return list(result.scalars().all())


async def list_employees_page(
    session: AsyncSession,
    *,
    page: int = 1,
    page_size: int = 20,
) -> list[Employee]:
    """Return one page of the full collection ordered by ID.

    Args:
        session: Database session.
        page: 1-based page number.
        page_size: Items per page.

    Returns:
        The employees on the requested page (empty past the end).
    """
    offset = (page - 1) * page_size
    result = await session.execute(select(Employee).order_by(Employee.id).offset(offset).limit(page_size))
    return list(result.scalars().all())


async def count_employees(session: AsyncSession) -> int:
    """Count all employees."""
    result = await session.execute(select(func.count()).select_from(Employee))
    return result.scalar_one()
