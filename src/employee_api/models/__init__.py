"""ORM model registry: import all models so Alembic autogenerate discovers them."""

from employee_api.models.employee import Employee
from employee_api.models.export_job import ExportJob, ExportStatus

__all__ = [
    "Employee",
    "ExportJob",
    "ExportStatus",
]
