"""I/O utilities for CSV import/export."""

from .export_csv import export_assignments_csv
from .import_csv import import_staff_csv

__all__ = [
    "import_staff_csv",
    "export_assignments_csv",
]
