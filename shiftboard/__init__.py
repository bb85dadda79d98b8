"""Shift board: availability collection and drag-edited shift scheduling.

Modules:
- config: scheduling envelope and shift templates (YAML or JSON)
- logger: package logger
- errors: scheduling error taxonomy and HTTP status mapping
- timemodel: minute-of-day arithmetic and slot enumeration
- constraints: interval, break and availability validation
- domain: SQLAlchemy models, engine helpers and repositories
- services: assignment, availability, submission and summary logic
- editing: pointer-driven editing state machine and persistence synchronizer
- api: FastAPI application
- io: CSV import/export
- cli: command-line interface entrypoints
"""

__all__ = [
    "config",
    "logger",
    "errors",
    "timemodel",
    "constraints",
    "domain",
    "services",
    "editing",
    "api",
    "io",
    "cli",
]
