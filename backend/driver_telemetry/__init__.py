"""
Driver Telemetry API: Package Initializer
============================================

What: Marks `driver_telemetry` as a Python package and carries the version.
Who:  Imported by uvicorn, pytest and the health route.

Architecture Note:
    The service follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Validation, fan-out, purge
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Store (Persistence)          │  ← Async engine, injected per request
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
