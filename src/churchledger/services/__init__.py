"""Service module exports."""

from . import (
    analytics,
    budgeting,
    clock,
    donors,
    export_csv,
    identity,
    import_csv,
)

__all__ = [
    "analytics",
    "budgeting",
    "clock",
    "donors",
    "export_csv",
    "identity",
    "import_csv",
]
