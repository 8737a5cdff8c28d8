"""
Utility functions for the clinic inventory tracker.
"""

from .logger import (
    AuditLogger,
    ClinicInventoryLogger,
    get_logger,
)

__all__ = [
    "ClinicInventoryLogger",
    "AuditLogger",
    "get_logger",
]
