"""Client records and service history."""

from .service import (
    ClientError,
    ClientNotFoundError,
    ClientService,
    next_due_date,
    normalize_phone,
)

__all__ = [
    "ClientError",
    "ClientNotFoundError",
    "ClientService",
    "next_due_date",
    "normalize_phone",
]
