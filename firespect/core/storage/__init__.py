"""Persistence boundary for jobs, inspections and client records."""

from .object_store import (
    JsonClientRepository,
    JsonJobRepository,
    JsonRepository,
    JsonServiceHistoryRepository,
    ObjectStore,
)
from .repository import InMemoryRepository, Repository

__all__ = [
    "InMemoryRepository",
    "JsonClientRepository",
    "JsonJobRepository",
    "JsonRepository",
    "JsonServiceHistoryRepository",
    "ObjectStore",
    "Repository",
]
