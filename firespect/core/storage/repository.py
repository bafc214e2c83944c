"""Repository interface used by the scheduler's job registry."""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class Repository(Protocol[T]):
    """Minimal keyed storage for models with an ``id`` field."""

    def get(self, item_id: str) -> T | None: ...

    def list(self) -> list[T]: ...

    def upsert(self, item: T) -> T: ...

    def delete(self, item_id: str) -> bool: ...


class InMemoryRepository(Generic[T]):
    """Dict-backed repository, insertion ordered."""

    def __init__(self, items: list[T] | None = None):
        self._items: dict[str, T] = {}
        for item in items or []:
            self.upsert(item)

    def get(self, item_id: str) -> T | None:
        return self._items.get(item_id)

    def list(self) -> list[T]:
        return list(self._items.values())

    def upsert(self, item: T) -> T:
        self._items[item.id] = item
        return item

    def delete(self, item_id: str) -> bool:
        return self._items.pop(item_id, None) is not None

    def __len__(self) -> int:
        return len(self._items)
