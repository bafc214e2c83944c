"""File-based object store for inspections, jobs and client records.

Each record is one JSON file under a per-kind directory. Inspections carry a
sync status so a transport layer can pick up what has not been uploaded.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from ..models.client import Client, ServiceHistory
from ..models.inspection import Inspection
from ..models.job import Job

SYNC_PENDING = "pending"
SYNC_SYNCED = "synced"

JOBS = "jobs"
CLIENTS = "clients"
SERVICE_HISTORY = "service_history"

M = TypeVar("M", bound=BaseModel)


class ObjectStore:
    """Simple JSON-backed persistence layer."""

    def __init__(self, base_dir: str | Path | None = None):
        self.base_dir = Path(base_dir) if base_dir else Path("data/store")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------
    def _dir(self, kind: str) -> Path:
        path = self.base_dir / kind
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _dump(self, path: Path, data: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def _load(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    # ------------------------------------------------------------------
    # Inspections
    # ------------------------------------------------------------------
    def save_inspection(self, inspection: Inspection) -> None:
        """Persist an inspection and mark it for sync."""
        path = self._dir("inspections") / f"{inspection.id}.json"
        self._dump(
            path,
            {
                "syncStatus": SYNC_PENDING,
                "inspection": inspection.model_dump(mode="json", by_alias=True),
            },
        )

    def load_inspection(self, inspection_id: str) -> Inspection | None:
        record = self._load(self._dir("inspections") / f"{inspection_id}.json")
        return Inspection.model_validate(record["inspection"]) if record else None

    def list_pending(self) -> list[Inspection]:
        """Inspections not yet synced, oldest first."""
        pending = []
        for path in self._dir("inspections").glob("*.json"):
            record = self._load(path)
            if record and record.get("syncStatus") == SYNC_PENDING:
                pending.append(Inspection.model_validate(record["inspection"]))
        return sorted(pending, key=lambda i: i.timestamp)

    def mark_synced(self, inspection_id: str) -> bool:
        path = self._dir("inspections") / f"{inspection_id}.json"
        record = self._load(path)
        if not record:
            return False
        record["syncStatus"] = SYNC_SYNCED
        self._dump(path, record)
        return True

    # ------------------------------------------------------------------
    # Records (jobs, clients, service history)
    # ------------------------------------------------------------------
    def save_record(self, kind: str, record: BaseModel) -> None:
        path = self._dir(kind) / f"{record.id}.json"
        self._dump(path, record.model_dump(mode="json", by_alias=True))

    def load_record(self, kind: str, record_id: str, model: type[M]) -> M | None:
        data = self._load(self._dir(kind) / f"{record_id}.json")
        return model.model_validate(data) if data else None

    def list_records(self, kind: str, model: type[M]) -> list[M]:
        """All records of a kind, oldest first."""
        records = []
        for path in self._dir(kind).glob("*.json"):
            data = self._load(path)
            if data:
                records.append(model.model_validate(data))
        return sorted(records, key=lambda r: r.created_at)

    def delete_record(self, kind: str, record_id: str) -> bool:
        path = self._dir(kind) / f"{record_id}.json"
        if not path.exists():
            return False
        path.unlink()
        return True

    def save_job(self, job: Job) -> None:
        self.save_record(JOBS, job)

    def load_job(self, job_id: str) -> Job | None:
        return self.load_record(JOBS, job_id, Job)

    def list_jobs(self) -> list[Job]:
        return self.list_records(JOBS, Job)

    def delete_job(self, job_id: str) -> bool:
        return self.delete_record(JOBS, job_id)


class JsonRepository(Generic[M]):
    """Repository adapter over one record kind of an ObjectStore."""

    def __init__(self, store: ObjectStore, kind: str, model: type[M]):
        self.store = store
        self.kind = kind
        self.model = model

    def get(self, item_id: str) -> M | None:
        return self.store.load_record(self.kind, item_id, self.model)

    def list(self) -> list[M]:
        return self.store.list_records(self.kind, self.model)

    def upsert(self, item: M) -> M:
        self.store.save_record(self.kind, item)
        return item

    def delete(self, item_id: str) -> bool:
        return self.store.delete_record(self.kind, item_id)


class JsonJobRepository(JsonRepository[Job]):
    """Lets the scheduler run on an ObjectStore."""

    def __init__(self, store: ObjectStore):
        super().__init__(store, JOBS, Job)


class JsonClientRepository(JsonRepository[Client]):
    def __init__(self, store: ObjectStore):
        super().__init__(store, CLIENTS, Client)


class JsonServiceHistoryRepository(JsonRepository[ServiceHistory]):
    def __init__(self, store: ObjectStore):
        super().__init__(store, SERVICE_HISTORY, ServiceHistory)
