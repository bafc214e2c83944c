"""Client records, service history and due-date tracking.

Clients and their service history live in two repositories. Inspections
recorded through add_service() roll the client's last/next inspection
dates forward; the next date falls back to the contracted frequency when
the technician did not give one.
"""

from __future__ import annotations

import calendar
import threading
from collections import Counter
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from ..models.base import utc_now
from ..models.client import Client, ClientSearchFilters, ClientStats, ServiceHistory
from ..models.enums import ServiceFrequency, ServiceType
from ..storage.repository import InMemoryRepository, Repository
from ...observability.logger import get_logger

logger = get_logger(__name__)

FREQUENCY_MONTHS = {
    ServiceFrequency.MONTHLY: 1,
    ServiceFrequency.QUARTERLY: 3,
    ServiceFrequency.SEMI_ANNUAL: 6,
    ServiceFrequency.ANNUAL: 12,
}
UPCOMING_WINDOW_DAYS = 7

_PROTECTED_FIELDS = {"id", "created_at"}


class ClientError(Exception):
    """Base class for client record failures."""


class ClientNotFoundError(ClientError):
    """No client with the given ID."""


def normalize_phone(phone: str | None) -> str:
    """Digits only, so "(555) 123-4567" and "555.123.4567" compare equal."""
    return "".join(ch for ch in (phone or "") if ch.isdigit())


def next_due_date(after: datetime, frequency: ServiceFrequency | str) -> datetime | None:
    """Same day of month N months later (clamped to month end); None for as-needed."""
    months = FREQUENCY_MONTHS.get(ServiceFrequency(frequency))
    if months is None:
        return None
    month_index = after.month - 1 + months
    year = after.year + month_index // 12
    month = month_index % 12 + 1
    day = min(after.day, calendar.monthrange(year, month)[1])
    return after.replace(year=year, month=month, day=day)


class ClientService:
    """CRUD, search and due-date views over client records."""

    def __init__(
        self,
        clients: Repository[Client] | None = None,
        history: Repository[ServiceHistory] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize client service.

        Args:
            clients: Client repository (in-memory if omitted)
            history: Service history repository (in-memory if omitted)
            clock: Source of "now"
        """
        self.clients = clients if clients is not None else InMemoryRepository()
        self.history = history if history is not None else InMemoryRepository()
        self.clock = clock
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------
    def create(self, client: Client) -> Client:
        now = self.clock()
        stored = client.model_copy(update={"created_at": now, "updated_at": now})
        with self._lock:
            self.clients.upsert(stored)
        logger.info("client_created", client_id=stored.id, name=stored.name)
        return stored

    def get(self, client_id: str) -> Client:
        client = self.clients.get(client_id)
        if client is None:
            raise ClientNotFoundError(f"Client not found: {client_id}")
        return client

    def list(self) -> list[Client]:
        return sorted(self.clients.list(), key=lambda c: c.name.lower())

    def update(self, client_id: str, **changes: Any) -> Client:
        """Apply field changes with full validation.

        Raises:
            ClientNotFoundError: Unknown client ID
            ValidationError: A changed value does not fit the model
        """
        with self._lock:
            client = self.get(client_id)
            data = client.model_dump()
            data.update({k: v for k, v in changes.items() if k not in _PROTECTED_FIELDS})
            data["updated_at"] = self.clock()
            updated = Client.model_validate(data)
            self.clients.upsert(updated)

        logger.info("client_updated", client_id=client_id, fields=sorted(changes))
        return updated

    def delete(self, client_id: str) -> None:
        """Remove a client together with its service history."""
        with self._lock:
            if not self.clients.delete(client_id):
                raise ClientNotFoundError(f"Client not found: {client_id}")
            removed = 0
            for entry in self.history.list():
                if entry.client_id == client_id:
                    self.history.delete(entry.id)
                    removed += 1
        logger.info("client_deleted", client_id=client_id, history_removed=removed)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def search(self, filters: ClientSearchFilters | None = None, **criteria: Any) -> list[Client]:
        """Clients matching every given criterion.

        Name matches the display or business name, city is a substring
        match, both case-insensitive. With service_overdue, clients whose
        next inspection is still in the future are dropped; clients with no
        next date are kept.
        """
        filters = filters or ClientSearchFilters(**criteria)
        now = self.clock()
        name = (filters.name or "").lower()
        city = (filters.city or "").lower()

        matches = []
        for client in self.list():
            names = (client.name.lower(), (client.business_name or "").lower())
            if name and not any(name in n for n in names):
                continue
            if city and city not in client.city.lower():
                continue
            if filters.industry and client.industry != filters.industry:
                continue
            if filters.system_type and filters.system_type not in client.system_types:
                continue
            if filters.is_active is not None and client.is_active != filters.is_active:
                continue
            due = client.next_inspection_date
            if filters.service_overdue and due and due > now:
                continue
            matches.append(client)
        return matches

    def find_by_phone(self, phone: str | None) -> Client | None:
        digits = normalize_phone(phone)
        if not digits:
            return None
        for client in self.clients.list():
            if normalize_phone(client.phone) == digits:
                return client
        return None

    def match(self, name: str | None = None, phone: str | None = None) -> Client | None:
        """Resolve a job's free-text client to a record.

        Phone wins. Otherwise the name must equal the display or business
        name, or be its leading word(s) ("Globex" for "Globex Corporation").
        """
        client = self.find_by_phone(phone)
        if client is not None:
            return client

        wanted = (name or "").strip().lower()
        if not wanted:
            return None
        for client in self.list():
            for candidate in (client.name.lower(), (client.business_name or "").lower()):
                if candidate == wanted or candidate.startswith(wanted + " "):
                    return client
        return None

    # ------------------------------------------------------------------
    # Service history
    # ------------------------------------------------------------------
    def add_service(self, entry: ServiceHistory) -> ServiceHistory:
        """Record a visit; inspections roll the client's due dates forward.

        Raises:
            ClientNotFoundError: The entry names an unknown client
        """
        with self._lock:
            client = self.get(entry.client_id)
            self.history.upsert(entry)

            if entry.service_type == ServiceType.INSPECTION:
                next_date = entry.next_service_date or next_due_date(
                    entry.service_date, client.service_frequency
                )
                self.update(
                    client.id,
                    last_inspection_date=entry.service_date,
                    next_inspection_date=next_date,
                )

        logger.info(
            "service_recorded",
            client_id=entry.client_id,
            service_type=str(entry.service_type),
            technician=entry.technician,
        )
        return entry

    def service_history(self, client_id: str) -> list[ServiceHistory]:
        """A client's visits, newest first."""
        entries = [e for e in self.history.list() if e.client_id == client_id]
        return sorted(entries, key=lambda e: e.service_date, reverse=True)

    def recent_service_history(self, days: int = 30) -> list[ServiceHistory]:
        """Visits across all clients within the last N days, newest first."""
        cutoff = self.clock() - timedelta(days=days)
        entries = [e for e in self.history.list() if e.service_date >= cutoff]
        return sorted(entries, key=lambda e: e.service_date, reverse=True)

    # ------------------------------------------------------------------
    # Due dates
    # ------------------------------------------------------------------
    def clients_needing_service(self, days_ahead: int = UPCOMING_WINDOW_DAYS) -> list[Client]:
        """Active clients due within [now, now + days_ahead], soonest first."""
        now = self.clock()
        horizon = now + timedelta(days=days_ahead)
        due = [
            c for c in self.clients.list()
            if c.is_active and c.next_inspection_date and now <= c.next_inspection_date <= horizon
        ]
        return sorted(due, key=lambda c: c.next_inspection_date)

    def overdue_clients(self) -> list[Client]:
        """Active clients whose next inspection date has passed, most overdue first."""
        now = self.clock()
        overdue = [
            c for c in self.clients.list()
            if c.is_active and c.next_inspection_date and c.next_inspection_date < now
        ]
        return sorted(overdue, key=lambda c: c.next_inspection_date)

    def stats(self) -> ClientStats:
        clients = self.clients.list()
        return ClientStats(
            total_clients=len(clients),
            active_clients=sum(1 for c in clients if c.is_active),
            overdue_services=len(self.overdue_clients()),
            upcoming_services=len(self.clients_needing_service(UPCOMING_WINDOW_DAYS)),
            clients_by_industry=dict(Counter(str(c.industry) for c in clients)),
        )
