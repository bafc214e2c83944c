"""Client records: CRUD, search, service history and due dates."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from firespect.core.clients.service import (
    ClientNotFoundError,
    ClientService,
    next_due_date,
    normalize_phone,
)
from firespect.core.models.client import Client, ClientSearchFilters, ServiceHistory

NOW = datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)


def _service():
    return ClientService(clock=lambda: NOW)


def _client(name="Globex Corporation", **kwargs):
    kwargs.setdefault("city", "Springfield")
    return Client(name=name, **kwargs)


def _visit(client_id, when=NOW, **kwargs):
    return ServiceHistory(client_id=client_id, service_date=when, technician="Sarah Davis", **kwargs)


def test_create_stamps_timestamps_and_get_returns_it():
    service = _service()
    client = service.create(_client(phone="555.867.5309"))

    assert client.id.startswith("client-")
    assert client.created_at == NOW
    assert client.updated_at == NOW
    assert service.get(client.id).model_dump() == client.model_dump()


def test_get_unknown_client_raises():
    with pytest.raises(ClientNotFoundError, match="client-missing"):
        _service().get("client-missing")


def test_list_is_sorted_by_name_case_insensitive():
    service = _service()
    for name in ("harbor office", "Acme Tower", "Globex Corporation"):
        service.create(_client(name))

    assert [c.name for c in service.list()] == ["Acme Tower", "Globex Corporation", "harbor office"]


def test_update_validates_and_keeps_identity():
    clock = [NOW]
    service = ClientService(clock=lambda: clock[0])
    client = service.create(_client())
    clock[0] = NOW + timedelta(hours=1)

    updated = service.update(client.id, id="client-other", city="Shelbyville", industry="industrial")

    assert updated.id == client.id
    assert updated.city == "Shelbyville"
    assert updated.industry == "industrial"
    assert updated.created_at == NOW
    assert updated.updated_at == NOW + timedelta(hours=1)

    with pytest.raises(ValidationError):
        service.update(client.id, service_frequency="fortnightly")
    assert service.get(client.id).service_frequency == "annual"


def test_delete_removes_client_and_history():
    service = _service()
    kept = service.create(_client("Acme Tower"))
    gone = service.create(_client())
    service.add_service(_visit(kept.id))
    service.add_service(_visit(gone.id))

    service.delete(gone.id)

    assert [c.id for c in service.list()] == [kept.id]
    assert service.service_history(gone.id) == []
    assert len(service.service_history(kept.id)) == 1
    with pytest.raises(ClientNotFoundError):
        service.delete(gone.id)


def test_search_filters():
    service = _service()
    globex = service.create(
        _client(business_name="Globex Holdings LLC", industry="industrial", system_types=["fire_pump"])
    )
    acme = service.create(_client("Acme Tower", city="Capital City", system_types=["sprinkler"]))
    diner = service.create(
        _client("Lou's Diner", city="capital city", system_types=["kitchen_hood"], is_active=False)
    )

    def ids(**criteria):
        return [c.id for c in service.search(**criteria)]

    assert ids() == [acme.id, globex.id, diner.id]
    assert ids(name="holdings") == [globex.id]
    assert ids(name="ACME") == [acme.id]
    assert ids(city="capital") == [acme.id, diner.id]
    assert ids(industry="industrial") == [globex.id]
    assert ids(system_type="kitchen_hood") == [diner.id]
    assert ids(is_active=True) == [acme.id, globex.id]
    assert ids(city="capital", is_active=False) == [diner.id]
    assert [c.id for c in service.search(ClientSearchFilters(name="tower"))] == [acme.id]


def test_search_overdue_keeps_clients_without_a_date():
    service = _service()
    late = service.create(_client("Acme Tower", next_inspection_date=NOW - timedelta(days=3)))
    service.create(_client("Globex Corporation", next_inspection_date=NOW + timedelta(days=30)))
    undated = service.create(_client("Harbor Office"))

    assert [c.id for c in service.search(service_overdue=True)] == [late.id, undated.id]


def test_phone_lookup_ignores_formatting():
    service = _service()
    client = service.create(_client(phone="(555) 867-5309"))

    assert normalize_phone("555.867.5309") == "5558675309"
    assert service.find_by_phone("555-867-5309").id == client.id
    assert service.find_by_phone("555 000 0000") is None
    assert service.find_by_phone("") is None
    assert service.find_by_phone(None) is None


def test_match_prefers_phone_then_leading_name():
    service = _service()
    globex = service.create(_client(phone="555.867.5309"))
    acme = service.create(_client("Acme Tower", business_name="Acme Properties Inc"))

    assert service.match("Acme Tower", "555 867 5309").id == globex.id
    assert service.match("Globex").id == globex.id
    assert service.match("acme properties").id == acme.id
    assert service.match("Glob") is None
    assert service.match("Initech") is None
    assert service.match("", None) is None


@pytest.mark.parametrize(
    "after, frequency, expected",
    [
        (datetime(2026, 1, 31), "monthly", datetime(2026, 2, 28)),
        (datetime(2026, 11, 30), "quarterly", datetime(2027, 2, 28)),
        (datetime(2026, 10, 18), "semi_annual", datetime(2027, 4, 18)),
        (datetime(2028, 2, 29), "annual", datetime(2029, 2, 28)),
        (datetime(2026, 10, 18), "as_needed", None),
    ],
)
def test_next_due_date(after, frequency, expected):
    assert next_due_date(after, frequency) == expected


def test_inspection_rolls_due_dates_from_frequency():
    service = _service()
    client = service.create(_client(service_frequency="quarterly"))

    service.add_service(_visit(client.id, findings="All risers within range"))

    stored = service.get(client.id)
    assert stored.last_inspection_date == NOW
    assert stored.next_inspection_date == datetime(2027, 1, 18, 8, 0, tzinfo=timezone.utc)


def test_inspection_uses_technician_next_date_when_given():
    service = _service()
    client = service.create(_client())
    follow_up = NOW + timedelta(days=14)

    service.add_service(_visit(client.id, next_service_date=follow_up, compliance_status="requires_attention"))

    assert service.get(client.id).next_inspection_date == follow_up


def test_repair_leaves_inspection_dates_alone():
    service = _service()
    due = NOW + timedelta(days=90)
    client = service.create(_client(next_inspection_date=due))

    service.add_service(_visit(client.id, service_type="repair", cost=450.0))

    stored = service.get(client.id)
    assert stored.last_inspection_date is None
    assert stored.next_inspection_date == due


def test_service_for_unknown_client_is_rejected():
    service = _service()

    with pytest.raises(ClientNotFoundError):
        service.add_service(_visit("client-missing"))
    assert service.recent_service_history() == []


def test_history_views_are_newest_first():
    service = _service()
    client = service.create(_client("Acme Tower", service_frequency="monthly"))
    other = service.create(_client())
    old = service.add_service(_visit(client.id, when=NOW - timedelta(days=40)))
    recent = service.add_service(_visit(client.id, when=NOW - timedelta(days=10)))
    elsewhere = service.add_service(_visit(other.id, when=NOW - timedelta(days=2)))

    assert [e.id for e in service.service_history(client.id)] == [recent.id, old.id]
    assert [e.id for e in service.recent_service_history(30)] == [elsewhere.id, recent.id]


def test_needing_service_and_overdue():
    service = _service()
    soon = service.create(_client("Acme Tower", next_inspection_date=NOW + timedelta(days=2)))
    edge = service.create(_client("Bravo Plant", next_inspection_date=NOW + timedelta(days=7)))
    service.create(_client("Charlie Mall", next_inspection_date=NOW + timedelta(days=8)))
    late = service.create(_client("Delta Depot", next_inspection_date=NOW - timedelta(days=1)))
    later = service.create(_client("Echo Works", next_inspection_date=NOW - timedelta(days=20)))
    service.create(_client("Foxtrot Inn", next_inspection_date=NOW - timedelta(days=5), is_active=False))
    service.create(_client("Golf Club"))

    assert [c.id for c in service.clients_needing_service()] == [soon.id, edge.id]
    assert [c.id for c in service.clients_needing_service(1)] == []
    assert [c.id for c in service.overdue_clients()] == [later.id, late.id]


def test_stats():
    service = _service()
    service.create(_client("Acme Tower", next_inspection_date=NOW + timedelta(days=3)))
    service.create(_client("Bravo Plant", industry="industrial", next_inspection_date=NOW - timedelta(days=3)))
    service.create(_client("Charlie School", industry="institutional", is_active=False))

    stats = service.stats()

    assert stats.total_clients == 3
    assert stats.active_clients == 2
    assert stats.overdue_services == 1
    assert stats.upcoming_services == 1
    assert stats.clients_by_industry == {"commercial": 1, "industrial": 1, "institutional": 1}


def test_naive_dates_are_read_as_utc():
    client = _client(next_inspection_date=datetime(2026, 11, 1, 9))

    assert client.next_inspection_date == datetime(2026, 11, 1, 9, tzinfo=timezone.utc)
