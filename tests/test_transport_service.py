from decimal import Decimal

import pytest
from sqlalchemy import event
from sqlalchemy.exc import OperationalError
from sqlmodel import select

from social_transport.errors import NotFoundError, PartialFailureError, ValidationError
from social_transport.models.transport import Transport


def _create(services, refs, **overrides):
    person, driver, destination = refs
    fields = dict(
        date="2024-05-06",
        start_time="09:30",
        user_id=person.id,
        driver_id=driver.id,
        destination_id=destination.id,
    )
    fields.update(overrides)
    return services.transports.create(**fields)


def _stored(services):
    with services.db.session() as session:
        return list(session.exec(select(Transport).order_by(Transport.date)).all())


def test_single_transport_round_trip(services, refs):
    person, driver, destination = refs
    [created] = _create(services, refs, end_time="11:00", notes="wheelchair")

    fetched = services.transports.get(created.id)
    assert fetched.date == "2024-05-06"
    assert fetched.start_time == "09:30"
    assert fetched.end_time == "11:00"
    assert fetched.user_id == person.id
    assert fetched.driver_id == driver.id
    assert fetched.destination_id == destination.id
    assert fetched.notes == "wheelchair"
    assert fetched.is_recurring is False
    assert fetched.recurring_type is None


def test_non_recurring_ignores_recurrence_fields(services, refs):
    [created] = _create(services, refs, is_recurring=False, recurring_type="weekly", recurring_end_date="2024-06-01")
    assert created.recurring_type is None
    assert created.recurring_end_date is None
    assert len(_stored(services)) == 1


def test_weekly_series_creates_one_row_per_week(services, refs):
    created = _create(
        services,
        refs,
        date="2024-01-01",
        is_recurring=True,
        recurring_type="weekly",
        recurring_end_date="2024-01-22",
    )

    assert [t.date for t in created] == ["2024-01-01", "2024-01-08", "2024-01-15", "2024-01-22"]
    assert len({t.id for t in created}) == 4
    for row in _stored(services):
        assert row.is_recurring is True
        assert row.recurring_type == "weekly"
        assert row.recurring_end_date == "2024-01-22"
        assert row.start_time == "09:30"


def test_monthly_series_clamps_to_month_end(services, refs):
    _create(
        services,
        refs,
        date="2024-01-31",
        is_recurring=True,
        recurring_type="monthly",
        recurring_end_date="2024-03-31",
    )
    assert [t.date for t in _stored(services)] == ["2024-01-31", "2024-02-29", "2024-03-31"]


def test_start_time_is_zero_padded(services, refs):
    [created] = _create(services, refs, start_time="9:30")
    assert created.start_time == "09:30"


@pytest.mark.parametrize("start_time", ["25:00", "9:5", "abc", "12:60", ""])
def test_invalid_start_time_creates_nothing(services, refs, start_time):
    with pytest.raises(ValidationError) as exc:
        _create(services, refs, start_time=start_time)
    assert exc.value.message == "invalid time format, expected HH:MM"
    assert _stored(services) == []


def test_invalid_end_time_creates_nothing(services, refs):
    with pytest.raises(ValidationError):
        _create(services, refs, end_time="7pm")
    assert _stored(services) == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"is_recurring": True, "recurring_type": "weekly"},
        {"is_recurring": True, "recurring_end_date": "2024-06-01"},
        {"is_recurring": True, "recurring_type": "weekly", "recurring_end_date": "2024-05-01"},
        {"is_recurring": True, "recurring_type": "yearly", "recurring_end_date": "2024-06-01"},
        {"date": "06/05/2024"},
    ],
)
def test_invalid_series_creates_nothing(services, refs, overrides):
    with pytest.raises(ValidationError):
        _create(services, refs, **overrides)
    assert _stored(services) == []


@pytest.mark.parametrize(
    "field, message",
    [
        ("user_id", "user not found: missing"),
        ("driver_id", "driver not found: missing"),
        ("destination_id", "destination not found: missing"),
    ],
)
def test_unknown_reference_creates_nothing(services, refs, field, message):
    with pytest.raises(ValidationError) as exc:
        _create(services, refs, **{field: "missing"})
    assert exc.value.message == message
    assert _stored(services) == []


def test_store_failure_mid_series_keeps_nothing(services, refs):
    calls = []

    def fail_third_insert(mapper, connection, target):
        calls.append(target.date)
        if len(calls) == 3:
            raise OperationalError("INSERT INTO transport", {}, Exception("disk I/O error"))

    event.listen(Transport, "before_insert", fail_third_insert)
    try:
        with pytest.raises(PartialFailureError) as exc:
            _create(
                services,
                refs,
                date="2024-01-01",
                is_recurring=True,
                recurring_type="weekly",
                recurring_end_date="2024-01-29",
            )
    finally:
        event.remove(Transport, "before_insert", fail_third_insert)

    assert len(exc.value.created_ids) == 2
    assert exc.value.rolled_back is True
    assert isinstance(exc.value.cause, OperationalError)
    assert _stored(services) == []


def test_editing_one_occurrence_leaves_siblings(services, refs):
    person, driver, destination = refs
    series = _create(
        services,
        refs,
        date="2024-01-01",
        is_recurring=True,
        recurring_type="weekly",
        recurring_end_date="2024-01-15",
    )

    updated = services.transports.update(
        series[1].id,
        date="2024-01-09",
        start_time="14:00",
        user_id=person.id,
        driver_id=driver.id,
        destination_id=destination.id,
        is_recurring=True,
        recurring_type="weekly",
        recurring_end_date="2024-01-15",
    )
    assert updated.date == "2024-01-09"
    assert updated.start_time == "14:00"

    services.transports.delete(series[2].id)

    rows = _stored(services)
    assert [(t.date, t.start_time) for t in rows] == [("2024-01-01", "09:30"), ("2024-01-09", "14:00")]


def test_update_and_delete_unknown_transport(services, refs):
    person, driver, destination = refs
    with pytest.raises(NotFoundError):
        services.transports.update(
            "missing",
            date="2024-01-01",
            start_time="10:00",
            user_id=person.id,
            driver_id=driver.id,
            destination_id=destination.id,
        )
    with pytest.raises(NotFoundError):
        services.transports.delete("missing")


def test_list_is_latest_first_and_filters_inclusive(services, refs):
    _create(services, refs, date="2024-03-01", start_time="08:00")
    _create(services, refs, date="2024-03-01", start_time="15:00")
    _create(services, refs, date="2024-03-05", start_time="10:00")
    _create(services, refs, date="2024-03-09", start_time="10:00")

    listed = [(t.date, t.start_time) for t in services.transports.list()]
    assert listed == [
        ("2024-03-09", "10:00"),
        ("2024-03-05", "10:00"),
        ("2024-03-01", "15:00"),
        ("2024-03-01", "08:00"),
    ]

    window = services.transports.list(date_from="2024-03-01", date_to="2024-03-05")
    assert [t.date for t in window] == ["2024-03-05", "2024-03-01", "2024-03-01"]


def test_list_filters_by_driver(services, refs):
    other_driver = services.drivers.create(name="Paolo Neri")
    _create(services, refs)
    _create(services, refs, driver_id=other_driver.id)

    listed = services.transports.list(driver_id=other_driver.id)
    assert [t.driver_id for t in listed] == [other_driver.id]


def test_deleting_destination_removes_its_transports(services, refs):
    other = services.destinations.create(name="ASL Centro", address="Via Roma 1", cost=Decimal("8.00"))
    _create(services, refs, is_recurring=True, recurring_type="daily", recurring_end_date="2024-05-08")
    kept = _create(services, refs, destination_id=other.id)

    services.destinations.delete(refs[2].id)

    assert [t.id for t in _stored(services)] == [kept[0].id]


def test_deleting_person_removes_their_transports(services, refs):
    _create(services, refs)
    services.persons.delete(refs[0].id)
    assert _stored(services) == []


def _update(services, refs, transport_id, **overrides):
    person, driver, destination = refs
    fields = dict(
        date="2024-05-06",
        start_time="09:30",
        user_id=person.id,
        driver_id=driver.id,
        destination_id=destination.id,
    )
    fields.update(overrides)
    return services.transports.update(transport_id, **fields)


@pytest.mark.parametrize(
    "overrides",
    [
        {"is_recurring": True},
        {"is_recurring": True, "recurring_type": "weekly"},
        {"is_recurring": True, "recurring_end_date": "2024-06-01"},
        {"is_recurring": True, "recurring_type": "yearly", "recurring_end_date": "2024-06-01"},
    ],
)
def test_update_requires_complete_recurrence(services, refs, overrides):
    [created] = _create(services, refs)
    with pytest.raises(ValidationError):
        _update(services, refs, created.id, **overrides)
    assert services.transports.get(created.id).is_recurring is False


def test_update_to_single_clears_recurrence(services, refs):
    series = _create(
        services,
        refs,
        date="2024-01-01",
        is_recurring=True,
        recurring_type="weekly",
        recurring_end_date="2024-01-15",
    )
    updated = _update(
        services,
        refs,
        series[0].id,
        date="2024-01-01",
        is_recurring=False,
        recurring_type="weekly",
        recurring_end_date="2024-01-15",
    )
    assert updated.is_recurring is False
    assert updated.recurring_type is None
    assert updated.recurring_end_date is None
