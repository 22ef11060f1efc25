from datetime import date, time

import pytest

from dockslot.core.errors import DockSlotError
from dockslot.db.models.availability import AvailabilityWindow, BlackoutDate
from dockslot.schemas.availability import AvailabilityWindowInput
from dockslot.services import schedule

from conftest import make_captain


def week(start="07:00", end="19:00", inactive=()):
    return [
        AvailabilityWindowInput(day_of_week=day, start_time=start, end_time=end, is_active=day not in inactive)
        for day in range(7)
    ]


def error(fn, *args):
    with pytest.raises(DockSlotError) as exc:
        fn(*args)
    return exc.value


# --------------------------
# Weekly windows
# --------------------------

def test_upsert_replaces_the_week_in_place(db, captain):
    first = schedule.upsert_availability_windows(db, captain, week())
    second = schedule.upsert_availability_windows(db, captain, week(start="08:30", inactive={3}))

    assert db.query(AvailabilityWindow).filter(AvailabilityWindow.owner_id == captain.id).count() == 7
    assert [w.day_of_week for w in second] == list(range(7))
    assert {w.id for w in first} == {w.id for w in second}
    assert second[1].start_time == time(8, 30)
    assert second[3].is_active is False


def test_upsert_is_idempotent(db, captain):
    schedule.upsert_availability_windows(db, captain, week())
    rows = schedule.upsert_availability_windows(db, captain, week())

    assert len(rows) == 7
    assert all(w.start_time == time(7, 0) and w.end_time == time(19, 0) for w in rows)


def test_partial_week_is_rejected(db, captain):
    err = error(schedule.upsert_availability_windows, db, captain, week()[:6])

    assert err.code == "VALIDATION"
    assert err.message == "Must provide availability for all 7 days of the week"


def test_duplicate_day_is_rejected(db, captain):
    windows = week()
    windows[6] = AvailabilityWindowInput(day_of_week=0, start_time="07:00", end_time="19:00")

    err = error(schedule.upsert_availability_windows, db, captain, windows)
    assert err.code == "VALIDATION"
    assert "Sunday" in err.message


def test_day_out_of_range_is_rejected(db, captain):
    windows = week()
    windows[6] = AvailabilityWindowInput(day_of_week=7, start_time="07:00", end_time="19:00")

    assert error(schedule.upsert_availability_windows, db, captain, windows).code == "VALIDATION"


@pytest.mark.parametrize(
    "start, end, fragment",
    [
        ("19:00", "07:00", "End time must be after start time"),
        ("07:00", "07:00", "End time must be after start time"),
        ("7am", "19:00", "Invalid start time format"),
        ("07:00", "25:00", "Invalid end time format"),
    ],
)
def test_bad_times_on_active_day_are_rejected(db, captain, start, end, fragment):
    windows = week()
    windows[2] = AvailabilityWindowInput(day_of_week=2, start_time=start, end_time=end)

    err = error(schedule.upsert_availability_windows, db, captain, windows)
    assert err.code == "VALIDATION"
    assert err.message == f"Tuesday: {fragment}"


def test_inactive_day_may_carry_placeholder_times(db, captain):
    windows = week()
    windows[2] = AvailabilityWindowInput(day_of_week=2, start_time="", end_time="", is_active=False)

    rows = schedule.upsert_availability_windows(db, captain, windows)
    assert rows[2].is_active is False


def test_new_captain_gets_default_week(db):
    captain = make_captain(db)

    assert schedule.ensure_availability_exists(db, captain.id) is True
    assert schedule.ensure_availability_exists(db, captain.id) is False

    rows = schedule.get_availability_windows(db, captain)
    assert len(rows) == 7
    assert [w.is_active for w in rows] == [True, False, True, True, True, True, True]
    assert all(w.start_time == time(6, 0) and w.end_time == time(21, 0) for w in rows)


def test_default_week_fills_only_missing_days(db):
    captain = make_captain(db)
    db.add(AvailabilityWindow(owner_id=captain.id, day_of_week=1, start_time=time(9), end_time=time(12)))
    db.commit()

    created = schedule.create_default_availability(db, captain.id)

    assert len(created) == 6
    monday = db.query(AvailabilityWindow).filter_by(owner_id=captain.id, day_of_week=1).one()
    assert monday.start_time == time(9)
    assert monday.is_active is True


def test_default_week_rejects_bad_id(db):
    assert error(schedule.create_default_availability, db, "not-a-uuid").code == "VALIDATION"


# --------------------------
# Blackout dates
# --------------------------

def test_blackout_date_and_duplicate(db, captain):
    blackout = schedule.create_blackout_date(db, captain, date(2025, 7, 4), "  Holiday ")

    assert blackout.reason == "Holiday"
    assert error(schedule.create_blackout_date, db, captain, date(2025, 7, 4), None).code == "DUPLICATE"


def test_blackout_reason_is_truncated(db, captain):
    blackout = schedule.create_blackout_date(db, captain, date(2025, 7, 4), "x" * 600)

    assert len(blackout.reason) == 500


def test_blackout_range_skips_existing_days(db, captain):
    schedule.create_blackout_date(db, captain, date(2025, 8, 2), "Tournament")

    created = schedule.create_blackout_range(db, captain, date(2025, 8, 1), date(2025, 8, 5), "Vacation")

    assert [b.blackout_date for b in created] == [date(2025, 8, 1), date(2025, 8, 3), date(2025, 8, 4), date(2025, 8, 5)]
    kept = db.query(BlackoutDate).filter_by(owner_id=captain.id, blackout_date=date(2025, 8, 2)).one()
    assert kept.reason == "Tournament"


def test_blackout_range_all_existing_is_duplicate(db, captain):
    schedule.create_blackout_range(db, captain, date(2025, 8, 1), date(2025, 8, 3))

    err = error(schedule.create_blackout_range, db, captain, date(2025, 8, 1), date(2025, 8, 3), None)
    assert err.code == "DUPLICATE"


def test_blackout_range_limits(db, captain):
    assert error(schedule.create_blackout_range, db, captain, date(2025, 8, 5), date(2025, 8, 1), None).code == "VALIDATION"

    err = error(schedule.create_blackout_range, db, captain, date(2025, 1, 1), date(2025, 3, 3), None)
    assert err.code == "VALIDATION"
    assert "60 days" in err.message

    created = schedule.create_blackout_range(db, captain, date(2025, 1, 1), date(2025, 3, 2))
    assert len(created) == 61


def test_list_blackouts_by_range(db, captain):
    for day in (1, 10, 20):
        schedule.create_blackout_date(db, captain, date(2025, 9, day))

    listed = schedule.list_blackout_dates(db, captain, date(2025, 9, 5), date(2025, 9, 20))
    assert [b.blackout_date.day for b in listed] == [10, 20]


def test_delete_blackout_checks_owner(db, captain):
    blackout = schedule.create_blackout_date(db, captain, date(2025, 7, 4))
    other = make_captain(db, email="other@example.com")

    assert error(schedule.delete_blackout_date, db, other, str(blackout.id)).code == "UNAUTHORIZED"
    assert error(schedule.delete_blackout_date, db, captain, "nope").code == "VALIDATION"

    schedule.delete_blackout_date(db, captain, str(blackout.id))
    assert db.query(BlackoutDate).count() == 0
    assert error(schedule.delete_blackout_date, db, captain, str(blackout.id)).code == "NOT_FOUND"
