from datetime import timedelta

import pytest

from conftest import NOW
from errors import AuthorizationError, NotFoundError, ValidationError
from models import NoiseReport, QuietZone, ZoneRating
from stores import ReportStore, ZoneStore


def test_add_report_returns_persisted_row(db):
    report = ReportStore(db).add(
        {
            "latitude": 11.0168,
            "longitude": 76.9558,
            "decibel_level": 85,
            "noise_category": "high",
            "timestamp": "2024-01-15T10:30:00",
        },
        reporter_id="user-1",
    )
    assert report.id
    assert report.created_at is not None
    assert report.user_id == "user-1"
    assert db.query(NoiseReport).count() == 1


def test_get_missing_report(db):
    with pytest.raises(NotFoundError):
        ReportStore(db).get("nope")


def test_find_filters_and_pages(db, make_report):
    make_report(city="chennai", noise_category="high", noise_source="Heavy Traffic", timestamp=NOW - timedelta(hours=1))
    make_report(city="chennai", noise_category="low", noise_source="Park", timestamp=NOW - timedelta(hours=2))
    make_report(city="chennai", noise_category="high", noise_source="Construction", timestamp=NOW - timedelta(hours=3))
    make_report(city="delhi", noise_category="high", noise_source="Traffic", timestamp=NOW - timedelta(hours=4))
    store = ReportStore(db)

    reports, total = store.find(city="chennai")
    assert total == 3
    assert [r.noise_source for r in reports] == ["Heavy Traffic", "Park", "Construction"]

    reports, total = store.find(city="chennai", category="high")
    assert total == 2

    reports, total = store.find(source="Traffic")
    assert {r.city for r in reports} == {"chennai", "delhi"}

    reports, total = store.find(since=NOW - timedelta(hours=2, minutes=30))
    assert total == 2

    reports, total = store.find(limit=2, offset=1)
    assert total == 4
    assert [r.noise_source for r in reports] == ["Park", "Construction"]


@pytest.mark.parametrize("kwargs", [{"limit": 0}, {"limit": 1001}, {"offset": -1}, {"category": "loud"}])
def test_find_rejects_bad_arguments(db, kwargs):
    with pytest.raises(ValidationError):
        ReportStore(db).find(**kwargs)


def test_only_the_reporter_can_delete(db, make_report):
    report = make_report(user_id="owner")
    anonymous = make_report(user_id=None)
    store = ReportStore(db)

    with pytest.raises(AuthorizationError):
        store.delete(report.id, "someone-else")
    with pytest.raises(AuthorizationError):
        store.delete(anonymous.id, "owner")

    store.delete(report.id, "owner")
    with pytest.raises(NotFoundError):
        store.get(report.id)


def test_zone_find_orders_by_rating(db, make_zone):
    make_zone(name="Park", type="park", rating=4.1)
    make_zone(name="Library", type="library", rating=4.9)
    make_zone(name="Cafe", type="cafe", rating=4.5, city="chennai")
    store = ZoneStore(db)

    assert [z.name for z in store.find()] == ["Library", "Cafe", "Park"]
    assert [z.name for z in store.find(city="chennai")] == ["Cafe"]
    assert [z.name for z in store.find(zone_type="park")] == ["Park"]
    assert len(store.find(limit=1)) == 1
    with pytest.raises(ValidationError):
        store.find(zone_type="mall")


def test_rating_twice_updates_in_place(db, make_zone):
    zone = make_zone()
    store = ZoneStore(db)

    assert store.rate(zone.id, "user-1", 4) == 4.0
    assert store.rate(zone.id, "user-1", 2, "noisier lately") == 2.0

    rows = db.query(ZoneRating).filter(ZoneRating.zone_id == zone.id).all()
    assert len(rows) == 1
    assert rows[0].rating == 2
    assert rows[0].comment == "noisier lately"
    db.refresh(zone)
    assert zone.rating == 2.0


def test_rating_mean_over_all_users(db, make_zone):
    zone = make_zone()
    other = make_zone(name="Other")
    store = ZoneStore(db)

    store.rate(zone.id, "user-1", 4)
    store.rate(zone.id, "user-1", 2)
    store.rate(other.id, "user-1", 1)
    assert store.rate(zone.id, "user-2", 5) == 3.5

    db.refresh(zone)
    assert zone.rating == 3.5
    assert db.query(ZoneRating).filter(ZoneRating.zone_id == zone.id).count() == 2


def test_rate_unknown_zone(db):
    with pytest.raises(NotFoundError):
        ZoneStore(db).rate("missing", "user-1", 3)
    assert db.query(ZoneRating).count() == 0


@pytest.mark.parametrize("value", [0, 6, 3.5])
def test_rate_rejects_out_of_range_values(db, make_zone, value):
    zone = make_zone()
    with pytest.raises(ValidationError):
        ZoneStore(db).rate(zone.id, "user-1", value)
    assert db.query(ZoneRating).count() == 0
    db.refresh(zone)
    assert zone.rating == 0.0


def test_rate_retries_after_concurrent_insert(db, session_factory, make_zone, monkeypatch):
    zone = make_zone()
    store = ZoneStore(db)

    # Another request inserts the same (zone, user) row between our lookup and insert
    real_get_rating = store.get_rating
    calls = []

    def racing_get_rating(zone_id, user_id):
        if not calls:
            calls.append(1)
            other = session_factory()
            other.add(ZoneRating(zone_id=zone_id, user_id=user_id, rating=5))
            other.commit()
            other.close()
            return None
        return real_get_rating(zone_id, user_id)

    monkeypatch.setattr(store, "get_rating", racing_get_rating)

    assert store.rate(zone.id, "user-1", 1) == 1.0
    rows = db.query(ZoneRating).filter(ZoneRating.zone_id == zone.id).all()
    assert [r.rating for r in rows] == [1]


def test_zone_count(db, make_zone):
    make_zone()
    make_zone(city="delhi")
    store = ZoneStore(db)
    assert store.count() == 2
    assert store.count(city="delhi") == 1
    assert store.count(city="mumbai") == 0


def test_add_zone_records_creator(db):
    zone = ZoneStore(db).add(
        {"name": "Lodhi Garden", "type": "park", "latitude": 28.5933, "longitude": 77.2197, "city": "delhi"},
        created_by="user-7",
    )
    assert zone.created_by == "user-7"
    assert db.query(QuietZone).filter(QuietZone.id == zone.id).one().city == "delhi"
