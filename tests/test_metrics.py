from datetime import date, datetime

import pytest

from nutricion.database import DatabaseError, DatabaseManager
from nutricion.metrics import HealthMetricManager
from nutricion.models import HealthMetric, User
from nutricion.users import UserManager


@pytest.fixture
def database(tmp_path):
    db = DatabaseManager()
    db.initialize_sqlite(tmp_path / "metrics.db")
    yield db
    db.close()


@pytest.fixture
def manager(database):
    return HealthMetricManager(database)


@pytest.fixture
def user_id(database):
    user = User(
        first_name="Ana",
        last_name1="Lopez",
        last_name2="",
        gender="Femenino",
        birth_date=date(1990, 6, 15),
        activity_level="Ligero",
        goal="Mantener peso",
    )
    return UserManager(database).add_user(user)


def make_metric(user_id, day=date(2024, 3, 1), created=datetime(2024, 3, 1, 9, 0)):
    metric = HealthMetric(
        user_id=user_id,
        date=day,
        weight=70.5,
        height=172.0,
        body_fat_percentage=21.25,
        muscle_mass_percentage=40.5,
        notes="first visit",
        created_at=created,
    )
    metric.calculate_bmi()
    return metric


def test_add_assigns_id(manager, user_id):
    metric = make_metric(user_id)
    new_id = manager.add_health_metric(metric)
    assert new_id > 0
    assert metric.id == new_id


def test_get_health_metric_round_trip(manager, user_id):
    metric = make_metric(user_id)
    manager.add_health_metric(metric)
    loaded = manager.get_health_metric(metric.id)
    assert loaded == metric


def test_get_missing_metric_returns_none(manager):
    assert manager.get_health_metric(123) is None


def test_metrics_ordered_by_date_then_creation(manager, user_id):
    later = make_metric(user_id, date(2024, 5, 1), datetime(2024, 5, 1, 8, 0))
    second = make_metric(user_id, date(2024, 2, 1), datetime(2024, 2, 1, 12, 0))
    first = make_metric(user_id, date(2024, 2, 1), datetime(2024, 2, 1, 7, 0))
    for metric in (later, second, first):
        manager.add_health_metric(metric)
    ids = [m.id for m in manager.get_health_metrics_by_user_id(user_id)]
    assert ids == [first.id, second.id, later.id]


def test_metrics_filtered_by_user(manager, user_id):
    manager.add_health_metric(make_metric(user_id))
    assert manager.get_health_metrics_by_user_id(user_id + 1) == []
    assert len(manager.get_health_metrics_by_user_id(user_id)) == 1


def test_update_health_metric_keeps_created_at(manager, user_id):
    metric = make_metric(user_id)
    manager.add_health_metric(metric)
    metric.weight = 68.0
    metric.notes = "after diet"
    metric.created_at = datetime(2030, 1, 1)
    metric.calculate_bmi()
    manager.update_health_metric(metric)
    loaded = manager.get_health_metric(metric.id)
    assert loaded.weight == 68.0
    assert loaded.notes == "after diet"
    assert loaded.bmi == metric.bmi
    assert loaded.created_at == datetime(2024, 3, 1, 9, 0)


@pytest.mark.parametrize("bad_id", [0, -1])
def test_update_invalid_id(manager, user_id, bad_id):
    metric = make_metric(user_id)
    metric.id = bad_id
    with pytest.raises(ValueError):
        manager.update_health_metric(metric)


def test_update_missing_metric(manager, user_id):
    metric = make_metric(user_id)
    metric.id = 55
    with pytest.raises(LookupError):
        manager.update_health_metric(metric)


def test_delete_health_metric(manager, user_id):
    metric = make_metric(user_id)
    manager.add_health_metric(metric)
    manager.delete_health_metric(metric.id)
    assert manager.get_health_metric(metric.id) is None


@pytest.mark.parametrize("bad_id", [0, -3])
def test_delete_invalid_id(manager, bad_id):
    with pytest.raises(ValueError):
        manager.delete_health_metric(bad_id)


def test_delete_missing_metric(manager):
    with pytest.raises(LookupError):
        manager.delete_health_metric(8)


def test_deleting_user_removes_metrics(database, manager, user_id):
    manager.add_health_metric(make_metric(user_id))
    UserManager(database).delete_user(user_id)
    assert manager.get_health_metrics_by_user_id(user_id) == []


def test_metric_without_date_fails(manager, user_id):
    metric = make_metric(user_id)
    metric.date = None
    with pytest.raises(DatabaseError):
        manager.add_health_metric(metric)


def test_metric_without_created_at_stores_none(manager, user_id):
    metric = make_metric(user_id, created=None)
    manager.add_health_metric(metric)
    loaded = manager.get_health_metric(metric.id)
    assert loaded.created_at is None
    assert loaded.weight == metric.weight