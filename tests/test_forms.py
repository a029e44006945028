from datetime import date, datetime

import pytest

from nutricion.forms import (
    ACTIVITY_LEVELS,
    BODY_FAT_RANGE,
    DEFAULT_BIRTH_DATE,
    GENDERS,
    GOALS,
    HEIGHT_RANGE,
    INVALID_METRIC_MESSAGE,
    INVALID_USER_MESSAGE,
    USER_TABLE_HEADERS,
    WEIGHT_RANGE,
    MetricForm,
    SpinRange,
    UserForm,
    ValidationError,
    filter_users,
    user_table_rows,
)
from nutricion.models import HealthMetric, User


def _user(uid, first, last1, last2=""):
    return User(
        first_name=first,
        last_name1=last1,
        last_name2=last2,
        gender="Otro",
        birth_date=date(1990, 5, 5),
        activity_level="Ligero",
        goal="Otro",
        id=uid,
    )


@pytest.fixture
def users():
    return [
        _user(1, "Ana", "García", "López"),
        _user(12, "Luis", "Pérez", ""),
        _user(3, "Marta", "Ruiz", "Gómez"),
    ]


def test_spin_range_clamps_to_bounds():
    assert WEIGHT_RANGE.clamp(500) == 300.0
    assert WEIGHT_RANGE.clamp(0.5) == 1.0
    assert HEIGHT_RANGE.clamp(10) == 50.0
    assert BODY_FAT_RANGE.clamp(-5) == 0.0


def test_spin_range_rounds_to_decimals():
    value = WEIGHT_RANGE.clamp(70.123456)
    assert round(value, 2) == value
    assert abs(value - 70.123456) < 0.01


def test_spin_range_format_includes_suffix():
    assert WEIGHT_RANGE.format(70).endswith(" kg")
    custom = SpinRange(0.0, 10.0, 1, 0.5, " u")
    assert custom.format(3) == "3.0 u"


def test_metric_form_defaults_start_at_range_minimum():
    form = MetricForm()
    assert form.weight == WEIGHT_RANGE.minimum
    assert form.height == HEIGHT_RANGE.minimum
    assert form.body_fat_percentage == 0.0
    assert form.date == date.today()


def test_metric_form_clamps_on_creation():
    form = MetricForm(weight=1000, height=1000, body_fat_percentage=150)
    assert form.weight == WEIGHT_RANGE.maximum
    assert form.height == HEIGHT_RANGE.maximum
    assert form.body_fat_percentage == BODY_FAT_RANGE.maximum


def test_metric_form_validate_rejects_non_positive():
    form = MetricForm(weight=70, height=170)
    form.weight = 0
    with pytest.raises(ValidationError) as info:
        form.validate()
    assert str(info.value) == INVALID_METRIC_MESSAGE


def test_metric_form_to_metric_builds_new_metric():
    created = datetime(2024, 3, 1, 10, 30)
    form = MetricForm(
        date=date(2024, 3, 1),
        weight=80,
        height=180,
        body_fat_percentage=20,
        muscle_mass_percentage=40,
        notes="control",
    )
    metric = form.to_metric(7, created)
    assert metric.id == -1
    assert metric.user_id == 7
    assert metric.date == date(2024, 3, 1)
    assert metric.weight == 80
    assert metric.height == 180
    assert metric.notes == "control"
    assert metric.created_at == created
    assert metric.bmi == HealthMetric(weight=80, height=180).calculate_bmi()


def test_metric_form_to_metric_defaults_created_at_to_now():
    before = datetime.now()
    metric = MetricForm(weight=70, height=170).to_metric(1)
    assert before <= metric.created_at <= datetime.now()


def test_metric_form_apply_to_keeps_identity():
    stored = HealthMetric(
        id=5,
        user_id=2,
        date=date(2023, 1, 1),
        weight=90,
        height=175,
        created_at=datetime(2023, 1, 1, 8, 0),
    )
    form = MetricForm.from_metric(stored)
    assert form.weight == 90
    assert form.date == date(2023, 1, 1)
    form.weight = 85
    form.notes = "mejor"
    result = form.apply_to(stored)
    assert result is stored
    assert stored.id == 5
    assert stored.user_id == 2
    assert stored.weight == 85
    assert stored.notes == "mejor"
    assert stored.created_at == datetime(2023, 1, 1, 8, 0)
    assert stored.bmi == HealthMetric(weight=85, height=175).calculate_bmi()


def test_user_form_defaults_match_choices():
    form = UserForm()
    assert form.gender == GENDERS[0]
    assert form.activity_level == ACTIVITY_LEVELS[0]
    assert form.goal == GOALS[0]
    assert form.birth_date == DEFAULT_BIRTH_DATE == date(2000, 1, 1)


def test_user_form_to_user_trims_names():
    form = UserForm(first_name="  Ana ", last_name1=" García", last_name2=" López ")
    user = form.to_user()
    assert user.first_name == "Ana"
    assert user.last_name1 == "García"
    assert user.last_name2 == "López"
    assert user.id == -1
    assert user.created_at is None


@pytest.mark.parametrize(
    "changes",
    [
        {"first_name": "   "},
        {"last_name1": ""},
        {"gender": ""},
        {"birth_date": None},
        {"activity_level": ""},
    ],
)
def test_user_form_requires_fields(changes):
    values = {"first_name": "Ana", "last_name1": "García"}
    values.update(changes)
    with pytest.raises(ValidationError) as info:
        UserForm(**values).to_user()
    assert str(info.value) == INVALID_USER_MESSAGE


def test_user_form_second_surname_optional():
    user = UserForm(first_name="Ana", last_name1="García").to_user()
    assert user.last_name2 == ""


def test_filter_users_empty_text_keeps_all(users):
    assert filter_users(users, "") == users


def test_filter_users_ignores_case(users):
    assert [u.id for u in filter_users(users, "gar")] == [1]
    assert [u.id for u in filter_users(users, "MARTA")] == [3]


def test_filter_users_matches_second_surname_and_id(users):
    assert [u.id for u in filter_users(users, "gómez")] == [3]
    assert [u.id for u in filter_users(users, "1")] == [1, 12]


def test_filter_users_no_match(users):
    assert filter_users(users, "zzz") == []


def test_user_table_rows(users):
    rows = user_table_rows(users)
    assert len(rows) == len(users)
    assert all(len(row) == len(USER_TABLE_HEADERS) for row in rows)
    assert rows[0] == ("1", "Ana", "García", "López")
    assert rows[1][0] == "12"