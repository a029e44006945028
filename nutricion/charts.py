"""Patient detail view data: header labels, measurement table and charts."""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Generic, TypeVar

from .models import HealthMetric, User

T = TypeVar("T")

METRIC_TABLE_HEADERS = (
    "Fecha",
    "Peso (kg)",
    "Altura (cm)",
    "IMC",
    "Grasa (%)",
    "Músculo (%)",
    "Notas",
    "Creado En",
    "ID",
)
DATE_COLUMN = 0
WEIGHT_COLUMN = 1
BMI_COLUMN = 3
ID_COLUMN = 8

WEIGHT_CHART_TITLE = "Evolución del peso"
BMI_CHART_TITLE = "Evolucion del IMC"
DATE_AXIS_FORMAT = "%d/%m/%Y"

DEFAULT_WEIGHT_RANGE = (0.0, 100.0)
DEFAULT_BMI_RANGE = (0.0, 40.0)

_SINGLE_POINT_PADDING = timedelta(days=1)
_MARGIN_FRACTION = 0.05


@dataclass(frozen=True)
class AxisRange(Generic[T]):
    """The lower and upper bound shown on one chart axis."""

    minimum: T
    maximum: T


@dataclass
class ChartData:
    """Points and axis ranges for the weight and BMI evolution charts.

    Points are ``(moment, value)`` pairs sorted by moment; both charts
    share the same time axis range.
    """

    weight_points: list[tuple[datetime, float]] = field(default_factory=list)
    bmi_points: list[tuple[datetime, float]] = field(default_factory=list)
    x_range: AxisRange[datetime] | None = None
    weight_range: AxisRange[float] | None = None
    bmi_range: AxisRange[float] | None = None


def patient_title(user: User) -> str:
    """The window title naming the patient."""
    return f"Paciente: {user.first_name} {user.last_name1} {user.last_name2}"


def patient_labels(user: User) -> dict[str, str]:
    """The patient's summary labels, keyed by field name."""
    birth = user.birth_date.isoformat() if user.birth_date is not None else ""
    return {
        "gender": f"Género: {user.gender}",
        "birth_date": f"Nacimiento: {birth}",
        "activity_level": f"Nivel Act.: {user.activity_level}",
        "goal": f"Objetivo: {user.goal}",
    }


def _iso_datetime(value: datetime | None) -> str:
    if value is None:
        return ""
    return value.replace(microsecond=0).isoformat()


def metric_table_rows(metrics: Iterable[HealthMetric]) -> list[tuple[str, ...]]:
    """Rows for the measurement table, in the columns of :data:`METRIC_TABLE_HEADERS`."""
    return [
        (
            metric.date.isoformat() if metric.date is not None else "",
            f"{metric.weight:.2f}",
            f"{metric.height:.2f}",
            f"{metric.bmi:.2f}",
            f"{metric.body_fat_percentage:.2f}",
            f"{metric.muscle_mass_percentage:.2f}",
            metric.notes,
            _iso_datetime(metric.created_at),
            str(metric.id),
        )
        for metric in metrics
    ]


def _parse_moment(text: str) -> datetime | None:
    try:
        return datetime.fromisoformat(text.strip())
    except ValueError:
        return None


def _parse_number(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return 0.0


def _add_months(moment: datetime, months: int) -> datetime:
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def _time_range(earliest: datetime, latest: datetime) -> AxisRange[datetime]:
    if earliest == latest:
        return AxisRange(earliest - _SINGLE_POINT_PADDING, latest + _SINGLE_POINT_PADDING)
    span_ms = (latest - earliest) // timedelta(milliseconds=1)
    margin = timedelta(milliseconds=int(span_ms * _MARGIN_FRACTION))
    return AxisRange(earliest - margin, latest + margin)


def _value_range(values: Sequence[float]) -> AxisRange[float]:
    return AxisRange(min(values) * 0.95, max(values) * 1.05)


def build_chart_data(
    rows: Iterable[Sequence[str]], now: datetime | None = None
) -> ChartData:
    """Chart points and axis ranges from measurement table rows.

    Rows whose date does not parse, or whose weight or BMI is not
    positive, are left out. With no usable rows the axes fall back to the
    month before ``now`` (default: the current time) and fixed value ranges.
    """
    weight_points: list[tuple[datetime, float]] = []
    bmi_points: list[tuple[datetime, float]] = []

    for row in rows:
        if len(row) <= BMI_COLUMN:
            continue
        moment = _parse_moment(row[DATE_COLUMN])
        weight = _parse_number(row[WEIGHT_COLUMN])
        bmi = _parse_number(row[BMI_COLUMN])
        if moment is None or not (weight > 0 and bmi > 0):
            continue
        weight_points.append((moment, weight))
        bmi_points.append((moment, bmi))

    weight_points.sort(key=lambda point: point[0])
    bmi_points.sort(key=lambda point: point[0])

    if not weight_points:
        current = now if now is not None else datetime.now()
        return ChartData(
            x_range=AxisRange(_add_months(current, -1), current + timedelta(days=1)),
            weight_range=AxisRange(*DEFAULT_WEIGHT_RANGE),
            bmi_range=AxisRange(*DEFAULT_BMI_RANGE),
        )

    return ChartData(
        weight_points=weight_points,
        bmi_points=bmi_points,
        x_range=_time_range(weight_points[0][0], weight_points[-1][0]),
        weight_range=_value_range([value for _, value in weight_points]),
        bmi_range=_value_range([value for _, value in bmi_points]),
    )


def chart_date_label(moment: date) -> str:
    """A moment formatted as the time axis shows it."""
    return moment.strftime(DATE_AXIS_FORMAT)