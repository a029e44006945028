"""Storage of health measurements in the ``health_metrics`` table."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from .database import DatabaseManager
from .models import HealthMetric

log = logging.getLogger(__name__)

_SELECT_COLUMNS = (
    "SELECT metric_id, user_id, date, weight, height, bmi, body_fat_percentage, "
    "muscle_mass_percentage, notes, created_at FROM health_metrics"
)


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


def _parse_datetime(value: Any) -> datetime | None:
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def _number(value: Any) -> float:
    return 0.0 if value is None else float(value)


def _row_to_metric(row: dict[str, Any]) -> HealthMetric:
    return HealthMetric(
        id=int(row["metric_id"]),
        user_id=int(row["user_id"]),
        date=_parse_date(row["date"]),
        weight=_number(row["weight"]),
        height=_number(row["height"]),
        bmi=_number(row["bmi"]),
        body_fat_percentage=_number(row["body_fat_percentage"]),
        muscle_mass_percentage=_number(row["muscle_mass_percentage"]),
        notes="" if row["notes"] is None else str(row["notes"]),
        created_at=_parse_datetime(row["created_at"]),
    )


def _metric_params(metric: HealthMetric) -> dict[str, Any]:
    return {
        "user_id": metric.user_id,
        "date": metric.date.isoformat() if metric.date else None,
        "weight": metric.weight,
        "height": metric.height,
        "bmi": metric.bmi,
        "body_fat_percentage": metric.body_fat_percentage,
        "muscle_mass_percentage": metric.muscle_mass_percentage,
        "notes": metric.notes,
    }


class HealthMetricManager:
    """Create, read, update and delete health measurements.

    Statement failures surface as :class:`~nutricion.database.DatabaseError`.
    """

    def __init__(self, database: DatabaseManager) -> None:
        self.database = database

    def add_health_metric(self, metric: HealthMetric) -> int:
        """Insert ``metric``, store the generated id on it and return that id."""
        params = _metric_params(metric)
        params["created_at"] = (
            metric.created_at.isoformat(sep=" ") if metric.created_at else None
        )
        cursor = self.database.execute(
            "INSERT INTO health_metrics (user_id, date, weight, height, bmi, "
            "body_fat_percentage, muscle_mass_percentage, created_at, notes) "
            "VALUES (:user_id, :date, :weight, :height, :bmi, :body_fat_percentage, "
            ":muscle_mass_percentage, :created_at, :notes)",
            params,
        )
        metric.id = int(cursor.lastrowid)
        log.info("Health metric added for user %d", metric.user_id)
        return metric.id

    def get_health_metrics_by_user_id(self, user_id: int) -> list[HealthMetric]:
        """A patient's metrics, ordered by date and then by creation time."""
        cursor = self.database.execute(
            f"{_SELECT_COLUMNS} WHERE user_id = :user_id "
            "ORDER BY date ASC, created_at ASC",
            {"user_id": user_id},
        )
        metrics = [_row_to_metric(row) for row in cursor.fetchall()]
        log.info("Retrieved %d health metrics for user %d", len(metrics), user_id)
        return metrics

    def update_health_metric(self, metric: HealthMetric) -> None:
        """Write an existing metric back; its creation time is left as stored.

        Raises ``ValueError`` for an id that is not positive and
        ``LookupError`` when no such metric exists.
        """
        if metric.id <= 0:
            raise ValueError(f"invalid metric id: {metric.id}")
        params = _metric_params(metric)
        params["metric_id"] = metric.id
        cursor = self.database.execute(
            "UPDATE health_metrics SET user_id = :user_id, date = :date, "
            "weight = :weight, height = :height, bmi = :bmi, "
            "body_fat_percentage = :body_fat_percentage, "
            "muscle_mass_percentage = :muscle_mass_percentage, notes = :notes "
            "WHERE metric_id = :metric_id",
            params,
        )
        if cursor.rowcount == 0:
            raise LookupError(f"health metric {metric.id} not found")
        log.info("Health metric %d updated", metric.id)

    def delete_health_metric(self, metric_id: int) -> None:
        """Remove one metric.

        Raises ``ValueError`` for an id that is not positive and
        ``LookupError`` when no such metric exists.
        """
        if metric_id <= 0:
            raise ValueError(f"invalid metric id: {metric_id}")
        cursor = self.database.execute(
            "DELETE FROM health_metrics WHERE metric_id = :metric_id",
            {"metric_id": metric_id},
        )
        if cursor.rowcount == 0:
            raise LookupError(f"health metric {metric_id} not found")
        log.info("Health metric %d deleted", metric_id)

    def get_health_metric(self, metric_id: int) -> HealthMetric | None:
        """The metric with ``metric_id``, or ``None`` if there is none."""
        cursor = self.database.execute(
            f"{_SELECT_COLUMNS} WHERE metric_id = :metric_id",
            {"metric_id": metric_id},
        )
        row = cursor.fetchone()
        return None if row is None else _row_to_metric(row)