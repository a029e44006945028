"""Input forms for patients and measurements, with their validation rules."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime

from .models import HealthMetric, User

GENDERS = ("Masculino", "Femenino", "Otro")
ACTIVITY_LEVELS = ("Sedentario", "Ligero", "Moderado", "Activo", "Muy Activo")
GOALS = ("Perder peso", "Mantener peso", "Ganar musculo", "Mejorar salud", "Otro")
DEFAULT_BIRTH_DATE = date(2000, 1, 1)

USER_TABLE_HEADERS = ("ID", "Nombre", "Apellido 1", "Apellido 2")

INVALID_METRIC_MESSAGE = "El peso y la altura deben ser valores positivos."
INVALID_USER_MESSAGE = (
    "Por favor, complete los campos obligatorios: Nombre, Primer Apellido, "
    "Género, Fecha de Nacimiento y Nivel de Actividad."
)


class ValidationError(ValueError):
    """Raised when a form holds values that cannot be saved."""


@dataclass(frozen=True)
class SpinRange:
    """Bounds, precision and display unit of a numeric input."""

    minimum: float
    maximum: float
    decimals: int
    step: float
    suffix: str

    def clamp(self, value: float) -> float:
        """Round ``value`` to the allowed decimals and keep it within bounds."""
        rounded = round(float(value), self.decimals)
        return min(max(rounded, self.minimum), self.maximum)

    def format(self, value: float) -> str:
        """The value as the input would show it, unit included."""
        return f"{self.clamp(value):.{self.decimals}f}{self.suffix}"


WEIGHT_RANGE = SpinRange(1.0, 300.0, 2, 0.1, " kg")
HEIGHT_RANGE = SpinRange(50.0, 250.0, 1, 0.5, " cm")
BODY_FAT_RANGE = SpinRange(0.0, 100.0, 2, 0.1, " %")
MUSCLE_MASS_RANGE = SpinRange(0.0, 100.0, 2, 0.1, " %")


@dataclass
class MetricForm:
    """The values entered for one health measurement.

    Numeric values are brought into their input's range and precision when
    the form is created; an empty form starts at each range's lower bound
    and today's date.
    """

    date: date = field(default_factory=date.today)
    weight: float = WEIGHT_RANGE.minimum
    height: float = HEIGHT_RANGE.minimum
    body_fat_percentage: float = BODY_FAT_RANGE.minimum
    muscle_mass_percentage: float = MUSCLE_MASS_RANGE.minimum
    notes: str = ""

    def __post_init__(self) -> None:
        self.weight = WEIGHT_RANGE.clamp(self.weight)
        self.height = HEIGHT_RANGE.clamp(self.height)
        self.body_fat_percentage = BODY_FAT_RANGE.clamp(self.body_fat_percentage)
        self.muscle_mass_percentage = MUSCLE_MASS_RANGE.clamp(
            self.muscle_mass_percentage
        )

    @classmethod
    def from_metric(cls, metric: HealthMetric) -> MetricForm:
        """A form pre-filled with a stored metric's values, for editing."""
        return cls(
            date=metric.date if metric.date is not None else date.today(),
            weight=metric.weight,
            height=metric.height,
            body_fat_percentage=metric.body_fat_percentage,
            muscle_mass_percentage=metric.muscle_mass_percentage,
            notes=metric.notes,
        )

    def validate(self) -> None:
        """Raise :class:`ValidationError` unless weight and height are positive."""
        if self.weight <= 0 or self.height <= 0:
            raise ValidationError(INVALID_METRIC_MESSAGE)

    def apply_to(self, metric: HealthMetric) -> HealthMetric:
        """Copy the entered values onto ``metric``, recompute its BMI, return it."""
        self.validate()
        metric.date = self.date
        metric.weight = self.weight
        metric.height = self.height
        metric.body_fat_percentage = self.body_fat_percentage
        metric.muscle_mass_percentage = self.muscle_mass_percentage
        metric.notes = self.notes
        metric.calculate_bmi()
        return metric

    def to_metric(
        self, user_id: int, created_at: datetime | None = None
    ) -> HealthMetric:
        """A new, unsaved metric for ``user_id`` with its BMI computed.

        ``created_at`` defaults to the current time.
        """
        metric = HealthMetric(
            user_id=user_id,
            created_at=created_at if created_at is not None else datetime.now(),
        )
        return self.apply_to(metric)


@dataclass
class UserForm:
    """The values entered for a new patient."""

    first_name: str = ""
    last_name1: str = ""
    last_name2: str = ""
    gender: str = GENDERS[0]
    birth_date: date | None = DEFAULT_BIRTH_DATE
    activity_level: str = ACTIVITY_LEVELS[0]
    goal: str = GOALS[0]

    def validate(self) -> None:
        """Raise :class:`ValidationError` if a required field is empty."""
        if (
            not self.first_name.strip()
            or not self.last_name1.strip()
            or not self.gender
            or self.birth_date is None
            or not self.activity_level
        ):
            raise ValidationError(INVALID_USER_MESSAGE)

    def to_user(self) -> User:
        """A new, unsaved patient with surrounding whitespace removed from names."""
        self.validate()
        return User(
            first_name=self.first_name.strip(),
            last_name1=self.last_name1.strip(),
            last_name2=self.last_name2.strip(),
            gender=self.gender,
            birth_date=self.birth_date,
            activity_level=self.activity_level,
            goal=self.goal,
        )


def filter_users(users: Iterable[User], text: str) -> list[User]:
    """Patients whose names or id contain ``text``, ignoring case.

    An empty ``text`` keeps every patient. Order is preserved.
    """
    users = list(users)
    if not text:
        return users
    needle = text.lower()
    return [
        user
        for user in users
        if needle in user.first_name.lower()
        or needle in user.last_name1.lower()
        or needle in user.last_name2.lower()
        or needle in str(user.id)
    ]


def user_table_rows(users: Iterable[User]) -> list[tuple[str, str, str, str]]:
    """Rows for the patient list, in the columns of :data:`USER_TABLE_HEADERS`."""
    return [
        (str(user.id), user.first_name, user.last_name1, user.last_name2)
        for user in users
    ]