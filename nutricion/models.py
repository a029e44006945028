"""Domain records for patients and their health measurements."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class User:
    """A patient.

    ``id`` stays at -1 until the database assigns one, and ``created_at``
    stays ``None`` until the database records the creation time.
    """

    first_name: str
    last_name1: str
    last_name2: str
    gender: str
    birth_date: date | None
    activity_level: str
    goal: str
    id: int = -1
    created_at: datetime | None = None


@dataclass
class HealthMetric:
    """One body measurement taken for a patient on a given date.

    Weight is in kilograms, height in centimetres and the two body
    composition values are percentages. An ``id`` of -1 marks a metric
    not yet stored.
    """

    user_id: int = -1
    date: date | None = None
    weight: float = 0.0
    height: float = 0.0
    bmi: float = 0.0
    body_fat_percentage: float = 0.0
    muscle_mass_percentage: float = 0.0
    notes: str = ""
    created_at: datetime | None = None
    id: int = -1

    def calculate_bmi(self) -> float:
        """Set ``bmi`` from weight and height and return it.

        The BMI is weight divided by the square of the height in metres;
        it is 0.0 unless both weight and height are positive.
        """
        if self.weight > 0 and self.height > 0:
            height_m = self.height / 100.0
            self.bmi = self.weight / (height_m * height_m)
        else:
            self.bmi = 0.0
        return self.bmi