"""Storage of patients in the ``users`` table."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from .database import DatabaseManager
from .models import User

log = logging.getLogger(__name__)

_SELECT_COLUMNS = (
    "SELECT user_id, first_name, last_name1, last_name2, gender, birth_date, "
    "activity_level, goal, created_at FROM users"
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


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _row_to_user(row: dict[str, Any]) -> User:
    return User(
        id=int(row["user_id"]),
        first_name=_text(row["first_name"]),
        last_name1=_text(row["last_name1"]),
        last_name2=_text(row["last_name2"]),
        gender=_text(row["gender"]),
        birth_date=_parse_date(row["birth_date"]),
        activity_level=_text(row["activity_level"]),
        goal=_text(row["goal"]),
        created_at=_parse_datetime(row["created_at"]),
    )


def _user_params(user: User) -> dict[str, Any]:
    return {
        "first_name": user.first_name,
        "last_name1": user.last_name1,
        "last_name2": user.last_name2,
        "gender": user.gender,
        "birth_date": user.birth_date.isoformat() if user.birth_date else None,
        "activity_level": user.activity_level,
        "goal": user.goal,
    }


class UserManager:
    """Create, read, update and delete patients.

    Statement failures surface as :class:`~nutricion.database.DatabaseError`.
    """

    def __init__(self, database: DatabaseManager) -> None:
        self.database = database

    def add_user(self, user: User) -> int:
        """Insert ``user``, store the generated id on it and return that id."""
        cursor = self.database.execute(
            "INSERT INTO users (first_name, last_name1, last_name2, gender, "
            "birth_date, activity_level, goal) VALUES (:first_name, :last_name1, "
            ":last_name2, :gender, :birth_date, :activity_level, :goal)",
            _user_params(user),
        )
        user.id = int(cursor.lastrowid)
        log.info("User added with id %d", user.id)
        return user.id

    def get_all_users(self) -> list[User]:
        """All patients, ordered by first name."""
        cursor = self.database.execute(f"{_SELECT_COLUMNS} ORDER BY first_name ASC")
        users = [_row_to_user(row) for row in cursor.fetchall()]
        log.info("Retrieved %d users", len(users))
        return users

    def get_user_by_id(self, user_id: int) -> User | None:
        """The patient with ``user_id``, or ``None`` if there is none."""
        cursor = self.database.execute(
            f"{_SELECT_COLUMNS} WHERE user_id = :id", {"id": user_id}
        )
        row = cursor.fetchone()
        if row is None:
            log.warning("User with id %d not found", user_id)
            return None
        return _row_to_user(row)

    def update_user(self, user: User) -> None:
        """Write the fields of an existing patient back to the database.

        Raises ``ValueError`` for an id that is not positive and
        ``LookupError`` when no such patient exists.
        """
        if user.id <= 0:
            raise ValueError(f"invalid user id: {user.id}")
        params = _user_params(user)
        params["user_id"] = user.id
        cursor = self.database.execute(
            "UPDATE users SET first_name = :first_name, last_name1 = :last_name1, "
            "last_name2 = :last_name2, gender = :gender, birth_date = :birth_date, "
            "activity_level = :activity_level, goal = :goal "
            "WHERE user_id = :user_id",
            params,
        )
        if cursor.rowcount == 0:
            raise LookupError(f"user {user.id} not found")
        log.info("User %d updated", user.id)

    def delete_user(self, user_id: int) -> None:
        """Remove a patient (and, through the foreign key, their metrics).

        Raises ``ValueError`` for an id that is not positive and
        ``LookupError`` when no such patient exists.
        """
        if user_id <= 0:
            raise ValueError(f"invalid user id: {user_id}")
        cursor = self.database.execute(
            "DELETE FROM users WHERE user_id = :id", {"id": user_id}
        )
        if cursor.rowcount == 0:
            raise LookupError(f"user {user_id} not found")
        log.info("User %d deleted", user_id)