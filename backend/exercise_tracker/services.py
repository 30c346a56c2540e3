"""Business logic services used by HTTP controllers.

Services validate raw request values, resolve defaults and persist
records via repositories. Recoverable business failures are raised as
`ValueError` subclasses carrying the message returned to clients; store
failures propagate as SQLAlchemy errors (or `MissingField`).
"""

import math
import re
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from . import models, repositories
from .utils.dates import parse_date, parse_limit, utcnow

_NUMBER = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")
# largest LIMIT the store driver can bind
MAX_LIMIT = 2**63 - 1


class InvalidInput(ValueError):
    def __init__(self):
        super().__init__("Invalid input.")


class UserNotFound(ValueError):
    def __init__(self):
        super().__init__("User not found")


class UsernameTaken(ValueError):
    def __init__(self):
        super().__init__("Username already taken")


class MissingField(RuntimeError):
    """A required field was absent when building a record for the store."""


def parse_duration(raw) -> Optional[float]:
    """Return `raw` as a finite float, or `None` if it is not numeric.

    Numbers from JSON bodies are taken as-is; strings must be plain
    decimal literals (optional sign, fraction and exponent).
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        text = str(raw).strip()
        if not _NUMBER.match(text):
            return None
        value = float(text)
    return value if math.isfinite(value) else None


class UserService:
    """Create and list users."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)

    def create(self, username) -> models.User:
        """Create a user with `username`.

        Raises `UsernameTaken` when the unique index rejects the insert
        and `MissingField` when no username was supplied.
        """
        if username is None or username == "":
            raise MissingField("username is required")
        user = models.User(username=str(username))
        try:
            return self.user_repo.create(user)
        except IntegrityError:
            raise UsernameTaken()

    def list_users(self) -> List[models.User]:
        return self.user_repo.list_all()


class ExerciseService:
    """Record exercises and build a user's exercise log."""
    def __init__(self, session: Session):
        self.session = session
        self.user_repo = repositories.UserRepository(session)
        self.exercise_repo = repositories.ExerciseRepository(session)

    def add_exercise(self, user_id: str, description, duration, date=None) -> Tuple[models.User, models.Exercise]:
        """Validate and store an exercise for `user_id`.

        Validation runs before the user lookup: empty description,
        non-numeric duration or an unparseable non-empty date raise
        `InvalidInput`. A missing user raises `UserNotFound`. When no
        date is given the current UTC time is used.
        """
        if description is None or description == "":
            raise InvalidInput()
        minutes = parse_duration(duration)
        if minutes is None:
            raise InvalidInput()
        when: Optional[datetime] = None
        if date is not None and str(date).strip():
            when = parse_date(date)
            if when is None:
                raise InvalidInput()

        user = self.user_repo.get(user_id)
        if not user:
            raise UserNotFound()

        exercise = models.Exercise(
            user_id=user_id,
            description=str(description),
            duration=minutes,
            date=when or utcnow(),
        )
        return user, self.exercise_repo.create(exercise)

    def get_log(self, user_id: str, date_from=None, date_to=None, limit=None) -> Tuple[models.User, List[models.Exercise]]:
        """Return the user and their exercises, oldest first.

        Unparseable `date_from`, `date_to` and `limit` values are ignored.
        A limit of 0 means no limit; negative limits use their absolute
        value.
        """
        user = self.user_repo.get(user_id)
        if not user:
            raise UserNotFound()
        cap = parse_limit(limit)
        if cap is not None:
            cap = min(abs(cap), MAX_LIMIT) or None
        exercises = self.exercise_repo.list_for_user(
            user_id,
            date_from=parse_date(date_from),
            date_to=parse_date(date_to),
            limit=cap,
        )
        return user, exercises
