"""Pydantic response schemas used by the API.

Schemas keep the JSON shapes stable: ids are strings, dates are
pre-rendered strings and durations are whole numbers whenever the
stored value has no fractional part.
"""

from typing import List, Union

from pydantic import BaseModel

from . import models
from .utils.dates import format_date


def render_duration(value: float) -> Union[int, float]:
    return int(value) if float(value).is_integer() else value


class UserOut(BaseModel):
    """A user as returned by the user endpoints."""
    id: str
    username: str

    @classmethod
    def from_model(cls, user: models.User) -> "UserOut":
        return cls(id=user.id, username=user.username)


class ExerciseOut(BaseModel):
    """Response for a newly added exercise, merged with its user."""
    id: str
    username: str
    date: str
    duration: Union[int, float]
    description: str

    @classmethod
    def from_models(cls, user: models.User, exercise: models.Exercise) -> "ExerciseOut":
        return cls(
            id=user.id,
            username=user.username,
            date=format_date(exercise.date),
            duration=render_duration(exercise.duration),
            description=exercise.description,
        )


class LogEntry(BaseModel):
    description: str
    duration: Union[int, float]
    date: str

    @classmethod
    def from_model(cls, exercise: models.Exercise) -> "LogEntry":
        return cls(
            description=exercise.description,
            duration=render_duration(exercise.duration),
            date=format_date(exercise.date),
        )


class LogOut(BaseModel):
    """A user's exercise log; `count` is the number of entries in `log`."""
    id: str
    username: str
    count: int
    log: List[LogEntry]


class ErrorOut(BaseModel):
    """Business or fault error payload."""
    error: str
