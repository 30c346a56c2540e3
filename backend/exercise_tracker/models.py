"""SQLModel data models.

Two tables back the API: `user` and `exercise`. Exercises reference
their user by id string only; no foreign key is declared.
"""

import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field


def new_id() -> str:
    return uuid.uuid4().hex


class User(SQLModel, table=True):
    """A user under which exercises are logged.

    Fields:
    - `id`: generated 32 character hex identifier
    - `username`: unique name, enforced by a unique index
    """
    id: str = Field(default_factory=new_id, primary_key=True)
    username: str = Field(index=True, nullable=False, unique=True)


class Exercise(SQLModel, table=True):
    """A single logged activity.

    `date` has no model-level default; the service resolves "now" when
    the request is handled. Datetimes are stored as naive UTC.
    """
    id: str = Field(default_factory=new_id, primary_key=True)
    user_id: str = Field(nullable=False)
    description: str = Field(nullable=False)
    duration: float = Field(nullable=False)
    date: datetime = Field(nullable=False)
