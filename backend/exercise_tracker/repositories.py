"""Repository classes encapsulating database operations.

Each repository is small and focused on a single table. Repositories
return SQLModel objects, perform commits/refreshes where appropriate and
roll the session back before re-raising store errors.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from . import models


class UserRepository:
    """Create and query `User` objects."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, user: models.User) -> models.User:
        """Persist a new user and return the managed instance.

        A duplicate username surfaces as `sqlalchemy.exc.IntegrityError`
        from the unique index.
        """
        self.session.add(user)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(user)
        return user

    def get(self, user_id: str) -> Optional[models.User]:
        """Get a `User` by id or `None` if not found."""
        return self.session.get(models.User, user_id)

    def list_all(self) -> List[models.User]:
        """Return every user in store order."""
        return self.session.exec(select(models.User)).all()


class ExerciseRepository:
    """Create `Exercise` rows and query a user's log."""
    def __init__(self, session: Session):
        self.session = session

    def create(self, exercise: models.Exercise) -> models.Exercise:
        """Persist a new exercise and return the managed instance."""
        self.session.add(exercise)
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(exercise)
        return exercise

    def list_for_user(
        self,
        user_id: str,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[models.Exercise]:
        """Return exercises for `user_id` sorted by ascending date.

        `date_from` and `date_to` are inclusive bounds; `limit` caps the
        number of rows when given.
        """
        stmt = select(models.Exercise).where(models.Exercise.user_id == user_id)
        if date_from is not None:
            stmt = stmt.where(models.Exercise.date >= date_from)
        if date_to is not None:
            stmt = stmt.where(models.Exercise.date <= date_to)
        stmt = stmt.order_by(models.Exercise.date)
        if limit is not None:
            stmt = stmt.limit(limit)
        return self.session.exec(stmt).all()
