"""Credential store: persistence of user records over a SQLAlchemy session.

The store owns no connection of its own. It is constructed per request
over the session yielded by ``get_db`` so each test can hand it an
isolated database.
"""

import logging

from fastapi import Depends
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from modulehub.core.errors import DuplicateEmail, InternalError, NotFound
from modulehub.database import get_db
from modulehub.models.user import Role, User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore:
    def __init__(self, db: Session) -> None:
        self.db = db

    def create(self, email: str, name: str, password_hash: str, activation_token: str) -> User:
        user = User(
            email=normalize_email(email),
            name=name,
            password_hash=password_hash,
            activated=False,
            activation_link=activation_token,
            user_role=Role.USER,
        )
        self.db.add(user)
        self._commit()
        self.db.refresh(user)
        return user

    def get(self, user_id: int) -> User:
        user = self._execute_scalar(select(User).where(User.id == user_id))
        if user is None:
            raise NotFound("User not found")
        return user

    def find_by_email(self, email: str) -> User:
        user = self._execute_scalar(select(User).where(User.email == normalize_email(email)))
        if user is None:
            raise NotFound("User not found")
        return user

    def find_by_activation_token(self, token: str) -> User:
        user = self._execute_scalar(select(User).where(User.activation_link == token))
        if user is None:
            raise NotFound("User not found")
        return user

    def list_users(self) -> list[User]:
        try:
            return list(self.db.scalars(select(User).order_by(User.id)))
        except SQLAlchemyError as exc:
            logger.exception("Listing users failed")
            raise InternalError() from exc

    def update(self, user: User) -> User:
        if user.id is None or self.db.get(User, user.id) is None:
            raise NotFound("User not found")
        user.email = normalize_email(user.email)
        self._commit()
        self.db.refresh(user)
        return user

    def delete(self, user_id: int) -> None:
        user = self.get(user_id)
        self.db.delete(user)
        self._commit()

    def mark_activated(self, token: str) -> tuple[User, bool]:
        """Activate the account owning ``token``.

        The conditional UPDATE flips the flag at most once, so concurrent
        visits of the same link agree on which one did the activation.
        Returns the user and whether this call activated it.
        """
        try:
            result = self.db.execute(
                update(User)
                .where(User.activation_link == token, User.activated.is_(False))
                .values(activated=True)
            )
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Activation update failed")
            raise InternalError() from exc

        user = self.find_by_activation_token(token)
        self.db.refresh(user)
        return user, result.rowcount == 1

    def _execute_scalar(self, statement):
        try:
            return self.db.scalars(statement).first()
        except SQLAlchemyError as exc:
            logger.exception("User lookup failed")
            raise InternalError() from exc

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateEmail() from exc
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("User write failed")
            raise InternalError() from exc


def get_user_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)
