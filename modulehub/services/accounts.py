"""Registration, login, activation and admin account management."""

import logging

from argon2 import PasswordHasher

from modulehub.auth import activation, jwt_handler, passwords
from modulehub.core.config import Settings
from modulehub.core.errors import (
    AccountNotActivated,
    AuthenticationFailed,
    DuplicateEmail,
    NotFound,
)
from modulehub.models.user import Role, User
from modulehub.store import UserStore, normalize_email

logger = logging.getLogger(__name__)


def _email_taken(store: UserStore, email: str) -> bool:
    try:
        store.find_by_email(email)
    except NotFound:
        return False
    return True


def register(
    store: UserStore,
    hasher: PasswordHasher,
    settings: Settings,
    email: str,
    name: str,
    password: str,
) -> tuple[User, str]:
    """Create an unactivated account and return it with its activation link."""
    if _email_taken(store, email):
        raise DuplicateEmail()

    token = activation.generate_activation_token()
    user = store.create(
        email=email,
        name=name,
        password_hash=passwords.hash_password(hasher, password),
        activation_token=token,
    )
    logger.info("Registered user %s", user.id)
    return user, activation.build_activation_link(settings.activation_base_url, token)


def login(
    store: UserStore,
    hasher: PasswordHasher,
    settings: Settings,
    email: str,
    password: str,
) -> str:
    try:
        user = store.find_by_email(email)
    except NotFound:
        # Spend a hash on unknown emails too.
        passwords.hash_password(hasher, password)
        logger.info("Login failed")
        raise AuthenticationFailed() from None

    if not passwords.verify_password(hasher, password, user.password_hash):
        logger.info("Login failed")
        raise AuthenticationFailed()

    if not user.activated:
        raise AccountNotActivated()

    if passwords.needs_rehash(hasher, user.password_hash):
        user.password_hash = passwords.hash_password(hasher, password)
        store.update(user)
        logger.info("Rehashed password for user %s", user.id)

    return jwt_handler.create_access_token(user.id, user.user_role, settings)


def activate(store: UserStore, token: str) -> tuple[User, bool]:
    return activation.validate_activation_token(store, token)


def update_user(
    store: UserStore,
    user_id: int,
    email: str | None = None,
    name: str | None = None,
    role: Role | None = None,
    activated: bool | None = None,
) -> User:
    user = store.get(user_id)

    if email is not None and normalize_email(email) != user.email:
        if _email_taken(store, email):
            raise DuplicateEmail()
        user.email = normalize_email(email)
    if name is not None:
        user.name = name
    if role is not None:
        user.user_role = role
    if activated is not None:
        user.activated = activated

    user = store.update(user)
    logger.info("Updated user %s", user.id)
    return user


def delete_user(store: UserStore, user_id: int) -> None:
    store.delete(user_id)
    logger.info("Deleted user %s", user_id)

