import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from modulehub.core.config import Settings
from modulehub.core.errors import InternalError

logger = logging.getLogger(__name__)


def build_password_hasher(settings: Settings) -> PasswordHasher:
    return PasswordHasher(
        time_cost=settings.argon2_time_cost,
        memory_cost=settings.argon2_memory_cost,
        parallelism=settings.argon2_parallelism,
    )


def hash_password(hasher: PasswordHasher, plaintext: str) -> str:
    """Return a salted, self-describing argon2id hash of ``plaintext``."""
    return hasher.hash(plaintext)


def verify_password(hasher: PasswordHasher, plaintext: str, password_hash: str) -> bool:
    """Check ``plaintext`` against a stored hash.

    A mismatch is a plain ``False``. A stored value argon2 cannot decode is a
    data fault and surfaces as a generic InternalError.
    """
    try:
        return hasher.verify(password_hash, plaintext)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError) as exc:
        logger.error("Stored password hash could not be parsed")
        raise InternalError() from exc


def needs_rehash(hasher: PasswordHasher, password_hash: str) -> bool:
    try:
        return hasher.check_needs_rehash(password_hash)
    except InvalidHashError:
        return False
