import logging
import secrets

from modulehub.core.errors import InvalidActivationToken, NotFound
from modulehub.models.user import User
from modulehub.store import UserStore

logger = logging.getLogger(__name__)

ACTIVATION_TOKEN_BYTES = 32


def generate_activation_token() -> str:
    return secrets.token_urlsafe(ACTIVATION_TOKEN_BYTES)


def build_activation_link(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/activate/{token}"


def validate_activation_token(store: UserStore, token: str) -> tuple[User, bool]:
    """Activate the account behind ``token``.

    The token is kept on the user after use. Visiting it again returns the
    same user with ``False`` and changes nothing.
    """
    if not token:
        raise InvalidActivationToken()
    try:
        user, newly_activated = store.mark_activated(token)
    except NotFound as exc:
        raise InvalidActivationToken() from exc

    if newly_activated:
        logger.info("Activated user %s", user.id)
    return user, newly_activated
