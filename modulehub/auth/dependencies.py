"""Request guards for protected routes.

Each protected request moves through the same states: no bearer token is a
401, a token that fails to parse is a 401, a valid token whose role does
not satisfy the route's requirement is a 403, and anything else proceeds
with the identity attached to ``request.state.identity``.
"""

from collections.abc import Callable

from argon2 import PasswordHasher
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from modulehub.auth import jwt_handler
from modulehub.auth.jwt_handler import TokenIdentity
from modulehub.core.config import Settings
from modulehub.core.errors import AuthenticationRequired, AuthorizationFailed
from modulehub.models.user import Role
from modulehub.notifications import Notifier

security = HTTPBearer(auto_error=False)

# Roles each role is allowed to act as.
ROLE_GRANTS: dict[Role, frozenset[Role]] = {
    Role.USER: frozenset({Role.USER}),
    Role.ADMIN: frozenset({Role.USER, Role.ADMIN}),
}


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_password_hasher(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier


def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> TokenIdentity:
    if credentials is None or not credentials.credentials:
        raise AuthenticationRequired()

    identity = jwt_handler.decode_access_token(credentials.credentials, get_settings(request))
    request.state.identity = identity
    return identity


def role_satisfies(actual: Role, required: Role) -> bool:
    return required in ROLE_GRANTS[actual]


def require_role(required: Role) -> Callable[..., TokenIdentity]:
    def dependency(identity: TokenIdentity = Depends(get_current_identity)) -> TokenIdentity:
        if not role_satisfies(identity.role, required):
            raise AuthorizationFailed()
        return identity

    dependency.__name__ = f"require_{required.value.lower()}"
    return dependency


require_admin = require_role(Role.ADMIN)
