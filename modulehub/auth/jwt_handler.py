from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from modulehub.core.config import Settings
from modulehub.core.errors import InvalidSignature, MalformedToken, TokenExpired
from modulehub.models.user import Role


@dataclass(frozen=True)
class TokenIdentity:
    user_id: int
    role: Role


def create_access_token(
    user_id: int,
    role: Role,
    settings: Settings,
    issued_at: datetime | None = None,
) -> str:
    issued_at = issued_at or datetime.now(timezone.utc)
    expire = issued_at + timedelta(minutes=settings.jwt_expires_minutes)
    payload = {
        "sub": str(user_id),
        "role": Role(role).value,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> TokenIdentity:
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "role", "iat", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired() from exc
    except jwt.InvalidSignatureError as exc:
        raise InvalidSignature() from exc
    except jwt.InvalidTokenError as exc:
        raise MalformedToken() from exc

    try:
        return TokenIdentity(user_id=int(payload["sub"]), role=Role(payload["role"]))
    except (TypeError, ValueError) as exc:
        raise MalformedToken() from exc
