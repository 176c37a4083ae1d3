from argon2 import PasswordHasher
from fastapi import APIRouter, BackgroundTasks, Depends, status
from pydantic import BaseModel, field_validator

from modulehub.auth.dependencies import (
    get_current_identity,
    get_notifier,
    get_password_hasher,
    get_settings,
)
from modulehub.auth.jwt_handler import TokenIdentity
from modulehub.core.config import Settings
from modulehub.models.user import Role
from modulehub.notifications import Notifier, deliver_activation
from modulehub.services import accounts
from modulehub.store import UserStore, get_user_store, normalize_email

router = APIRouter(tags=["auth"])

MAX_PASSWORD_LENGTH = 128
MAX_NAME_LENGTH = 255


def validate_email_address(value: str) -> str:
    normalized = normalize_email(value)
    if not normalized:
        raise ValueError("Email is required.")

    local_part, at, domain = normalized.partition("@")
    if not at or not local_part or "@" in domain or "." not in domain.strip("."):
        raise ValueError("Email address is not valid.")
    if len(normalized) > 255:
        raise ValueError("Email address is too long.")
    return normalized


def validate_display_name(value: str) -> str:
    normalized = value.strip()
    if not normalized:
        raise ValueError("Name is required.")
    if len(normalized) > MAX_NAME_LENGTH:
        raise ValueError(f"Name must be {MAX_NAME_LENGTH} characters or fewer.")
    return normalized


class RegisterRequest(BaseModel):
    email: str
    name: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return validate_email_address(value)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        return validate_display_name(value)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required.")
        if len(value) > MAX_PASSWORD_LENGTH:
            raise ValueError(f"Password must be {MAX_PASSWORD_LENGTH} characters or fewer.")
        return value


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = normalize_email(value)
        if not normalized:
            raise ValueError("Email is required.")
        return normalized

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required.")
        return value


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    activated: bool
    role: Role

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            name=user.name,
            activated=user.activated,
            role=user.user_role,
        )


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int


class MessageResponse(BaseModel):
    message: str


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=UserResponse)
def register(
    payload: RegisterRequest,
    background_tasks: BackgroundTasks,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
    notifier: Notifier = Depends(get_notifier),
):
    user, link = accounts.register(
        store,
        hasher,
        settings,
        email=payload.email,
        name=payload.name,
        password=payload.password,
    )
    background_tasks.add_task(deliver_activation, notifier, user.email, user.name, link)
    return UserResponse.from_user(user)


@router.post("/login", response_model=TokenResponse)
def login(
    payload: LoginRequest,
    store: UserStore = Depends(get_user_store),
    hasher: PasswordHasher = Depends(get_password_hasher),
    settings: Settings = Depends(get_settings),
):
    token = accounts.login(store, hasher, settings, email=payload.email, password=payload.password)
    return TokenResponse(token=token, expires_in=settings.jwt_expires_minutes * 60)


@router.get("/activate/{token}", response_model=MessageResponse)
def activate(token: str, store: UserStore = Depends(get_user_store)):
    _user, newly_activated = accounts.activate(store, token)
    if newly_activated:
        return MessageResponse(message="Account activated.")
    return MessageResponse(message="Account is already activated.")


@router.get("/api/me", response_model=UserResponse)
def me(
    identity: TokenIdentity = Depends(get_current_identity),
    store: UserStore = Depends(get_user_store),
):
    return UserResponse.from_user(store.get(identity.user_id))
