from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel, field_validator

from modulehub.auth.dependencies import require_admin
from modulehub.models.user import Role
from modulehub.routes.auth_routes import UserResponse, validate_display_name, validate_email_address
from modulehub.services import accounts
from modulehub.store import UserStore, get_user_store

router = APIRouter(tags=["users"], dependencies=[Depends(require_admin)])


class UpdateUserRequest(BaseModel):
    email: str | None = None
    name: str | None = None
    role: Role | None = None
    activated: bool | None = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return validate_email_address(value)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return validate_display_name(value)


@router.get("/api/users", response_model=list[UserResponse])
def list_users(store: UserStore = Depends(get_user_store)):
    return [UserResponse.from_user(user) for user in store.list_users()]


@router.put("/api/admin/users/{user_id}", response_model=UserResponse)
def edit_user(
    user_id: int,
    payload: UpdateUserRequest,
    store: UserStore = Depends(get_user_store),
):
    user = accounts.update_user(
        store,
        user_id,
        email=payload.email,
        name=payload.name,
        role=payload.role,
        activated=payload.activated,
    )
    return UserResponse.from_user(user)


@router.delete("/api/admin/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, store: UserStore = Depends(get_user_store)):
    accounts.delete_user(store, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
