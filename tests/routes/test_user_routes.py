from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select

from modulehub.auth.jwt_handler import create_access_token
from modulehub.models.user import Role, User


def bearer(token: str) -> dict[str, str]:
    return {'Authorization': f'Bearer {token}'}


def create_account(client, db_session, email: str, role: Role = Role.USER) -> tuple[User, str]:
    response = client.post('/register', json={'email': email, 'name': 'Test User', 'password': 'password1'})
    assert response.status_code == 201

    db_session.expire_all()
    user = db_session.scalars(select(User).where(User.email == email)).one()
    user.activated = True
    user.user_role = role
    db_session.commit()

    login = client.post('/login', json={'email': email, 'password': 'password1'})
    assert login.status_code == 200
    return user, login.json()['token']


@pytest.fixture
def admin_token(client, db_session) -> str:
    _user, token = create_account(client, db_session, 'admin@example.com', Role.ADMIN)
    return token


def test_list_users_requires_authentication(client) -> None:
    response = client.get('/api/users')

    assert response.status_code == 401
    assert response.json() == {'error': 'Authentication required'}


def test_list_users_forbids_regular_user(client, db_session) -> None:
    _user, token = create_account(client, db_session, 'user@example.com')

    response = client.get('/api/users', headers=bearer(token))

    assert response.status_code == 403


def test_list_users_for_admin(client, db_session, admin_token) -> None:
    create_account(client, db_session, 'user@example.com')

    response = client.get('/api/users', headers=bearer(admin_token))

    assert response.status_code == 200
    assert [user['email'] for user in response.json()] == ['admin@example.com', 'user@example.com']


def test_list_users_rejects_expired_admin_token(client, db_session, settings) -> None:
    user, _token = create_account(client, db_session, 'admin@example.com', Role.ADMIN)
    expired = create_access_token(
        user.id,
        Role.ADMIN,
        settings,
        issued_at=datetime.now(timezone.utc) - timedelta(days=2),
    )

    response = client.get('/api/users', headers=bearer(expired))

    assert response.status_code == 401
    assert response.json() == {'error': 'Token has expired'}


def test_admin_edits_user(client, db_session, admin_token) -> None:
    user, _token = create_account(client, db_session, 'user@example.com')

    response = client.put(
        f'/api/admin/users/{user.id}',
        json={'name': 'Updated User', 'email': 'Updated@Example.com', 'role': 'ADMIN'},
        headers=bearer(admin_token),
    )

    assert response.status_code == 200
    assert response.json() == {
        'id': user.id,
        'email': 'updated@example.com',
        'name': 'Updated User',
        'activated': True,
        'role': 'ADMIN',
    }


def test_admin_edit_rejects_taken_email(client, db_session, admin_token) -> None:
    user, _token = create_account(client, db_session, 'user@example.com')

    response = client.put(
        f'/api/admin/users/{user.id}',
        json={'email': 'admin@example.com'},
        headers=bearer(admin_token),
    )

    assert response.status_code == 409


def test_admin_edit_rejects_unknown_role(client, db_session, admin_token) -> None:
    user, _token = create_account(client, db_session, 'user@example.com')

    response = client.put(
        f'/api/admin/users/{user.id}',
        json={'role': 'SUPERUSER'},
        headers=bearer(admin_token),
    )

    assert response.status_code == 400


def test_admin_edit_unknown_user_is_404(client, admin_token) -> None:
    response = client.put('/api/admin/users/999', json={'name': 'Ghost'}, headers=bearer(admin_token))

    assert response.status_code == 404
    assert response.json() == {'error': 'User not found'}


def test_regular_user_cannot_edit_or_delete(client, db_session) -> None:
    user, token = create_account(client, db_session, 'user@example.com')

    edit = client.put(f'/api/admin/users/{user.id}', json={'role': 'ADMIN'}, headers=bearer(token))
    delete = client.delete(f'/api/admin/users/{user.id}', headers=bearer(token))

    assert edit.status_code == 403
    assert delete.status_code == 403


def test_admin_deletes_user(client, db_session, admin_token) -> None:
    user, _token = create_account(client, db_session, 'user@example.com')

    response = client.delete(f'/api/admin/users/{user.id}', headers=bearer(admin_token))

    assert response.status_code == 204
    assert client.delete(f'/api/admin/users/{user.id}', headers=bearer(admin_token)).status_code == 404
