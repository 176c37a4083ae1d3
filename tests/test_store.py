import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from modulehub.core.errors import DuplicateEmail, InternalError, NotFound
from modulehub.models.user import Role, User


def count_users(store) -> int:
    return store.db.scalar(select(func.count()).select_from(User))


def test_create_normalizes_email_and_defaults(store) -> None:
    user = store.create(' A@X.COM ', 'A', 'hash', 'token-1')

    assert user.id is not None
    assert user.email == 'a@x.com'
    assert user.activated is False
    assert user.user_role is Role.USER
    assert user.activation_link == 'token-1'


def test_create_rejects_duplicate_email_leaving_one_row(store) -> None:
    store.create('a@x.com', 'A', 'hash', 'token-1')

    with pytest.raises(DuplicateEmail):
        store.create('A@x.com', 'Other', 'hash', 'token-2')

    assert count_users(store) == 1


def test_find_by_email_is_case_insensitive(store) -> None:
    created = store.create('a@x.com', 'A', 'hash', 'token-1')

    assert store.find_by_email('A@X.com').id == created.id


def test_lookups_raise_not_found(store) -> None:
    with pytest.raises(NotFound):
        store.find_by_email('missing@x.com')
    with pytest.raises(NotFound):
        store.find_by_activation_token('missing')
    with pytest.raises(NotFound):
        store.get(42)


def test_update_persists_changes(store) -> None:
    user = store.create('a@x.com', 'A', 'hash', 'token-1')
    user.user_role = Role.ADMIN
    user.name = 'Renamed'

    store.update(user)

    reloaded = store.get(user.id)
    assert reloaded.user_role is Role.ADMIN
    assert reloaded.name == 'Renamed'


def test_update_rejects_unknown_user(store) -> None:
    with pytest.raises(NotFound):
        store.update(User(id=99, email='ghost@x.com', name='Ghost', password_hash='hash'))


def test_update_into_taken_email_raises_duplicate(store) -> None:
    store.create('a@x.com', 'A', 'hash', 'token-1')
    second = store.create('b@x.com', 'B', 'hash', 'token-2')
    second.email = 'a@x.com'

    with pytest.raises(DuplicateEmail):
        store.update(second)


def test_delete_removes_user(store) -> None:
    user_id = store.create('a@x.com', 'A', 'hash', 'token-1').id

    store.delete(user_id)

    assert count_users(store) == 0
    with pytest.raises(NotFound):
        store.delete(user_id)


def test_mark_activated_flips_flag_once(store) -> None:
    store.create('a@x.com', 'A', 'hash', 'token-1')

    first_user, first = store.mark_activated('token-1')
    second_user, second = store.mark_activated('token-1')

    assert (first, second) == (True, False)
    assert first_user.activated is True
    assert second_user.activated is True


def test_list_users_orders_by_id(store) -> None:
    store.create('b@x.com', 'B', 'hash', 'token-1')
    store.create('a@x.com', 'A', 'hash', 'token-2')

    assert [user.email for user in store.list_users()] == ['b@x.com', 'a@x.com']


def test_database_faults_surface_as_internal_error(store, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_scalars(*_args, **_kwargs):
        raise OperationalError('SELECT', {}, Exception('database is locked'))

    monkeypatch.setattr(store.db, 'scalars', broken_scalars)

    with pytest.raises(InternalError) as exception_info:
        store.find_by_email('a@x.com')

    assert 'locked' not in exception_info.value.message
