# -*- coding: utf-8 -*-
"""
Tests de los repositorios JSON
"""
import json
import os

import pytest

from sisprocesos.models import User, UserRole
from sisprocesos.repositories import ICrudRepository, IUserRepository, Order, PageRequest, UserRepository


def _user(login, role=UserRole.TRIADOR, **kwargs):
    return User(name=login.title(), login=login, role=role, **kwargs)


def test_repository_creates_empty_file(user_repo, data_dir):
    path = os.path.join(data_dir, 'usuarios.json')

    with open(path, encoding='utf-8') as f:
        assert json.load(f) == {'next_id': 1, 'records': {}}


def test_user_repository_implements_interfaces(user_repo):
    assert isinstance(user_repo, ICrudRepository)
    assert isinstance(user_repo, IUserRepository)


def test_save_assigns_id_to_new_entity(user_repo):
    user = _user('ana')

    saved = user_repo.save(user)

    assert saved.id == 1
    assert user.id == 1
    assert saved is not user


def test_save_persists_role_by_name_and_dates_as_iso(user_repo, data_dir):
    from datetime import date
    user_repo.save(_user('ana', role=UserRole.ADMIN, birthdate=date(1990, 5, 17)))

    with open(os.path.join(data_dir, 'usuarios.json'), encoding='utf-8') as f:
        record = json.load(f)['records']['1']

    assert record['role'] == 'ADMIN'
    assert record['birthdate'] == '1990-05-17'


def test_save_with_id_upserts(user_repo):
    saved = user_repo.save(_user('ana'))
    saved.name = 'Ana Maria'

    user_repo.save(saved)

    assert user_repo.count() == 1
    assert user_repo.find_by_id(saved.id).name == 'Ana Maria'


def test_explicit_id_moves_sequence_forward(user_repo):
    user_repo.save(User(id=10, name='Diez', login='diez', role=UserRole.ADMIN))

    assert user_repo.save(_user('once')).id == 11


def test_ids_are_not_reused_after_delete(user_repo):
    first = user_repo.save(_user('ana'))
    user_repo.delete_by_id(first.id)

    assert user_repo.save(_user('bruno')).id == 2


def test_find_all_by_id_keeps_store_order_and_skips_missing(user_repo):
    a = user_repo.save(_user('ana'))
    b = user_repo.save(_user('bruno'))
    c = user_repo.save(_user('carla'))

    found = user_repo.find_all_by_id([c.id, 99, a.id, a.id])

    assert [u.login for u in found] == ['ana', 'carla']
    assert b not in found


def test_delete_missing_id_does_nothing(user_repo):
    user_repo.save(_user('ana'))

    user_repo.delete_by_id(42)

    assert user_repo.count() == 1


def test_data_survives_new_repository_instance(user_repo, data_dir):
    saved = user_repo.save(_user('ana'))

    assert UserRepository(data_dir).find_by_id(saved.id) == saved


def test_corrupt_file_raises(data_dir):
    path = os.path.join(data_dir, 'usuarios.json')
    with open(path, 'w', encoding='utf-8') as f:
        f.write('{no es json')

    repo = UserRepository(data_dir)

    with pytest.raises(json.JSONDecodeError):
        repo.find_all()


def test_find_page_sorts_with_none_last(user_repo):
    user_repo.save(_user('carla', address='Rua C'))
    user_repo.save(_user('ana'))
    user_repo.save(_user('bruno', address='Rua A'))

    page = user_repo.find_page(PageRequest(0, 10, (Order.asc('address'),)))

    assert [u.login for u in page.content] == ['bruno', 'carla', 'ana']


def test_find_page_with_predicate(user_repo):
    for login in ('ana', 'bruno', 'carla', 'diego'):
        user_repo.save(_user(login))

    page = user_repo.find_page(PageRequest(1, 1), lambda u: u.login != 'bruno')

    assert page.total_elements == 3
    assert [u.login for u in page.content] == ['carla']


def test_find_by_login_is_case_insensitive(user_repo):
    saved = user_repo.save(_user('Ana.Souza'))

    assert user_repo.find_by_login(' ana.souza ') == saved
    assert user_repo.find_by_login('') is None


def test_login_exists_excludes_given_id(user_repo):
    saved = user_repo.save(_user('ana'))

    assert user_repo.login_exists('ana')
    assert not user_repo.login_exists('ana', exclude_id=saved.id)
    assert not user_repo.login_exists('bruno')


def test_users_by_role(user_repo):
    user_repo.save(_user('ana', role=UserRole.ADMIN))
    user_repo.save(_user('bruno'))
    user_repo.save(_user('carla'))

    assert [u.login for u in user_repo.find_all_by_role(UserRole.TRIADOR)] == ['bruno', 'carla']
    assert user_repo.count_by_role(UserRole.ADMIN) == 1
    assert user_repo.count_by_role(UserRole.FINALIZADOR) == 0
