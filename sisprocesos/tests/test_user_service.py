# -*- coding: utf-8 -*-
"""
Tests del servicio de usuarios: CRUD, contraseñas, autenticación y perfiles
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from werkzeug.security import check_password_hash

from sisprocesos.exceptions import AuthenticationError, ValidationError
from sisprocesos.models import User, UserRole
from sisprocesos.repositories import PageRequest
from sisprocesos.security import SecurityContext


def test_user_lifecycle(user_service):
    created = user_service.create(User(name='Ana', login='ana', role=UserRole.ADMIN))
    assert created.id == 1

    found = user_service.find_by_id(1)
    assert found == created

    updated = user_service.update(User(id=1, name='Ana Maria', login='ana', role=UserRole.ADMIN))
    assert updated.id == 1
    assert updated.name == 'Ana Maria'
    assert user_service.find_by_id(1).name == 'Ana Maria'

    user_service.delete(1)
    assert user_service.find_by_id(1) is None


def test_create_reports_all_invalid_fields_in_order(user_service, user_repo):
    user = User(
        name='',
        document_id='123',
        birthdate=date(2999, 1, 1),
        login='a b',
        password='123',
    )

    with pytest.raises(ValidationError) as exc:
        user_service.create(user)

    assert exc.value.fields == ['name', 'document_id', 'birthdate', 'login', 'password', 'role']
    assert user_repo.count() == 0


def test_password_is_hashed_before_saving(user_service):
    created = user_service.create(User(name='Bruno', login='bruno', password='secreto1', role=UserRole.TRIADOR))

    assert created.password != 'secreto1'
    assert check_password_hash(created.password, 'secreto1')


def test_stored_hash_is_not_hashed_again(user_service):
    created = user_service.create(User(name='Bruno', login='bruno', password='secreto1', role=UserRole.TRIADOR))
    stored_hash = created.password

    created.phone = '+55 48 3333-4444'
    updated = user_service.update(created)

    assert updated.password == stored_hash


def test_password_that_looks_like_a_hash_is_still_hashed(user_service):
    created = user_service.create(User(name='Ana', login='ana', password='scrypt:minhasenha', role=UserRole.ADMIN))

    assert created.password != 'scrypt:minhasenha'
    assert user_service.authenticate('ana', 'scrypt:minhasenha') == created


def test_changed_password_is_hashed_on_update(user_service):
    created = user_service.create(User(name='Bruno', login='bruno', password='secreto1', role=UserRole.TRIADOR))

    created.password = 'nueva-clave'
    updated = user_service.update(created)

    assert check_password_hash(updated.password, 'nueva-clave')
    assert user_service.authenticate('bruno', 'secreto1') is None
    assert user_service.authenticate('bruno', 'nueva-clave') == updated


@pytest.mark.parametrize('role', ['SUPERUSER', 'ROLE_ADMIN', 1])
def test_role_must_be_a_user_role(user_service, user_repo, role):
    with pytest.raises(ValidationError) as exc:
        user_service.create(User(name='Ana', login='ana', role=role))

    assert exc.value.fields == ['role']
    assert user_repo.count() == 0


@pytest.mark.parametrize('values, field', [
    ({'name': 123, 'login': 'ana'}, 'name'),
    ({'name': 'Ana', 'login': 12345}, 'login'),
])
def test_non_text_values_are_validation_errors(user_service, user_repo, values, field):
    with pytest.raises(ValidationError) as exc:
        user_service.create(User(role=UserRole.ADMIN, **values))

    assert exc.value.fields == [field]
    assert user_repo.count() == 0


def test_login_must_be_unique(user_service):
    user_service.create(User(name='Ana', login='ana', role=UserRole.ADMIN))

    with pytest.raises(ValidationError) as exc:
        user_service.create(User(name='Otra Ana', login='ANA', role=UserRole.TRIADOR))

    assert exc.value.fields == ['login']


def test_login_uniqueness_ignores_the_user_itself(user_service):
    created = user_service.create(User(name='Ana', login='ana', role=UserRole.ADMIN))
    created.name = 'Ana Souza'

    assert user_service.update(created).name == 'Ana Souza'


def test_find_by_login(user_service):
    created = user_service.create(User(name='Carla', login='carla', role=UserRole.FINALIZADOR))

    assert user_service.find_by_login('Carla') == created
    assert user_service.find_by_login('nadie') is None


def test_filter_users_by_role(user_service):
    user_service.create(User(name='Ana', login='ana', role=UserRole.ADMIN))
    user_service.create(User(name='Bruno', login='bruno', role=UserRole.TRIADOR))
    user_service.create(User(name='Carla', login='carla', role=UserRole.TRIADOR))

    page = user_service.filter({'role': 'triador'})

    assert [u.login for u in page.content] == ['bruno', 'carla']


def test_password_cannot_be_filtered(user_service):
    user_service.create(User(name='Ana', login='ana', password='secreto1', role=UserRole.ADMIN))

    with pytest.raises(ValidationError) as exc:
        user_service.filter({'password': 'scrypt:'})

    assert exc.value.fields == ['password']


def test_password_cannot_be_sorted(user_service):
    with pytest.raises(ValidationError) as exc:
        user_service.filter(None, PageRequest(0, 10, ('password,desc',)))

    assert exc.value.fields == ['sort']


def test_concurrent_creates_keep_login_unique(user_service, user_repo):
    def create(i):
        try:
            user_service.create(User(name=f'Ana {i}', login='ana', role=UserRole.ADMIN))
            return True
        except ValidationError:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(create, range(8)))

    assert results.count(True) == 1
    assert user_repo.count() == 1


# ==============================================================================
# AUTENTICACIÓN
# ==============================================================================

@pytest.fixture
def bruno(user_service):
    return user_service.create(User(name='Bruno', login='bruno', password='secreto1', role=UserRole.TRIADOR))


def test_authenticate_with_valid_credentials(user_service, bruno):
    assert user_service.authenticate('bruno', 'secreto1') == bruno


@pytest.mark.parametrize('login, password', [
    ('bruno', 'incorrecta'),
    ('nadie', 'secreto1'),
])
def test_authenticate_with_invalid_credentials(user_service, bruno, login, password):
    assert user_service.authenticate(login, password) is None


def test_authenticate_inactive_user(user_service, bruno):
    bruno.active = False
    user_service.update(bruno)

    assert user_service.authenticate('bruno', 'secreto1') is None


def test_build_principal_uses_role_code(bruno, user_service):
    principal = user_service.build_principal(bruno)

    assert principal.username == 'bruno'
    assert principal.authorities == ('ROLE_TRIADOR',)
    assert principal.user_id == bruno.id


# ==============================================================================
# PERFILES
# ==============================================================================

def test_can_manage_users(user_service, admin_context, triador_context):
    assert user_service.can_manage_users(admin_context)
    assert not user_service.can_manage_users(triador_context)


def test_can_manage_users_requires_authentication(user_service):
    with pytest.raises(AuthenticationError):
        user_service.can_manage_users(SecurityContext.anonymous())
