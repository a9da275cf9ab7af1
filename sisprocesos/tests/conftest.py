import pytest
from flask import Flask

from sisprocesos import performance_logger
from sisprocesos.app_container import AppContainer
from sisprocesos.repositories import UserRepository
from sisprocesos.security import Principal, SecurityContext
from sisprocesos.services import UserService


@pytest.fixture(autouse=True)
def _isolate_profiling(tmp_path, monkeypatch):
    # Los logs de llamadas lentas van a una carpeta temporal
    monkeypatch.setattr(performance_logger, 'LOGS_DIR', str(tmp_path / 'logs'))
    performance_logger.reset_stats()
    yield
    performance_logger.reset_stats()


@pytest.fixture(autouse=True)
def _reset_container():
    AppContainer.reset_instance()
    yield
    AppContainer.reset_instance()


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / 'data'
    path.mkdir()
    return str(path)


@pytest.fixture
def user_repo(data_dir):
    return UserRepository(data_dir)


@pytest.fixture
def user_service(user_repo):
    return UserService(user_repo)


@pytest.fixture
def admin_context():
    return SecurityContext(Principal('ana', ('ROLE_ADMIN',), 1))


@pytest.fixture
def triador_context():
    return SecurityContext(Principal('bruno', ('ROLE_TRIADOR',), 2))


@pytest.fixture
def app():
    app = Flask(__name__)
    app.secret_key = 'test-secret'
    return app
