# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Este módulo proporciona una forma centralizada de obtener instancias
# de repositorios y servicios. Facilita:
#   - Inyección de dependencias
#   - Testing (se pueden reemplazar los repositorios)
#   - Migración gradual (cambiar repos sin tocar servicios)
#
# Para migrar de JSON a una base de datos basta con crear un repositorio
# que implemente IUserRepository y cambiar la instanciación de user_repo.
# ==============================================================================

import logging
from typing import Optional

from sisprocesos import config
from sisprocesos.repositories import UserRepository
from sisprocesos.services import UserService

logger = logging.getLogger(__name__)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Implementa el patrón Singleton para asegurar una única instancia
    de cada repositorio y servicio.

    Uso:
        container = AppContainer(base_path='/var/lib/sisprocesos')
        user_service = container.user_service
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls, base_path: str = None):
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, base_path: str = None):
        """
        Inicializa el contenedor.

        Args:
            base_path: Carpeta de datos (por defecto config.DATA_DIR)
        """
        if self._initialized:
            return

        self._base_path = base_path or config.DATA_DIR

        # Inicialización lazy
        self._user_repo: Optional[UserRepository] = None
        self._user_service: Optional[UserService] = None

        self._initialized = True
        logger.debug('[CONTENEDOR] Datos en %s', self._base_path)

    @property
    def base_path(self) -> str:
        return self._base_path

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def user_repo(self) -> UserRepository:
        """Repositorio de usuarios (singleton)."""
        if self._user_repo is None:
            self._user_repo = UserRepository(self._base_path)
        return self._user_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def user_service(self) -> UserService:
        """Servicio de usuarios (singleton)."""
        if self._user_service is None:
            self._user_service = UserService(self.user_repo)
        return self._user_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """
        Reinicia todas las instancias.
        Útil para testing o para recargar datos.
        """
        self._user_repo = None
        self._user_service = None

    @classmethod
    def get_instance(cls, base_path: str = None) -> 'AppContainer':
        """
        Obtiene la instancia singleton del contenedor.

        Args:
            base_path: Carpeta de datos (solo se usa en la primera llamada)
        """
        if cls._instance is None:
            return cls(base_path)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia singleton (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container(base_path: str = None) -> AppContainer:
    """
    Obtiene el contenedor de dependencias global.

    Args:
        base_path: Carpeta de datos
    """
    return AppContainer.get_instance(base_path)
