# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Este archivo define las interfaces (protocolos) que los repositorios
# deben implementar. Esto permite:
#
# 1. INDEPENDENCIA DE ALMACENAMIENTO
#    - Los servicios dependen de interfaces, NO de implementaciones concretas
#    - Cambiar JSON → base de datos solo requiere nueva implementación
#
# 2. TESTING
#    - Fácil crear dobles que implementen estas interfaces
#
# ==============================================================================

from typing import Any, Callable, Iterable, List, Optional, Protocol, runtime_checkable

from sisprocesos.models.entities import User, UserRole
from sisprocesos.repositories.pagination import Page, PageRequest


@runtime_checkable
class ICrudRepository(Protocol):
    """
    Interfaz base de persistencia para una entidad.

    Contrato:
    - save() asigna id si la entidad no lo tiene y retorna lo almacenado
    - las lecturas nunca lanzan por ausencia (None / lista vacía)
    - delete_by_id() de un id inexistente depende de la implementación
    """

    def find_by_id(self, record_id: Any) -> Optional[Any]:
        """Obtiene una entidad por ID."""
        ...

    def find_all_by_id(self, ids: Iterable[Any]) -> List[Any]:
        """Obtiene las entidades existentes entre los IDs dados."""
        ...

    def find_all(self) -> List[Any]:
        """Obtiene todas las entidades."""
        ...

    def find_page(
        self,
        page_request: PageRequest,
        predicate: Optional[Callable[[Any], bool]] = None
    ) -> Page:
        """Obtiene una página, opcionalmente filtrada."""
        ...

    def save(self, entity: Any) -> Any:
        """Inserta o actualiza una entidad."""
        ...

    def delete_by_id(self, record_id: Any) -> None:
        """Elimina una entidad por ID."""
        ...


@runtime_checkable
class IUserRepository(ICrudRepository, Protocol):
    """
    Interfaz para el repositorio de usuarios.
    """

    def find_by_login(self, login: str) -> Optional[User]:
        """Obtiene un usuario por login."""
        ...

    def login_exists(self, login: str, exclude_id: Any = None) -> bool:
        """Verifica si el login ya está en uso por otro usuario."""
        ...

    def find_all_by_role(self, role: UserRole) -> List[User]:
        """Obtiene los usuarios de un perfil."""
        ...
