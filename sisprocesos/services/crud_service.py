# ==============================================================================
# SERVICIO CRUD GENÉRICO
# ==============================================================================
# Operaciones y comportamientos por defecto para los servicios de CRUD.
#
# Flujo de cada operación:
#   llamada → validación (id + restricciones + reglas de negocio)
#           → repositorio → resultado (o ValidationError)
#
# Lo que este servicio NO hace:
# - No envuelve ni reintenta errores del repositorio (se propagan tal cual)
# - No verifica existencia antes de eliminar (lo decide el repositorio)
# - No controla versiones: dos update() sobre el mismo id → gana el último
#   (create/update sí se serializan entre sí, ver _write_lock)
# ==============================================================================

import logging
import threading
from typing import Any, Callable, Generic, Iterable, List, Optional, Type, TypeVar

from sisprocesos import config
from sisprocesos.exceptions import FieldError, ValidationError
from sisprocesos.models.constraints import validate_entity
from sisprocesos.models.entities import E
from sisprocesos.performance_logger import profile_function
from sisprocesos.repositories.filters import Criteria, build_predicate, validate_sort
from sisprocesos.repositories.interfaces import ICrudRepository
from sisprocesos.repositories.pagination import Page, PageRequest
from sisprocesos.security.context import Principal, SecurityContext

logger = logging.getLogger(__name__)

ID = TypeVar('ID')
R = TypeVar('R', bound=ICrudRepository)

Validator = Callable[[Any], List[FieldError]]


class AbstractCrudService(Generic[E, ID, R]):
    """
    Servicio base con las operaciones CRUD de una entidad.

    Las subclases indican la entidad y el repositorio:

        class UserService(AbstractCrudService[User, int, UserRepository]):
            def __init__(self, user_repo):
                super().__init__(User, user_repo)

    y pueden extender dos puntos:
    - _validate_business_rules(): violaciones adicionales (ej: login único)
    - _prepare_for_save(): ajustes previos al guardado (ej: hash de contraseña)
    """

    # Validación + guardado como una sola sección crítica (ej: login único)
    _write_lock = threading.RLock()

    def __init__(
        self,
        entity_class: Type[E],
        repository: R,
        validator: Validator = validate_entity
    ):
        """
        Args:
            entity_class: Clase de la entidad gestionada
            repository: Repositorio que implementa ICrudRepository
            validator: Función entidad -> lista de FieldError
        """
        self.entity_class = entity_class
        self.repository = repository
        self.validator = validator

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    @profile_function
    def filter(self, criteria: Criteria, page_request: Optional[PageRequest] = None) -> Page[E]:
        """
        Busca entidades que cumplen el filtro y retorna una página.

        Args:
            criteria: {campo: valor} (o JSON); vacío/None → sin filtrar
            page_request: Página pedida (por defecto la primera, tamaño DEFAULT_PAGE_SIZE)

        Returns:
            Página de resultados

        Raises:
            ValidationError: Campo de filtro u orden desconocido
        """
        if page_request is None:
            page_request = PageRequest(0, config.DEFAULT_PAGE_SIZE)
        page_request = page_request.with_max_size(config.MAX_PAGE_SIZE)
        validate_sort(self.entity_class, page_request)
        predicate = build_predicate(self.entity_class, criteria)
        return self.repository.find_page(page_request, predicate)

    @profile_function
    def find_by_id(self, entity_id: ID) -> Optional[E]:
        """Entidad con el id dado, o None si no existe."""
        return self.repository.find_by_id(entity_id)

    @profile_function
    def find_by_ids(self, ids: Iterable[ID]) -> List[E]:
        """Entidades existentes entre los ids dados (los ausentes se omiten)."""
        return self.repository.find_all_by_id(list(ids))

    @profile_function
    def find_all(self) -> List[E]:
        """Todas las entidades, sin paginar."""
        return self.repository.find_all()

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    @profile_function
    def create(self, entity: E) -> E:
        """
        Realiza el registro de la entidad informada.

        Args:
            entity: Entidad a registrar

        Returns:
            Entidad recién registrada con el ID generado

        Raises:
            ValidationError: Si algún campo es inválido (no se guarda nada)
        """
        with self._write_lock:
            self._validate_entity(entity)
            self._prepare_for_save(entity)
            saved = self.repository.save(entity)
        logger.info('[CRUD] %s %s creado', self.entity_class.__name__, saved.id)
        return saved

    @profile_function
    def update(self, entity: E) -> E:
        """
        Realiza la alteración de la entidad informada.

        Args:
            entity: Entidad con los nuevos valores (debe tener id)

        Returns:
            Entidad recién alterada

        Raises:
            ValidationError: Sin id (field='id') o con campos inválidos
        """
        self._validate_id(entity)
        with self._write_lock:
            self._validate_entity(entity)
            self._prepare_for_save(entity)
            saved = self.repository.save(entity)
        logger.info('[CRUD] %s %s alterado', self.entity_class.__name__, saved.id)
        return saved

    @profile_function
    def delete(self, entity_id: ID) -> None:
        """
        Realiza la exclusión de la entidad informada.

        Args:
            entity_id: ID de la entidad a excluir
        """
        self.repository.delete_by_id(entity_id)
        logger.info('[CRUD] %s %s eliminado', self.entity_class.__name__, entity_id)

    # =========================================================================
    # VALIDACIÓN
    # =========================================================================

    def _validate_id(self, entity: E) -> None:
        """Valida que la entidad informada tenga clave primaria definida."""
        if entity.id is None:
            raise ValidationError('id', 'El campo ID es obligatorio')

    def _validate_entity(self, entity: E) -> None:
        """
        Verifica si la entidad informada es válida.
        Reúne las violaciones de campos y de reglas de negocio en un solo error.
        """
        errors = list(self.validator(entity))
        errors.extend(self._validate_business_rules(entity))
        if errors:
            logger.debug('[CRUD] %s inválido: %s', self.entity_class.__name__, errors)
            raise ValidationError(errors)

    def _validate_business_rules(self, entity: E) -> List[FieldError]:
        return []

    def _prepare_for_save(self, entity: E) -> None:
        pass

    # =========================================================================
    # AUTORIZACIÓN
    # =========================================================================

    def current_user(self, context: Optional[SecurityContext]) -> Principal:
        """
        Usuario autenticado del contexto.

        Raises:
            AuthenticationError: Si no hay usuario autenticado
        """
        if context is None:
            context = SecurityContext.anonymous()
        return context.require_principal()

    def has_role(self, role: Any, context: Optional[SecurityContext]) -> bool:
        """
        True si alguna autoridad del usuario es exactamente el código del perfil.

        Args:
            role: Perfil (con atributo code) o código en texto
            context: Contexto de seguridad de la llamada

        Raises:
            AuthenticationError: Si no hay usuario autenticado
        """
        code = getattr(role, 'code', role)
        return self.current_user(context).has_authority(code)
