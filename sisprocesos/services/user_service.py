# ==============================================================================
# SERVICIO DE USUARIOS
# ==============================================================================
# CRUD de usuarios sobre AbstractCrudService, más:
# - Login único (regla de negocio, se reporta junto a los errores de campos)
# - Hash de contraseña con werkzeug antes de guardar
# - Autenticación por login/contraseña
# - Construcción del Principal que se guarda en la sesión
#
# El servicio NO conoce el tipo de almacenamiento: solo usa la interfaz
# IUserRepository (JSON ahora, base de datos después).
# ==============================================================================

import logging
from typing import List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from sisprocesos import config
from sisprocesos.exceptions import FieldError
from sisprocesos.models.constraints import validate_entity
from sisprocesos.models.entities import User, UserRole
from sisprocesos.performance_logger import profile_function
from sisprocesos.repositories.user_repository import UserRepository
from sisprocesos.security.context import Principal, SecurityContext
from sisprocesos.services.crud_service import AbstractCrudService, Validator

logger = logging.getLogger(__name__)


class UserService(AbstractCrudService[User, int, UserRepository]):
    """
    Servicio para gestión de usuarios.

    Responsabilidades:
    - CRUD de usuarios (heredado)
    - Autenticación
    - Verificación de perfiles del usuario autenticado
    """

    def __init__(self, user_repo: UserRepository, validator: Validator = validate_entity):
        """
        Inicializa el servicio de usuarios.

        Args:
            user_repo: Repositorio de usuarios
            validator: Validador de entidades (por defecto validate_entity)
        """
        super().__init__(User, user_repo, validator)

    # =========================================================================
    # PUNTOS DE EXTENSIÓN DEL CRUD
    # =========================================================================

    def _validate_business_rules(self, user: User) -> List[FieldError]:
        errors = []
        if isinstance(user.login, str) and user.login.strip() and self.repository.login_exists(user.login, exclude_id=user.id):
            errors.append(FieldError('login', 'ya está en uso por otro usuario'))
        return errors

    def _prepare_for_save(self, user: User) -> None:
        if not user.password:
            return
        # La contraseña almacenada para este id se guarda tal cual; cualquier otro valor es texto plano
        stored = self.repository.find_by_id(user.id) if user.id is not None else None
        if stored is None or user.password != stored.password:
            user.password = generate_password_hash(user.password, method=config.PASSWORD_HASH_METHOD)

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def find_by_login(self, login: str) -> Optional[User]:
        """
        Obtiene un usuario por login.

        Returns:
            Usuario o None
        """
        return self.repository.find_by_login(login)

    # =========================================================================
    # AUTENTICACIÓN
    # =========================================================================

    @profile_function(name='UserService.authenticate')
    def authenticate(self, login: str, password: str) -> Optional[User]:
        """
        Autentica un usuario.

        Args:
            login: Nombre de acceso
            password: Contraseña en texto plano

        Returns:
            Usuario si las credenciales son válidas y está activo, None si no
        """
        user = self.repository.find_by_login(login)
        if user is None:
            logger.info('[USUARIOS] Login fallido: %s no existe', login)
            return None
        if not user.active:
            logger.info('[USUARIOS] Login rechazado: %s está inactivo', login)
            return None
        if not user.password or not check_password_hash(user.password, password):
            logger.info('[USUARIOS] Login fallido: contraseña incorrecta para %s', login)
            return None
        logger.info('[USUARIOS] Login correcto: %s', login)
        return user

    @staticmethod
    def build_principal(user: User) -> Principal:
        """Principal con el código del perfil del usuario como autoridad."""
        authorities = (user.role.code,) if user.role else ()
        return Principal(username=user.login, authorities=authorities, user_id=user.id)

    # =========================================================================
    # AUTORIZACIÓN
    # =========================================================================

    def can_manage_users(self, context: SecurityContext) -> bool:
        """
        Solo administradores gestionan usuarios.

        Raises:
            AuthenticationError: Si no hay usuario autenticado
        """
        return self.has_role(UserRole.ADMIN, context)
