# ==============================================================================
# CONTEXTO DE SEGURIDAD - Usuario autenticado de la llamada actual
# ==============================================================================
# Los servicios NO leen estado global: reciben un SecurityContext explícito.
# La sesión Flask es solo UNA fuente posible del contexto:
#
#   context = SecurityContext.from_session()
#   if user_service.can_manage_users(context):
#       ...
#
# Claves usadas en la sesión (mismas que el login clásico):
#   session["user"]         → login del usuario
#   session["user_id"]      → id del usuario
#   session["authorities"]  → lista de códigos (ej: ["ROLE_ADMIN"])
# ==============================================================================

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from flask import Flask, has_request_context, session

from sisprocesos import config
from sisprocesos.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

SESSION_USER_KEY = 'user'
SESSION_USER_ID_KEY = 'user_id'
SESSION_AUTHORITIES_KEY = 'authorities'


@dataclass(frozen=True)
class Principal:
    """
    Identidad autenticada.

    Attributes:
        username: Login del usuario
        authorities: Códigos de autoridad concedidos (ej: 'ROLE_ADMIN')
        user_id: ID del usuario en el repositorio (opcional)
    """
    username: str
    authorities: Tuple[str, ...] = ()
    user_id: Optional[Any] = None

    def __post_init__(self):
        object.__setattr__(self, 'authorities', tuple(self.authorities))

    def has_authority(self, code: str) -> bool:
        """Comparación exacta de texto contra las autoridades concedidas."""
        return any(authority == code for authority in self.authorities)


class SecurityContext:
    """Contexto de una llamada: contiene el Principal o nada (anónimo)."""

    def __init__(self, principal: Optional[Principal] = None):
        self._principal = principal

    @property
    def principal(self) -> Optional[Principal]:
        return self._principal

    @property
    def is_authenticated(self) -> bool:
        return self._principal is not None

    def require_principal(self) -> Principal:
        """
        Retorna el usuario autenticado.

        Raises:
            AuthenticationError: Si el contexto es anónimo
        """
        if self._principal is None:
            raise AuthenticationError('No hay usuario autenticado')
        return self._principal

    @classmethod
    def anonymous(cls) -> 'SecurityContext':
        return cls(None)

    @classmethod
    def from_session(cls) -> 'SecurityContext':
        """
        Construye el contexto a partir de la sesión Flask.
        Fuera de una petición, o sin login, el contexto es anónimo.
        """
        if not has_request_context():
            return cls.anonymous()
        username = session.get(SESSION_USER_KEY)
        if not username:
            return cls.anonymous()
        return cls(Principal(
            username=username,
            authorities=session.get(SESSION_AUTHORITIES_KEY) or (),
            user_id=session.get(SESSION_USER_ID_KEY)
        ))

    def __repr__(self) -> str:
        who = self._principal.username if self._principal else 'anónimo'
        return f'SecurityContext({who})'


# ==============================================================================
# SESIÓN FLASK
# ==============================================================================

def store_principal(principal: Principal) -> None:
    """
    Guarda el usuario autenticado en la sesión (requiere petición activa).
    """
    session.permanent = True  # Usa PERMANENT_SESSION_LIFETIME
    session[SESSION_USER_KEY] = principal.username
    session[SESSION_USER_ID_KEY] = principal.user_id
    session[SESSION_AUTHORITIES_KEY] = list(principal.authorities)
    logger.info('[SEGURIDAD] Sesión iniciada: %s', principal.username)


def clear_principal() -> None:
    """Elimina el usuario autenticado de la sesión."""
    username = session.pop(SESSION_USER_KEY, None)
    session.pop(SESSION_USER_ID_KEY, None)
    session.pop(SESSION_AUTHORITIES_KEY, None)
    if username:
        logger.info('[SEGURIDAD] Sesión cerrada: %s', username)


def configure_session(app: Flask) -> Flask:
    """
    Aplica la configuración de sesión a una app Flask.

    SECRET_KEY: en producción DEBE definirse via SISPROCESOS_SECRET_KEY.
    """
    if not app.secret_key:
        if config.SECRET_KEY == config._DEFAULT_SECRET:
            logger.warning('[SEGURIDAD] SISPROCESOS_SECRET_KEY no definida, usando clave de desarrollo')
        app.secret_key = config.SECRET_KEY
    app.config.update(
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE='Lax',
        PERMANENT_SESSION_LIFETIME=config.SESSION_LIFETIME,
    )
    return app


def authorities_of(roles: Iterable[Any]) -> Tuple[str, ...]:
    """Convierte perfiles (con atributo code) o textos en códigos de autoridad."""
    return tuple(getattr(role, 'code', role) for role in roles)
