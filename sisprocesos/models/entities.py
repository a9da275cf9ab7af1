# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Diseñadas para ser independientes del mecanismo de persistencia.
#
# Todas heredan de BaseEntity, que define el contrato de identidad:
#   - id es None antes de persistir
#   - el repositorio asigna el id en el primer save()
#   - después de asignado, el repositorio nunca lo cambia
# ==============================================================================

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar, Union, get_args, get_origin, get_type_hints

from sisprocesos.models.constraints import (
    FILTERABLE_KEY, InstanceOf, NotBlank, NotNull, Past, Pattern, Size, constraints,
)

E = TypeVar('E', bound='BaseEntity')


# ==============================================================================
# ENUMERACIONES
# ==============================================================================

class UserRole(str, Enum):
    """
    Perfiles de usuario disponibles en el sistema.
    Se persisten por NOMBRE; el valor es el código de autoridad
    que se compara contra las autoridades del usuario autenticado.
    """
    ADMIN = 'ROLE_ADMIN'              # Gestiona usuarios
    TRIADOR = 'ROLE_TRIADOR'          # Registra procesos y asigna responsables
    FINALIZADOR = 'ROLE_FINALIZADOR'  # Incluye pareceres en procesos asignados

    @property
    def code(self) -> str:
        """Código de autoridad (ej: 'ROLE_ADMIN')."""
        return self.value


# ==============================================================================
# SERIALIZACIÓN
# ==============================================================================

def unwrap_optional(tp: Any) -> Any:
    """Optional[X] -> X (deja intacto cualquier otro tipo)."""
    if get_origin(tp) is Union:
        args = [a for a in get_args(tp) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return tp


def _serialize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def _deserialize(tp: Any, value: Any) -> Any:
    if value is None:
        return None
    tp = unwrap_optional(tp)
    if not isinstance(tp, type):
        return value

    if issubclass(tp, Enum):
        if isinstance(value, tp):
            return value
        try:
            return tp[value]
        except KeyError:
            pass
        try:
            return tp(value)
        except ValueError:
            # Valor desconocido: queda None y la validación lo reportará
            return None

    # datetime antes que date (datetime es subclase de date)
    if issubclass(tp, datetime) and isinstance(value, str):
        return datetime.fromisoformat(value)
    if issubclass(tp, date) and isinstance(value, str):
        return date.fromisoformat(value)
    return value


# ==============================================================================
# ENTIDAD BASE
# ==============================================================================

@dataclass
class BaseEntity:
    """
    Entidad persistible con identificador.

    Attributes:
        id: Identificador asignado por el repositorio (None si aún no se guardó)
    """
    id: Optional[Any] = None

    def is_new(self) -> bool:
        """True si la entidad todavía no fue persistida."""
        return self.id is None

    def to_dict(self) -> Dict[str, Any]:
        """
        Convierte a diccionario para persistencia.
        Fechas en ISO-8601 y enums por nombre.
        """
        return {f.name: _serialize(getattr(self, f.name)) for f in fields(self)}

    @classmethod
    def from_dict(cls: Type[E], data: Dict[str, Any]) -> E:
        """
        Crea instancia desde diccionario.
        Las claves desconocidas se ignoran; las ausentes toman el default.
        """
        hints = get_type_hints(cls)
        kwargs = {}
        for f in fields(cls):
            if f.name in data:
                kwargs[f.name] = _deserialize(hints.get(f.name, Any), data[f.name])
        return cls(**kwargs)

    @classmethod
    def field_names(cls) -> tuple:
        """Nombres de los campos persistidos, en orden de declaración."""
        return tuple(f.name for f in fields(cls))

    @classmethod
    def filterable_fields(cls) -> tuple:
        """Campos admitidos en filtros y orden (excluye los marcados filterable=False)."""
        return tuple(f.name for f in fields(cls) if f.metadata.get(FILTERABLE_KEY, True))


# ==============================================================================
# ENTIDADES DE USUARIO
# ==============================================================================

@dataclass
class User(BaseEntity):
    """
    Representa un usuario del sistema.

    Attributes:
        id: Identificador numérico generado
        name: Nombre completo
        document_id: CPF (11 dígitos)
        phone: Teléfono de contacto
        birthdate: Fecha de nacimiento
        address: Dirección
        active: Si el usuario puede iniciar sesión
        login: Nombre de acceso (único)
        password: Hash de la contraseña (nunca texto plano una vez guardado)
        role: Perfil del usuario que define sus permisos
    """
    id: Optional[int] = None
    name: Optional[str] = field(default=None, metadata=constraints(
        NotBlank(), Size(max=120)
    ))
    document_id: Optional[str] = field(default=None, metadata=constraints(
        Pattern(r'\d{11}', 'debe contener 11 dígitos')
    ))
    phone: Optional[str] = field(default=None, metadata=constraints(
        Pattern(r'[0-9 +()\-]{8,20}', 'teléfono inválido')
    ))
    birthdate: Optional[date] = field(default=None, metadata=constraints(Past()))
    address: Optional[str] = field(default=None, metadata=constraints(Size(max=255)))
    active: bool = True
    login: Optional[str] = field(default=None, metadata=constraints(
        NotBlank(),
        Size(min=3, max=50),
        Pattern(r'[A-Za-z0-9_.\-]+', 'solo letras, números, punto, guion y guion bajo')
    ))
    password: Optional[str] = field(default=None, repr=False, metadata=constraints(
        Size(min=6), filterable=False
    ))
    role: Optional[UserRole] = field(default=None, metadata=constraints(
        NotNull(), InstanceOf(UserRole, message='perfil inválido')
    ))

    def is_admin(self) -> bool:
        """Verifica si el usuario tiene perfil de administrador."""
        return self.role == UserRole.ADMIN

    def to_public_dict(self) -> Dict[str, Any]:
        """Como to_dict() pero sin la contraseña."""
        data = self.to_dict()
        data.pop('password', None)
        return data
