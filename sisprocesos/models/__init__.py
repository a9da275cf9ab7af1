# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Este módulo define las entidades del dominio usando dataclasses y las
# restricciones declarativas de sus campos.
#   - Type hints para documentación y serialización
#   - Validación explícita con validate_entity()
#   - Independiente del mecanismo de persistencia
# ==============================================================================

from .constraints import (
    Constraint,
    InstanceOf,
    NotBlank,
    NotNull,
    Past,
    Pattern,
    Size,
    constraints,
    validate_entity,
)
from .entities import (
    BaseEntity,
    User,
    UserRole,
)

__all__ = [
    # Entidades
    'BaseEntity',
    'User',
    'UserRole',

    # Validación
    'Constraint',
    'InstanceOf',
    'NotBlank',
    'NotNull',
    'Past',
    'Pattern',
    'Size',
    'constraints',
    'validate_entity',
]
