# ==============================================================================
# RESTRICCIONES DE CAMPOS - Validación declarativa
# ==============================================================================
# Cada entidad declara sus restricciones en la metadata del campo:
#
#   name: Optional[str] = field(default=None, metadata=constraints(
#       NotBlank(), Size(max=120)
#   ))
#
# validate_entity() recorre los campos en orden de declaración y devuelve
# la lista de violaciones. Es una función pura: no modifica la entidad.
#
# Salvo NotNull y NotBlank, las restricciones ignoran valores None
# (un campo opcional vacío siempre es válido).
# ==============================================================================

import re
from collections.abc import Sized
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional

from sisprocesos.exceptions import FieldError

# Claves usadas en dataclasses.field(metadata=...)
CONSTRAINTS_KEY = 'constraints'
FILTERABLE_KEY = 'filterable'


class Constraint:
    """Restricción base. Las subclases implementan _check()."""

    message = 'valor inválido'

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message

    def check(self, value: Any) -> Optional[str]:
        """
        Evalúa la restricción.

        Args:
            value: Valor actual del campo

        Returns:
            Mensaje de error, o None si el valor es válido
        """
        if value is None:
            return None
        return None if self._check(value) else self.message

    def _check(self, value: Any) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f'{type(self).__name__}()'


class NotNull(Constraint):
    message = 'es obligatorio'

    def check(self, value: Any) -> Optional[str]:
        return self.message if value is None else None


class NotBlank(Constraint):
    """Obligatorio y, si es texto, con al menos un carácter no blanco."""

    message = 'es obligatorio'

    def check(self, value: Any) -> Optional[str]:
        if value is None:
            return self.message
        if isinstance(value, str) and not value.strip():
            return self.message
        return None


class Size(Constraint):
    """Longitud mínima/máxima (texto o colecciones)."""

    def __init__(self, min: int = 0, max: Optional[int] = None, message: Optional[str] = None):
        self.min = min
        self.max = max
        if message is None:
            if max is None:
                message = f'debe tener al menos {min} caracteres'
            elif min:
                message = f'debe tener entre {min} y {max} caracteres'
            else:
                message = f'debe tener como máximo {max} caracteres'
        super().__init__(message)

    def _check(self, value: Any) -> bool:
        if not isinstance(value, Sized):
            return False
        length = len(value)
        if length < self.min:
            return False
        return self.max is None or length <= self.max

    def __repr__(self) -> str:
        return f'Size(min={self.min}, max={self.max})'


class Pattern(Constraint):
    """El texto completo debe coincidir con la expresión regular."""

    message = 'formato inválido'

    def __init__(self, regex: str, message: Optional[str] = None):
        self.regex = re.compile(regex)
        super().__init__(message)

    def _check(self, value: Any) -> bool:
        return isinstance(value, str) and self.regex.fullmatch(value) is not None

    def __repr__(self) -> str:
        return f'Pattern({self.regex.pattern!r})'


class Past(Constraint):
    """Fecha estrictamente anterior a hoy."""

    message = 'debe ser una fecha pasada'

    def __init__(self, message: Optional[str] = None, today: Optional[Callable[[], date]] = None):
        self._today = today or date.today
        super().__init__(message)

    def _check(self, value: Any) -> bool:
        if isinstance(value, datetime):
            value = value.date()
        if not isinstance(value, date):
            return False
        return value < self._today()


class InstanceOf(Constraint):
    """El valor debe ser del tipo indicado (ej: un Enum)."""

    def __init__(self, *types: type, message: Optional[str] = None):
        self.types = types
        names = ', '.join(t.__name__ for t in types)
        super().__init__(message or f'debe ser de tipo {names}')

    def _check(self, value: Any) -> bool:
        return isinstance(value, self.types)


def constraints(*items: Constraint, filterable: bool = True) -> Dict[str, Any]:
    """
    Construye la metadata de un campo con sus restricciones.

    Args:
        items: Restricciones, evaluadas en orden
        filterable: False si el campo no puede usarse en filtros ni en orden
    """
    return {CONSTRAINTS_KEY: tuple(items), FILTERABLE_KEY: filterable}


def validate_entity(entity: Any) -> List[FieldError]:
    """
    Valida una entidad contra las restricciones declaradas en sus campos.

    Por cada campo se reporta solo la primera restricción violada, para
    no repetir mensajes sobre el mismo valor.

    Args:
        entity: Instancia de un dataclass

    Returns:
        Lista ordenada de FieldError (vacía si la entidad es válida)
    """
    if not is_dataclass(entity):
        raise TypeError(f'{type(entity).__name__} no es una entidad (dataclass)')

    violations: List[FieldError] = []
    for f in fields(entity):
        for constraint in f.metadata.get(CONSTRAINTS_KEY, ()):
            message = constraint.check(getattr(entity, f.name))
            if message:
                violations.append(FieldError(f.name, message))
                break
    return violations
