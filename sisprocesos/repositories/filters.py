# ==============================================================================
# FILTROS Y ORDEN - Criterios de búsqueda sobre entidades
# ==============================================================================
# Un filtro es un diccionario {campo: valor} (o el mismo objeto en JSON).
# Reglas de coincidencia (todas las claves deben cumplirse, AND):
#   - valor None           → el criterio se ignora
#   - lista / tupla / set  → coincide con CUALQUIERA de los elementos
#   - texto sobre texto    → "contiene", sin distinguir mayúsculas
#   - campo enum           → por miembro, nombre o código
#   - campo fecha + texto  → se interpreta como fecha ISO (YYYY-MM-DD)
#   - cualquier otro caso  → igualdad
# Los campos declarados con filterable=False (ej: password) se rechazan
# tanto en el filtro como en el orden.
# ==============================================================================

import json
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Type, Union, get_type_hints

from sisprocesos.exceptions import ValidationError
from sisprocesos.models.entities import E, unwrap_optional
from sisprocesos.repositories.pagination import Direction, PageRequest

Criteria = Union[Mapping[str, Any], str, None]
Predicate = Callable[[Any], bool]

_MULTI = (list, tuple, set, frozenset)


def parse_criteria(criteria: Criteria) -> Dict[str, Any]:
    """
    Normaliza el filtro a diccionario, descartando valores None.

    Raises:
        ValidationError: Si el texto no es JSON válido o no es un objeto
    """
    if criteria is None:
        return {}
    if isinstance(criteria, str):
        if not criteria.strip():
            return {}
        try:
            criteria = json.loads(criteria)
        except json.JSONDecodeError:
            raise ValidationError('filter', 'el filtro no es un JSON válido')
    if not isinstance(criteria, Mapping):
        raise ValidationError('filter', 'el filtro debe ser un objeto {campo: valor}')
    return {k: v for k, v in criteria.items() if v is not None}


def _coerce_date(field_name: str, value: Any) -> Any:
    if isinstance(value, _MULTI):
        return [_coerce_date(field_name, v) for v in value]
    if isinstance(value, str):
        try:
            return date.fromisoformat(value)
        except ValueError:
            raise ValidationError(field_name, f'fecha inválida: {value}')
    return value


def _matches(actual: Any, expected: Any) -> bool:
    if isinstance(expected, _MULTI):
        return any(_matches(actual, item) for item in expected)
    if isinstance(actual, Enum):
        if isinstance(expected, Enum):
            return actual is expected
        text = str(expected).strip().upper()
        return text in (actual.name.upper(), str(actual.value).upper())
    if isinstance(actual, bool) or isinstance(expected, bool):
        return actual is expected
    if isinstance(actual, str) and isinstance(expected, str):
        return expected.casefold() in actual.casefold()
    return actual == expected


def build_predicate(entity_class: Type[E], criteria: Criteria) -> Optional[Predicate]:
    """
    Construye el predicado para un filtro.

    Args:
        entity_class: Clase de la entidad filtrada
        criteria: Diccionario o JSON {campo: valor}

    Returns:
        Función entidad -> bool, o None si no hay criterios

    Raises:
        ValidationError: Campo desconocido o valor con formato inválido
    """
    parsed = parse_criteria(criteria)
    if not parsed:
        return None

    known = set(entity_class.field_names())
    filterable = set(entity_class.filterable_fields())
    errors = []
    for name in parsed:
        if name not in known:
            errors.append((name, 'campo de filtro desconocido'))
        elif name not in filterable:
            errors.append((name, 'el campo no admite filtros'))
    if errors:
        raise ValidationError(errors)

    hints = get_type_hints(entity_class)
    expected: Dict[str, Any] = {}
    for name, value in parsed.items():
        tp = unwrap_optional(hints.get(name))
        if isinstance(tp, type) and issubclass(tp, date) and not issubclass(tp, datetime):
            value = _coerce_date(name, value)
        expected[name] = value

    def predicate(entity: Any) -> bool:
        return all(_matches(getattr(entity, name), value) for name, value in expected.items())

    return predicate


def validate_sort(entity_class: Type[E], page_request: PageRequest) -> None:
    """
    Verifica que los campos de orden existan en la entidad y admitan orden.

    Raises:
        ValidationError: field='sort' si algún campo no existe o no es filtrable
    """
    known = set(entity_class.filterable_fields())
    for order in page_request.sort:
        if order.property not in known:
            raise ValidationError('sort', f'campo de orden no admitido: {order.property}')


def _sort_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, str):
        return value.casefold()
    return value


def apply_sort(items: Sequence[E], page_request: PageRequest) -> List[E]:
    """
    Ordena según los criterios de la solicitud (el primero es el principal).
    Los valores None quedan siempre al final.
    """
    result = list(items)
    for order in reversed(page_request.sort):
        present = [e for e in result if getattr(e, order.property) is not None]
        missing = [e for e in result if getattr(e, order.property) is None]
        present.sort(
            key=lambda e: _sort_value(getattr(e, order.property)),
            reverse=order.direction == Direction.DESC
        )
        result = present + missing
    return result
