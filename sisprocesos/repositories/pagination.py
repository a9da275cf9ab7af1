# ==============================================================================
# PAGINACIÓN - Solicitud de página, orden y resultado paginado
# ==============================================================================
# PageRequest describe QUÉ página se pide (número base 0, tamaño, orden).
# Page es el resultado: contenido + total de registros que cumplen el filtro.
# ==============================================================================

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from sisprocesos.exceptions import ValidationError

T = TypeVar('T')
R = TypeVar('R')


class Direction(str, Enum):
    """Dirección de ordenamiento."""
    ASC = 'ASC'
    DESC = 'DESC'


@dataclass(frozen=True)
class Order:
    """
    Criterio de orden sobre un campo.

    Attributes:
        property: Nombre del campo de la entidad
        direction: ASC o DESC
    """
    property: str
    direction: Direction = Direction.ASC

    @classmethod
    def asc(cls, prop: str) -> 'Order':
        return cls(prop, Direction.ASC)

    @classmethod
    def desc(cls, prop: str) -> 'Order':
        return cls(prop, Direction.DESC)

    @classmethod
    def parse(cls, expression: str) -> 'Order':
        """
        Interpreta 'campo' o 'campo,desc' (formato usual en query strings).

        Raises:
            ValidationError: Si la dirección no es asc/desc
        """
        prop, _, direction = expression.partition(',')
        direction = (direction or 'ASC').strip().upper()
        if direction not in Direction.__members__:
            raise ValidationError('sort', f'dirección de orden inválida: {direction}')
        return cls(prop.strip(), Direction[direction])


@dataclass(frozen=True)
class PageRequest:
    """
    Solicitud de una página.

    Attributes:
        page: Número de página (base 0)
        size: Cantidad de registros por página
        sort: Criterios de orden, aplicados en secuencia
    """
    page: int = 0
    size: int = 20
    sort: Tuple[Order, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.page < 0:
            raise ValidationError('page', 'el número de página no puede ser negativo')
        if self.size < 1:
            raise ValidationError('size', 'el tamaño de página debe ser al menos 1')
        # Aceptar listas u Order sueltos como 'campo,desc'
        object.__setattr__(self, 'sort', tuple(
            Order.parse(o) if isinstance(o, str) else o for o in self.sort
        ))

    @classmethod
    def of(cls, page: int, size: int, *sort: Any) -> 'PageRequest':
        return cls(page, size, tuple(sort))

    @property
    def offset(self) -> int:
        return self.page * self.size

    def next(self) -> 'PageRequest':
        return PageRequest(self.page + 1, self.size, self.sort)

    def previous_or_first(self) -> 'PageRequest':
        return PageRequest(max(0, self.page - 1), self.size, self.sort)

    def with_max_size(self, max_size: int) -> 'PageRequest':
        """Devuelve la misma solicitud con el tamaño limitado a max_size."""
        if self.size <= max_size:
            return self
        return PageRequest(self.page, max_size, self.sort)


@dataclass
class Page(Generic[T]):
    """
    Resultado paginado.

    Attributes:
        content: Registros de esta página
        page_request: Solicitud que produjo la página
        total_elements: Total de registros (todas las páginas)
    """
    content: List[T]
    page_request: PageRequest
    total_elements: int

    @property
    def number(self) -> int:
        return self.page_request.page

    @property
    def size(self) -> int:
        return self.page_request.size

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size)

    @property
    def number_of_elements(self) -> int:
        return len(self.content)

    @property
    def is_first(self) -> bool:
        return self.number == 0

    @property
    def is_last(self) -> bool:
        return not self.has_next

    @property
    def has_next(self) -> bool:
        return self.number + 1 < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.number > 0

    def map(self, fn: Callable[[T], R]) -> 'Page[R]':
        """Aplica fn a cada elemento conservando los datos de paginación."""
        return Page([fn(item) for item in self.content], self.page_request, self.total_elements)

    def to_dict(self, serializer: Optional[Callable[[T], Any]] = None) -> Dict[str, Any]:
        """
        Convierte a diccionario (formato de respuesta paginada).

        Args:
            serializer: Función para convertir cada elemento (por defecto to_dict())
        """
        if serializer is None:
            serializer = lambda item: item.to_dict() if hasattr(item, 'to_dict') else item
        return {
            'content': [serializer(item) for item in self.content],
            'number': self.number,
            'size': self.size,
            'total_elements': self.total_elements,
            'total_pages': self.total_pages,
            'first': self.is_first,
            'last': self.is_last,
        }


def paginate(items: Sequence[T], page_request: PageRequest) -> Page[T]:
    """Corta una secuencia ya filtrada y ordenada según page_request."""
    start = page_request.offset
    return Page(list(items[start:start + page_request.size]), page_request, len(items))
