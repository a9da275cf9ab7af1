# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso a datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia (actualmente JSON).
# Para migrar a una base de datos, solo hay que modificar esta capa.
#
# ESTRUCTURA:
# ├── interfaces.py       → Protocolos (contratos que usan los servicios)
# ├── pagination.py       → PageRequest, Page, Order
# ├── filters.py          → Filtro {campo: valor} y ordenamiento
# ├── base.py             → BaseRepository (JSON) y EntityRepository (CRUD)
# └── user_repository.py  → Acceso a usuarios.json
# ==============================================================================

from .interfaces import ICrudRepository, IUserRepository
from .pagination import Direction, Order, Page, PageRequest, paginate
from .filters import apply_sort, build_predicate, parse_criteria, validate_sort
from .base import BaseRepository, EntityRepository
from .user_repository import UserRepository

__all__ = [
    # Interfaces
    'ICrudRepository',
    'IUserRepository',

    # Paginación y filtros
    'Direction',
    'Order',
    'Page',
    'PageRequest',
    'paginate',
    'apply_sort',
    'build_predicate',
    'parse_criteria',
    'validate_sort',

    # Implementaciones JSON
    'BaseRepository',
    'EntityRepository',
    'UserRepository',
]
