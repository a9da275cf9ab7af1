# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# PRINCIPIOS:
# 1. Los servicios validan y delegan en repositorios
# 2. Los servicios NO conocen el tipo de almacenamiento (dependen de interfaces)
# 3. La autorización recibe el SecurityContext de forma explícita
#
# ESTRUCTURA:
# ├── crud_service.py  → AbstractCrudService (CRUD genérico + autorización)
# └── user_service.py  → Usuarios, autenticación, perfiles
# ==============================================================================

from sisprocesos.services.crud_service import AbstractCrudService
from sisprocesos.services.user_service import UserService

__all__ = [
    'AbstractCrudService',
    'UserService',
]
