# ==============================================================================
# SISPROCESOS - Capa de servicios CRUD
# ==============================================================================
# ESTRUCTURA:
# ├── models/          → Entidades (dataclasses) y restricciones de campos
# ├── repositories/    → Persistencia JSON, paginación y filtros
# ├── services/        → CRUD genérico y servicio de usuarios
# ├── security/        → Principal y contexto de seguridad (sesión Flask)
# ├── app_container.py → Inyección de dependencias
# ├── config.py        → Configuración desde variables de entorno
# ├── logging_config.py
# └── performance_logger.py
# ==============================================================================

__version__ = '1.0.0'
