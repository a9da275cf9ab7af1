# ==============================================================================
# CONFIGURACIÓN - Valores leídos del entorno
# ==============================================================================
# Todas las opciones se definen como constantes de módulo. Para cambiarlas,
# exportar la variable de entorno correspondiente antes de iniciar:
#
#   export SISPROCESOS_DATA_DIR="/var/lib/sisprocesos"
#   export SISPROCESOS_LOG_LEVEL="DEBUG"
# ==============================================================================

import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return int(value)


BASE_DIR = os.path.dirname(os.path.abspath(__file__))

# ═══════════════════════════════════════════════════════════════════════════════
# PERSISTENCIA
# ═══════════════════════════════════════════════════════════════════════════════
# Carpeta donde viven los archivos JSON de cada repositorio
DATA_DIR = os.environ.get('SISPROCESOS_DATA_DIR', os.path.join(BASE_DIR, 'data'))

# ═══════════════════════════════════════════════════════════════════════════════
# LOGS Y PROFILING
# ═══════════════════════════════════════════════════════════════════════════════
LOGS_DIR = os.environ.get('SISPROCESOS_LOGS_DIR', os.path.join(BASE_DIR, 'logs'))
LOG_LEVEL = os.environ.get('SISPROCESOS_LOG_LEVEL', 'INFO').upper()
LOG_FORMAT = os.environ.get('SISPROCESOS_LOG_FORMAT', 'text').lower()  # text | json
ENABLE_PROFILING = _env_bool('SISPROCESOS_PROFILING', True)

# ═══════════════════════════════════════════════════════════════════════════════
# PAGINACIÓN
# ═══════════════════════════════════════════════════════════════════════════════
DEFAULT_PAGE_SIZE = _env_int('SISPROCESOS_DEFAULT_PAGE_SIZE', 20)
MAX_PAGE_SIZE = _env_int('SISPROCESOS_MAX_PAGE_SIZE', 100)

# ═══════════════════════════════════════════════════════════════════════════════
# SEGURIDAD
# ═══════════════════════════════════════════════════════════════════════════════
# SECRET_KEY: en producción DEBE definirse via variable de entorno
_DEFAULT_SECRET = 'sisprocesos_dev_secret_key_change_in_production'
SECRET_KEY = os.environ.get('SISPROCESOS_SECRET_KEY') or _DEFAULT_SECRET
SESSION_LIFETIME = _env_int('SISPROCESOS_SESSION_LIFETIME', 86400)  # 24 horas

# Algoritmo usado por werkzeug.security.generate_password_hash
PASSWORD_HASH_METHOD = os.environ.get('SISPROCESOS_PASSWORD_HASH_METHOD', 'scrypt')
