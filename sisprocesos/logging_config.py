# ==============================================================================
# CONFIGURACIÓN DE LOGGING
# ==============================================================================
# Cada módulo usa su propio logger:  logger = logging.getLogger(__name__)
# Los mensajes llevan una etiqueta entre corchetes: [USUARIOS], [REPO], ...
#
# setup_logging() se llama una vez al iniciar el proceso.
# Formatos:
#   text → "2024-05-01 10:00:00 INFO sisprocesos.services... [USUARIOS] ..."
#   json → una línea JSON por registro (para recolectores de logs)
#
# Los campos sensibles pasados con extra= (password, token, ...) se enmascaran.
# ==============================================================================

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sisprocesos import config

ROOT_LOGGER = 'sisprocesos'

SENSITIVE_FIELD_PATTERNS = ('password', 'secret', 'token', 'authorization')
MASK_PLACEHOLDER = '***'

# Atributos estándar de LogRecord que no son "extra"
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {'message', 'asctime'}


def _is_sensitive_key(key: str) -> bool:
    key_lower = key.lower()
    return any(pattern in key_lower for pattern in SENSITIVE_FIELD_PATTERNS)


def mask_sensitive_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Enmascara recursivamente los campos sensibles de un diccionario."""
    masked = {}
    for key, value in data.items():
        if _is_sensitive_key(key):
            masked[key] = MASK_PLACEHOLDER
        elif isinstance(value, dict):
            masked[key] = mask_sensitive_data(value)
        else:
            masked[key] = value
    return masked


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    extra = {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}
    return mask_sensitive_data(extra)


class TextFormatter(logging.Formatter):
    """Formato legible; agrega los campos extra (enmascarados) al final."""

    def __init__(self):
        super().__init__('%(asctime)s %(levelname)s %(name)s %(message)s', '%Y-%m-%d %H:%M:%S')

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        extra = _extra_fields(record)
        if extra:
            line += ' ' + ' '.join(f'{k}={v}' for k, v in extra.items())
        return line


class JsonFormatter(logging.Formatter):
    """Una línea JSON por registro."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            entry['error'] = {
                'type': exc_type.__name__ if exc_type else None,
                'message': str(exc_value) if exc_value else None,
                'stack_trace': self.formatException(record.exc_info),
            }
        entry.update(_extra_fields(record))
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """
    Configura el logger raíz del paquete.

    Args:
        level: Nivel (por defecto SISPROCESOS_LOG_LEVEL)
        fmt: 'text' o 'json' (por defecto SISPROCESOS_LOG_FORMAT)

    Returns:
        Logger 'sisprocesos' configurado
    """
    level = (level or config.LOG_LEVEL).upper()
    fmt = (fmt or config.LOG_FORMAT).lower()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if fmt == 'json' else TextFormatter())

    root = logging.getLogger(ROOT_LOGGER)
    for old in list(root.handlers):
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(level)
    return root
