# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Mide el rendimiento de las operaciones de los servicios sin afectar
# el resultado. Guarda logs legibles en /logs/ para análisis humano.
#
# ACTIVAR/DESACTIVAR: variable de entorno SISPROCESOS_PROFILING
# ==============================================================================

import logging
import os
import threading
import time
from collections import defaultdict
from datetime import datetime
from functools import wraps

from sisprocesos import config

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════

ENABLE_PROFILING = config.ENABLE_PROFILING

# Umbrales de tiempo (en milisegundos)
THRESHOLD_WARNING = 300   # Advertencia si supera 300ms
THRESHOLD_CRITICAL = 700  # Crítico si supera 700ms

# Directorio de logs
LOGS_DIR = config.LOGS_DIR

SLOW_FUNCTIONS_LOG = 'slow_functions.log'


def _log_path(filename):
    return os.path.join(LOGS_DIR, filename)


# ═══════════════════════════════════════════════════════════════════════════
# ESTADÍSTICAS DE FUNCIONES (en memoria)
# ═══════════════════════════════════════════════════════════════════════════

# Estructura: {nombre_funcion: {calls: int, total_time: float, max_time: float}}
_function_stats = defaultdict(lambda: {'calls': 0, 'total_time': 0.0, 'max_time': 0.0})
_stats_lock = threading.Lock()
_write_lock = threading.Lock()


# ═══════════════════════════════════════════════════════════════════════════
# ESCRITURA DE LOGS
# ═══════════════════════════════════════════════════════════════════════════

def _get_timestamp():
    """Obtiene timestamp legible"""
    return datetime.now().strftime('%Y-%m-%d %H:%M:%S')


def _write_log(filename, content):
    """Agrega contenido a un archivo de log (thread-safe)"""
    try:
        with _write_lock:
            os.makedirs(LOGS_DIR, exist_ok=True)
            with open(_log_path(filename), 'a', encoding='utf-8') as f:
                f.write(content)
    except OSError as e:
        # El profiling nunca debe romper la operación medida
        logger.warning('[PROFILING] No se pudo escribir %s: %s', filename, e)


# ═══════════════════════════════════════════════════════════════════════════
# DECORADOR PARA OPERACIONES
# ═══════════════════════════════════════════════════════════════════════════

def profile_function(func=None, name=None):
    """
    Decorador para medir rendimiento de operaciones de servicio.

    Uso:
        @profile_function
        def find_all(self):
            ...

        @profile_function(name="Autenticar usuario")
        def authenticate(self, login, password):
            ...

    Registra:
        - Cantidad de llamadas
        - Tiempo promedio
        - Tiempo máximo
    """
    def decorator(fn):
        if not ENABLE_PROFILING:
            return fn

        func_name = name or fn.__qualname__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter() - start) * 1000
                record_call(func_name, elapsed_ms)

        return wrapper

    # Permitir uso sin paréntesis: @profile_function
    if func is not None:
        return decorator(func)
    return decorator


def record_call(func_name, elapsed_ms):
    """Acumula una llamada y, si fue lenta, la registra de inmediato."""
    with _stats_lock:
        stats = _function_stats[func_name]
        stats['calls'] += 1
        stats['total_time'] += elapsed_ms
        if elapsed_ms > stats['max_time']:
            stats['max_time'] = elapsed_ms

    if elapsed_ms >= THRESHOLD_WARNING:
        _log_slow_function_call(func_name, elapsed_ms)


def _log_slow_function_call(func_name, time_ms):
    """Registra una llamada lenta a una función"""
    severity = 'CRÍTICO' if time_ms >= THRESHOLD_CRITICAL else 'LENTO'
    logger.warning('[PROFILING] %s: %s tardó %.0f ms', severity, func_name, time_ms)

    log_entry = f"""
[{severity}] {_get_timestamp()}
Función: {func_name}
Tiempo: {time_ms:.0f} ms
────────────────────────────────────────
"""

    _write_log(SLOW_FUNCTIONS_LOG, log_entry)


# ═══════════════════════════════════════════════════════════════════════════
# REPORTE DE ESTADÍSTICAS
# ═══════════════════════════════════════════════════════════════════════════

def get_function_stats():
    """
    Obtiene estadísticas de todas las funciones perfiladas.

    Returns:
        dict: {nombre: {calls, avg_time, max_time}}
    """
    with _stats_lock:
        result = {}
        for func_name, stats in _function_stats.items():
            calls = stats['calls']
            avg = stats['total_time'] / calls if calls > 0 else 0
            result[func_name] = {
                'calls': calls,
                'avg_time': round(avg, 2),
                'max_time': round(stats['max_time'], 2)
            }
        return result


def write_function_stats_report():
    """
    Escribe un reporte legible de estadísticas en slow_functions.log
    """
    stats = get_function_stats()

    if not stats:
        return

    # Ordenar por tiempo promedio (mayor primero)
    sorted_stats = sorted(stats.items(), key=lambda x: x[1]['avg_time'], reverse=True)

    report = f"""
REPORTE DE RENDIMIENTO DE FUNCIONES
Generado: {_get_timestamp()}

"""

    for func_name, data in sorted_stats:
        status = ''
        if data['avg_time'] >= THRESHOLD_CRITICAL:
            status = ' [CRÍTICO]'
        elif data['avg_time'] >= THRESHOLD_WARNING:
            status = ' [LENTO]'
        elif data['max_time'] >= THRESHOLD_CRITICAL:
            status = ' [PICOS ALTOS]'

        report += f"""FUNCIÓN: {func_name}{status}
  Llamadas totales: {data['calls']}
  Tiempo promedio:  {data['avg_time']:.0f} ms
  Tiempo máximo:    {data['max_time']:.0f} ms

"""

    _write_log(SLOW_FUNCTIONS_LOG, report)


def reset_stats():
    """Reinicia todas las estadísticas (útil para testing)"""
    with _stats_lock:
        _function_stats.clear()


# ═══════════════════════════════════════════════════════════════════════════
# FUNCIONES DE UTILIDAD
# ═══════════════════════════════════════════════════════════════════════════

def clear_logs():
    """Limpia los archivos de log (útil para desarrollo)"""
    path = _log_path(SLOW_FUNCTIONS_LOG)
    if os.path.exists(path):
        os.remove(path)


def get_log_summary():
    """
    Obtiene un resumen del estado actual de los logs.

    Returns:
        dict: {archivo: {exists, size_kb, lines}}
    """
    summary = {}
    for name, filename in [('slow_functions', SLOW_FUNCTIONS_LOG)]:
        path = _log_path(filename)
        if os.path.exists(path):
            size = os.path.getsize(path) / 1024  # KB
            with open(path, 'r', encoding='utf-8') as f:
                lines = sum(1 for _ in f)
            summary[name] = {'exists': True, 'size_kb': round(size, 2), 'lines': lines}
        else:
            summary[name] = {'exists': False, 'size_kb': 0, 'lines': 0}
    return summary


# ═══════════════════════════════════════════════════════════════════════════
# EXPORTAR API PÚBLICA
# ═══════════════════════════════════════════════════════════════════════════

__all__ = [
    'ENABLE_PROFILING',
    'profile_function',
    'record_call',
    'get_function_stats',
    'write_function_stats_report',
    'reset_stats',
    'clear_logs',
    'get_log_summary',
]
