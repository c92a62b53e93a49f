# ==============================================================================
# SISTEMA DE PROFILING INTERNO
# ==============================================================================
# Tiempos de cada petición y de las operaciones pesadas (confirmar venta,
# cargar dashboard). Los bloques se escriben en texto plano en LOGS_DIR:
#
#   performance.log     -> todas las peticiones
#   slow_routes.log     -> peticiones sobre el umbral
#   slow_functions.log  -> operaciones sobre el umbral
#
# ACTIVAR/DESACTIVAR: POS_ENABLE_PROFILING (config.py)
# ==============================================================================

import logging
import os
import threading
import time
from datetime import datetime
from functools import wraps
from typing import Dict, Optional

from pos_sucursales import config

logger = logging.getLogger(__name__)

ENABLE_PROFILING = config.ENABLE_PROFILING

# Umbrales en milisegundos
THRESHOLD_WARNING = 300
THRESHOLD_CRITICAL = 700

PERFORMANCE_LOG = os.path.join(config.LOGS_DIR, 'performance.log')
SLOW_ROUTES_LOG = os.path.join(config.LOGS_DIR, 'slow_routes.log')
SLOW_FUNCTIONS_LOG = os.path.join(config.LOGS_DIR, 'slow_functions.log')

# Endpoint de Flask -> acción legible
ACTIONS = {
    'login': 'Selector de sucursal',
    'logout': 'Salir',
    'pos': 'Pantalla de caja',
    'api_productos': 'Buscar productos',
    'api_carrito_ver': 'Ver carrito',
    'api_carrito_ajustar': 'Ajustar cantidad',
    'api_carrito_eliminar': 'Quitar línea del carrito',
    'api_carrito_limpiar': 'Vaciar carrito',
    'api_carrito_confirmar': 'Confirmar venta',
    'dashboard': 'Panel de administración',
    'api_dashboard': 'Cifras del panel (JSON)',
    'cancel_sale': 'Anular venta',
}

_file_lock = threading.Lock()
_stats_lock = threading.Lock()

# {operación: {'calls': int, 'total_ms': float, 'max_ms': float}}
_function_stats: Dict[str, Dict[str, float]] = {}


def _severity(elapsed_ms: float) -> Optional[str]:
    if elapsed_ms >= THRESHOLD_CRITICAL:
        return 'CRITICAL'
    if elapsed_ms >= THRESHOLD_WARNING:
        return 'WARNING'
    return None


def _block(title: str, **fields) -> str:
    """Bloque de texto con encabezado y pares 'Campo: valor'."""
    lines = ['', '═' * 40, f"[{title}] {datetime.now():%Y-%m-%d %H:%M:%S}", '─' * 40]
    lines += [f"{key.capitalize()}: {value}" for key, value in fields.items()]
    return '\n'.join(lines) + '\n'


def _append(filepath: str, text: str) -> None:
    with _file_lock:
        try:
            os.makedirs(os.path.dirname(filepath), exist_ok=True)
            with open(filepath, 'a', encoding='utf-8') as f:
                f.write(text)
        except OSError as e:
            logger.warning("No se pudo escribir %s: %s", filepath, e)


def action_name(endpoint: Optional[str], method: str, path: str) -> str:
    return ACTIONS.get(endpoint or '', f"{method} {path}")


# ═══════════════════════════════════════════════════════════════════════════
# PETICIONES
# ═══════════════════════════════════════════════════════════════════════════

def log_request(endpoint, method, path, elapsed_ms, identity=None):
    """
    Registra una petición; si supera un umbral también va a slow_routes.log.

    Args:
        endpoint: request.endpoint ('api_carrito_confirmar', ...)
        identity: '1', '2', '3', 'admin' o None
    """
    if not ENABLE_PROFILING:
        return

    fields = {
        'acción': action_name(endpoint, method, path),
        'identidad': identity or 'sin identidad',
        'ruta': f"{method} {path}",
        'tiempo': f"{elapsed_ms:.0f} ms",
    }
    _append(PERFORMANCE_LOG, _block('PERFORMANCE', **fields))

    level = _severity(elapsed_ms)
    if level:
        threshold = THRESHOLD_CRITICAL if level == 'CRITICAL' else THRESHOLD_WARNING
        fields['tiempo'] = f"{elapsed_ms:.0f} ms (umbral: {threshold} ms)"
        _append(SLOW_ROUTES_LOG, _block(level, **fields))


def init_profiling(app):
    """Registra los hooks before_request / after_request en la app."""
    if not ENABLE_PROFILING:
        return

    from flask import g, request, session
    from pos_sucursales.models import IDENTITY_SESSION_KEY

    @app.before_request
    def _start_timer():
        g.profiling_start = time.perf_counter()

    @app.after_request
    def _record_request(response):
        start = g.pop('profiling_start', None)
        if start is None or request.endpoint == 'static':
            return response
        log_request(
            request.endpoint,
            request.method,
            request.path,
            (time.perf_counter() - start) * 1000,
            session.get(IDENTITY_SESSION_KEY),
        )
        return response


# ═══════════════════════════════════════════════════════════════════════════
# OPERACIONES
# ═══════════════════════════════════════════════════════════════════════════

def _record_call(label: str, elapsed_ms: float) -> None:
    with _stats_lock:
        stats = _function_stats.setdefault(label, {'calls': 0, 'total_ms': 0.0, 'max_ms': 0.0})
        stats['calls'] += 1
        stats['total_ms'] += elapsed_ms
        stats['max_ms'] = max(stats['max_ms'], elapsed_ms)

    level = _severity(elapsed_ms)
    if level:
        _append(SLOW_FUNCTIONS_LOG, _block(
            level, operación=label, tiempo=f"{elapsed_ms:.0f} ms"
        ))


def profile_function(func=None, name=None):
    """
    Mide una operación de servicio.

    Uso:
        @profile_function(name="Confirmar venta")
        def finalize_sale(self, ...):
            ...

    Sin profiling activo devuelve la función sin envolver.
    """
    def decorator(fn):
        if not ENABLE_PROFILING:
            return fn
        label = name or fn.__qualname__

        @wraps(fn)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return fn(*args, **kwargs)
            finally:
                _record_call(label, (time.perf_counter() - start) * 1000)

        return wrapper

    if func is not None:
        return decorator(func)
    return decorator


def get_function_stats():
    """{operación: {calls, avg_ms, max_ms}}"""
    with _stats_lock:
        return {
            label: {
                'calls': int(s['calls']),
                'avg_ms': round(s['total_ms'] / s['calls'], 2) if s['calls'] else 0,
                'max_ms': round(s['max_ms'], 2),
            }
            for label, s in _function_stats.items()
        }


def reset_stats():
    with _stats_lock:
        _function_stats.clear()


__all__ = [
    'ENABLE_PROFILING',
    'init_profiling',
    'profile_function',
    'get_function_stats',
    'reset_stats',
]
