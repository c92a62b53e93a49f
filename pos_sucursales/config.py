# ==============================================================================
# CONFIGURACIÓN - Variables de entorno
# ==============================================================================
# Todas las opciones se leen del entorno (o de un archivo .env en desarrollo).
#
# Ejemplo de .env:
#   POS_SECRET_KEY=una_clave_larga_y_aleatoria
#   POS_DATA_BACKEND=supabase
#   SUPABASE_URL=https://xxxx.supabase.co
#   SUPABASE_KEY=eyJhbGciOi...
# ==============================================================================

import os

from dotenv import load_dotenv

# Cargar variables del archivo .env (si existe)
load_dotenv()

BASE = os.path.dirname(os.path.abspath(__file__))


def _env_flag(name: str, default: str = '0') -> bool:
    return os.environ.get(name, default).strip().lower() in ('1', 'true', 'yes', 'si')


# ═══════════════════════════════════════════════════════════════════════════════
# MODO PRODUCCIÓN
# ═══════════════════════════════════════════════════════════════════════════════
PRODUCTION_MODE = _env_flag('POS_PRODUCTION_MODE')

# SECRET_KEY: En producción DEBE definirse via variable de entorno
DEFAULT_SECRET = 'pos_sucursales_dev_secret_key_change_in_production'
SECRET_KEY = os.environ.get('POS_SECRET_KEY')

# ═══════════════════════════════════════════════════════════════════════════════
# ALMACÉN DE DATOS
# ═══════════════════════════════════════════════════════════════════════════════
# 'json'     -> archivos locales en DATA_DIR (desarrollo y tests)
# 'supabase' -> API REST de Supabase (PostgREST)
DATA_BACKEND = os.environ.get('POS_DATA_BACKEND', 'json').strip().lower()
DATA_DIR = os.environ.get('POS_DATA_DIR', os.path.join(BASE, 'data'))

SUPABASE_URL = os.environ.get('SUPABASE_URL', '')
SUPABASE_KEY = os.environ.get('SUPABASE_KEY', '')
REQUEST_TIMEOUT = float(os.environ.get('POS_REQUEST_TIMEOUT', '15'))

# ═══════════════════════════════════════════════════════════════════════════════
# LOGS
# ═══════════════════════════════════════════════════════════════════════════════
LOG_LEVEL = os.environ.get('POS_LOG_LEVEL', 'INFO').upper()
ENABLE_PROFILING = _env_flag('POS_ENABLE_PROFILING', '1')
LOGS_DIR = os.environ.get('POS_LOGS_DIR', os.path.join(BASE, 'logs'))
