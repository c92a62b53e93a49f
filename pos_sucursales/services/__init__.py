# ==============================================================================
# CAPA DE SERVICIOS - Lógica de negocio
# ==============================================================================
# PRINCIPIOS:
# 1. Los servicios orquestan operaciones entre repositorios
# 2. Las rutas (controllers) solo llaman a servicios
# 3. Los servicios NO conocen el tipo de almacenamiento (JSON/Supabase)
# 4. Los fallos del almacén se traducen a {'ok': False, 'error': ...}
#    o a listas vacías (lecturas), nunca se reintentan
#
# ESTRUCTURA:
# ├── identity_service.py → Selector de rol / sucursal
# ├── catalog_service.py  → Catálogo y búsqueda
# ├── cart_service.py     → Carrito de la caja
# ├── sales_service.py    → Confirmar y anular ventas
# └── stats_service.py    → Cifras del dashboard
# ==============================================================================

from pos_sucursales.services.identity_service import IdentityService
from pos_sucursales.services.catalog_service import CatalogService, filter_products
from pos_sucursales.services.cart_service import CartService, apply_quantity_delta, cart_total
from pos_sucursales.services.sales_service import SalesService
from pos_sucursales.services.stats_service import StatsService, top_products, revenue_by_store

__all__ = [
    'IdentityService',
    'CatalogService',
    'filter_products',
    'CartService',
    'apply_quantity_delta',
    'cart_total',
    'SalesService',
    'StatsService',
    'top_products',
    'revenue_by_store',
]
