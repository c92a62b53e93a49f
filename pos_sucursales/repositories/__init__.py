# ==============================================================================
# CAPA DE REPOSITORIOS - Acceso al almacén de datos
# ==============================================================================
# Esta capa encapsula todo el acceso a la persistencia. La aplicación no es
# dueña del almacén: solo lee el catálogo, inserta órdenes/líneas y cambia
# el estado de una orden.
#
# ESTRUCTURA:
# ├── interfaces.py             → Protocolos + DataStoreError
# ├── base.py                   → Base JSON (ListRepository)
# ├── store_repository.py       → stores.json
# ├── product_repository.py     → products.json
# ├── order_repository.py       → orders.json + order_items.json
# ├── supabase_client.py        → Cliente REST (PostgREST)
# └── supabase_repositories.py  → Implementaciones sobre Supabase
# ==============================================================================

from .interfaces import (
    DataStoreError,
    IStoreRepository,
    IProductRepository,
    IOrderRepository,
    IOrderItemRepository,
)

# Implementaciones JSON
from .base import BaseRepository, ListRepository
from .store_repository import StoreRepository
from .product_repository import ProductRepository
from .order_repository import OrderRepository, OrderItemRepository

# Implementaciones Supabase
from .supabase_client import SupabaseClient
from .supabase_repositories import (
    SupabaseStoreRepository,
    SupabaseProductRepository,
    SupabaseOrderRepository,
    SupabaseOrderItemRepository,
)

__all__ = [
    # Interfaces
    'DataStoreError',
    'IStoreRepository',
    'IProductRepository',
    'IOrderRepository',
    'IOrderItemRepository',

    # Clases base
    'BaseRepository',
    'ListRepository',

    # JSON
    'StoreRepository',
    'ProductRepository',
    'OrderRepository',
    'OrderItemRepository',

    # Supabase
    'SupabaseClient',
    'SupabaseStoreRepository',
    'SupabaseProductRepository',
    'SupabaseOrderRepository',
    'SupabaseOrderItemRepository',
]
