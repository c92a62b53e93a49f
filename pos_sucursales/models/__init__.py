# ==============================================================================
# CAPA DE MODELOS - Estructuras de datos del sistema
# ==============================================================================
# Entidades del dominio como dataclasses, independientes del almacenamiento
# (JSON local o Supabase).
# ==============================================================================

from .entities import (
    # Sucursales e identidad
    Store,
    Identity,
    IDENTITY_SESSION_KEY,
    STORES,
    STORE_IDS,
    store_name,

    # Catálogo
    Product,

    # Ventas
    Order,
    OrderItem,
    OrderStatus,
)

__all__ = [
    'Store',
    'Identity',
    'IDENTITY_SESSION_KEY',
    'STORES',
    'STORE_IDS',
    'store_name',
    'Product',
    'Order',
    'OrderItem',
    'OrderStatus',
]
