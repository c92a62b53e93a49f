# ==============================================================================
# INTERFACES DE REPOSITORIOS
# ==============================================================================
#
# Contratos que cumplen las dos implementaciones del almacén de datos:
#
# 1. JSON (repositories/*_repository.py)
#    - Archivos locales, usado en desarrollo y tests
#
# 2. SUPABASE (repositories/supabase_repositories.py)
#    - API REST (PostgREST) del proyecto Supabase
#
# Los servicios dependen de estas interfaces, NO de una implementación.
# Cualquier fallo del almacén se reporta con DataStoreError.
#
# ==============================================================================

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


class DataStoreError(Exception):
    """
    Fallo del almacén de datos remoto o local.

    El mensaje es el texto crudo devuelto por el backend, para que la
    interfaz pueda mostrarlo tal cual.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


# ==============================================================================
# INTERFACES POR RELACIÓN
# ==============================================================================

@runtime_checkable
class IStoreRepository(Protocol):
    """Relación stores(id, name)."""

    def list_stores(self) -> List[Dict[str, Any]]:
        """Todas las sucursales ordenadas por id."""
        ...


@runtime_checkable
class IProductRepository(Protocol):
    """Relación products(id, name, price, image_url, category, subcategory)."""

    def list_products(self) -> List[Dict[str, Any]]:
        """Catálogo completo ordenado por nombre ascendente."""
        ...

    def get_product(self, product_id: int) -> Optional[Dict[str, Any]]:
        """Un producto por id, o None."""
        ...


@runtime_checkable
class IOrderRepository(Protocol):
    """Relación orders(id, created_at, store_id, total, status)."""

    def create_order(self, store_id: int, total: float, status: str) -> Dict[str, Any]:
        """Inserta una orden y retorna la fila creada (con id)."""
        ...

    def list_orders(self, status: str) -> List[Dict[str, Any]]:
        """
        Órdenes con el estado dado, created_at descendente,
        cada una con el join {'stores': {'name': ...}}.
        """
        ...

    def update_status(self, order_id: int, status: str) -> bool:
        """Cambia el estado de UNA orden. True si existía."""
        ...


@runtime_checkable
class IOrderItemRepository(Protocol):
    """Relación order_items(order_id, product_id, product_name, quantity, price_at_sale)."""

    def create_items(self, items: List[Dict[str, Any]]) -> None:
        """Inserción masiva de líneas."""
        ...

    def list_items(self, order_status: str) -> List[Dict[str, Any]]:
        """
        Líneas cuya orden tiene el estado dado, cada una con el join
        {'orders': {'store_id': ..., 'status': ...}}.
        """
        ...
