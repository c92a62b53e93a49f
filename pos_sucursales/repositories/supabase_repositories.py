# ==============================================================================
# REPOSITORIOS SUPABASE - Implementan las mismas interfaces que los JSON
# ==============================================================================
# Para usarlos: POS_DATA_BACKEND=supabase (ver config.py y app_container.py).
# Los servicios NO cambian.
# ==============================================================================

from typing import Any, Dict, List, Optional

from pos_sucursales.repositories.interfaces import DataStoreError
from pos_sucursales.repositories.supabase_client import SupabaseClient


class SupabaseStoreRepository:
    """stores(id, name)"""

    def __init__(self, client: SupabaseClient):
        self.client = client

    def list_stores(self) -> List[Dict[str, Any]]:
        return self.client.select('stores', order='id.asc')


class SupabaseProductRepository:
    """products(id, name, price, image_url, category, subcategory)"""

    def __init__(self, client: SupabaseClient):
        self.client = client

    def list_products(self) -> List[Dict[str, Any]]:
        return self.client.select('products', order='name.asc')

    def get_product(self, product_id: int) -> Optional[Dict[str, Any]]:
        rows = self.client.select('products', filters={'id': int(product_id)})
        return rows[0] if rows else None


class SupabaseOrderRepository:
    """orders(id, created_at, store_id, total, status)"""

    def __init__(self, client: SupabaseClient):
        self.client = client

    def create_order(self, store_id: int, total: float, status: str) -> Dict[str, Any]:
        rows = self.client.insert('orders', {
            'store_id': int(store_id),
            'total': total,
            'status': status,
        })
        if not rows:
            raise DataStoreError('La orden no fue devuelta por el servidor')
        return rows[0]

    def list_orders(self, status: str) -> List[Dict[str, Any]]:
        return self.client.select(
            'orders',
            columns='*, stores(name)',
            filters={'status': status},
            order='created_at.desc',
        )

    def update_status(self, order_id: int, status: str) -> bool:
        rows = self.client.update('orders', {'status': status}, {'id': int(order_id)})
        return bool(rows)


class SupabaseOrderItemRepository:
    """order_items(order_id, product_id, product_name, quantity, price_at_sale)"""

    def __init__(self, client: SupabaseClient):
        self.client = client

    def create_items(self, items: List[Dict[str, Any]]) -> None:
        self.client.insert('order_items', items, returning=False)

    def list_items(self, order_status: str) -> List[Dict[str, Any]]:
        return self.client.select(
            'order_items',
            columns='product_name, quantity, orders!inner(store_id, status)',
            filters={'orders.status': order_status},
        )
