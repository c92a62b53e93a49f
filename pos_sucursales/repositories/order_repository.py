# ==============================================================================
# REPOSITORIOS DE ÓRDENES Y LÍNEAS (JSON)
# ==============================================================================
# Encapsula orders.json y order_items.json.
# Los "joins" (orden -> sucursal, línea -> orden) se resuelven en memoria
# con la misma forma que devuelve PostgREST.
# ==============================================================================

import os
from typing import Any, Dict, List

from pos_sucursales.repositories.base import ListRepository, utc_now_iso
from pos_sucursales.repositories.store_repository import StoreRepository


class OrderRepository(ListRepository):
    """
    Repositorio de órdenes (cabeceras de venta).

    Formato de orders.json:
    [
        {
            "id": 1,
            "created_at": "2024-01-01T10:00:00+00:00",
            "store_id": 1,
            "total": 12.5,
            "status": "completada"
        }
    ]
    """

    def __init__(self, base_path: str, store_repo: StoreRepository = None):
        super().__init__(os.path.join(base_path, 'orders.json'))
        self.store_repo = store_repo or StoreRepository(base_path)

    def create_order(self, store_id: int, total: float, status: str) -> Dict[str, Any]:
        return self.insert({
            'created_at': utc_now_iso(),
            'store_id': int(store_id),
            'total': total,
            'status': status,
        })

    def list_orders(self, status: str) -> List[Dict[str, Any]]:
        names = {int(s['id']): s.get('name', '') for s in self.store_repo.list_stores()}
        rows = []
        for order in self.find_all_by('status', status):
            row = dict(order)
            row['stores'] = {'name': names.get(int(order.get('store_id', 0) or 0), '')}
            rows.append(row)
        rows.sort(key=lambda o: o.get('created_at') or '', reverse=True)
        return rows

    def update_status(self, order_id: int, status: str) -> bool:
        return self.update_where('id', int(order_id), {'status': status})


class OrderItemRepository(ListRepository):
    """
    Repositorio de líneas de venta.

    Formato de order_items.json:
    [
        {
            "id": 1,
            "order_id": 1,
            "product_id": 3,
            "product_name": "Café molido 500g",
            "quantity": 2,
            "price_at_sale": 4.5
        }
    ]
    """

    def __init__(self, base_path: str, order_repo: OrderRepository = None):
        super().__init__(os.path.join(base_path, 'order_items.json'))
        self.order_repo = order_repo or OrderRepository(base_path)

    def create_items(self, items: List[Dict[str, Any]]) -> None:
        self.insert_many(items)

    def list_items(self, order_status: str) -> List[Dict[str, Any]]:
        # Equivalente a orders!inner(store_id, status) con filtro orders.status
        orders = {
            int(o['id']): o
            for o in self.order_repo.get_all()
            if o.get('status') == order_status
        }
        rows = []
        for item in self.get_all():
            order = orders.get(int(item.get('order_id', 0) or 0))
            if order is None:
                continue
            rows.append({
                'product_name': item.get('product_name', ''),
                'quantity': item.get('quantity', 0),
                'orders': {'store_id': order.get('store_id'), 'status': order.get('status')},
            })
        return rows
