# ==============================================================================
# SERVICIO DE ESTADÍSTICAS DEL DASHBOARD
# ==============================================================================
# Calcula las cifras del panel de administración sobre ventas COMPLETADAS.
#
# REGLA PRINCIPAL: Solo "completada" cuenta para estadísticas.
# - cancelada ❌
#
# Todo se calcula en memoria sobre las dos lecturas completas
# (órdenes y líneas); el filtro de sucursal NO vuelve a consultar.
# ==============================================================================

import logging
from typing import Any, Dict, List

from pos_sucursales.models import Order, OrderStatus, STORES, STORE_IDS
from pos_sucursales.performance_logger import profile_function
from pos_sucursales.repositories.interfaces import (
    DataStoreError,
    IOrderItemRepository,
    IOrderRepository,
)

logger = logging.getLogger(__name__)

ALL_STORES = 'all'
TOP_PRODUCTS_LIMIT = 5


# ==============================================================================
# FUNCIONES PURAS
# ==============================================================================

def normalize_store_filter(value: Any) -> str:
    """'all' o el id de una sucursal fija como str. Valor desconocido -> 'all'."""
    value = str(value or ALL_STORES).strip()
    if value in {str(sid) for sid in STORE_IDS}:
        return value
    return ALL_STORES


def filter_orders(orders: List[Dict[str, Any]], store_filter: str) -> List[Dict[str, Any]]:
    if store_filter == ALL_STORES:
        return list(orders)
    return [o for o in orders if str(o.get('store_id')) == store_filter]


def filter_items(items: List[Dict[str, Any]], store_filter: str) -> List[Dict[str, Any]]:
    if store_filter == ALL_STORES:
        return list(items)
    return [
        i for i in items
        if str((i.get('orders') or {}).get('store_id')) == store_filter
    ]


def total_revenue(orders: List[Dict[str, Any]]) -> float:
    return round(sum(float(o.get('total', 0) or 0) for o in orders), 2)


def top_products(items: List[Dict[str, Any]], limit: int = TOP_PRODUCTS_LIMIT) -> List[Dict[str, Any]]:
    """
    Productos más vendidos por cantidad.

    Agrupa por product_name, suma quantity y ordena descendente.
    El orden es estable: en empate gana el que apareció primero.
    """
    counts: Dict[str, int] = {}
    for item in items:
        name = item.get('product_name', '')
        counts[name] = counts.get(name, 0) + int(item.get('quantity', 0) or 0)

    ranked = sorted(counts.items(), key=lambda entry: entry[1], reverse=True)
    return [{'name': name, 'count': count} for name, count in ranked[:limit]]


def revenue_by_store(orders: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Ventas por sucursal fija (1, 2, 3) para el gráfico de torta.
    Se calcula SIEMPRE sobre el conjunto global, sin filtro.
    """
    totals = {sid: 0.0 for sid in STORE_IDS}
    for order in orders:
        try:
            sid = int(order.get('store_id'))
        except (TypeError, ValueError):
            continue
        if sid in totals:
            totals[sid] += float(order.get('total', 0) or 0)

    return [
        {'store_id': sid, 'name': STORES[sid][1], 'total': round(totals[sid], 2)}
        for sid in STORE_IDS
    ]


# ==============================================================================
# SERVICIO
# ==============================================================================

class StatsService:
    """
    Servicio para las cifras del dashboard.

    Responsabilidades:
    - Leer órdenes y líneas completadas (dos lecturas independientes)
    - Aplicar el filtro de sucursal en memoria
    - Calcular ingresos, tickets, top 5 y torta por sucursal
    """

    def __init__(
        self,
        order_repo: IOrderRepository,
        order_item_repo: IOrderItemRepository
    ):
        self.order_repo = order_repo
        self.order_item_repo = order_item_repo

    def load_orders(self) -> List[Dict[str, Any]]:
        """Órdenes completadas, recientes primero. Lista vacía si falla la lectura."""
        try:
            rows = self.order_repo.list_orders(OrderStatus.COMPLETADA.value)
        except DataStoreError as e:
            logger.error("Error al cargar órdenes: %s", e.message)
            return []
        return [Order.from_dict(r).to_dict() for r in rows]

    def load_items(self) -> List[Dict[str, Any]]:
        """Líneas de órdenes completadas. Lista vacía si falla la lectura."""
        try:
            return self.order_item_repo.list_items(OrderStatus.COMPLETADA.value)
        except DataStoreError as e:
            logger.error("Error al cargar líneas de venta: %s", e.message)
            return []

    @profile_function(name="Cargar dashboard")
    def build_dashboard(self, store_filter: Any = ALL_STORES) -> Dict[str, Any]:
        """
        Calcula todas las cifras del panel.

        Returns:
            {
                'store_filter': 'all' | '1' | '2' | '3',
                'orders': [...],              # órdenes mostradas
                'total_revenue': float,
                'ticket_count': int,
                'top_products': [{'name': str, 'count': int}],
                'sales_by_store': [{'store_id', 'name', 'total'}]  # global
            }
        """
        store_filter = normalize_store_filter(store_filter)
        orders = self.load_orders()
        items = self.load_items()

        displayed = filter_orders(orders, store_filter)
        return {
            'store_filter': store_filter,
            'orders': displayed,
            'total_revenue': total_revenue(displayed),
            'ticket_count': len(displayed),
            'top_products': top_products(filter_items(items, store_filter)),
            'sales_by_store': revenue_by_store(orders),
        }
