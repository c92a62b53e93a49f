# ==============================================================================
# SERVICIO DE VENTAS
# ==============================================================================
# Confirmación de venta desde el carrito y anulación desde el dashboard.
#
# La confirmación son DOS escrituras independientes (no atómicas):
#   1. orders       -> cabecera con total y estado 'completada'
#   2. order_items  -> una línea por producto del carrito
# Si falla la 2, la orden de la 1 queda guardada sin líneas (no hay rollback).
# ==============================================================================

import logging
from typing import Any, Dict, List, Optional

from pos_sucursales.models import OrderItem, OrderStatus
from pos_sucursales.performance_logger import profile_function
from pos_sucursales.repositories.interfaces import (
    DataStoreError,
    IOrderItemRepository,
    IOrderRepository,
)
from pos_sucursales.services.cart_service import cart_total

logger = logging.getLogger(__name__)

EMPTY_CART_ERROR = 'El carrito está vacío o la sucursal no está definida.'


class SalesService:
    """
    Servicio para gestión de ventas.

    Responsabilidades:
    - Crear la orden y sus líneas desde el carrito
    - Anular (soft delete) una orden
    """

    def __init__(
        self,
        order_repo: IOrderRepository,
        order_item_repo: IOrderItemRepository
    ):
        self.order_repo = order_repo
        self.order_item_repo = order_item_repo

    @profile_function(name="Confirmar venta")
    def finalize_sale(
        self,
        cart_items: List[Dict[str, Any]],
        store_id: Optional[int]
    ) -> Dict[str, Any]:
        """
        Crea una venta desde los items del carrito.

        Args:
            cart_items: Líneas del carrito ({id, name, price, qty, ...})
            store_id: Sucursal de la sesión de caja

        Returns:
            Dict con resultado:
            - ok: True/False
            - error: mensaje si falló
            - order_id: id de la orden (también si fallaron las líneas)
            - total: total de la venta
            - mensaje: texto para mostrar al cajero
        """
        if not cart_items or not store_id:
            return {'ok': False, 'error': EMPTY_CART_ERROR}

        total = cart_total(cart_items)

        # 1. Crear la orden (cabecera)
        try:
            order = self.order_repo.create_order(
                store_id, total, OrderStatus.COMPLETADA.value
            )
        except DataStoreError as e:
            logger.error("Error al crear venta (sucursal %s): %s", store_id, e.message)
            return {'ok': False, 'error': f'Error al crear venta: {e.message}'}

        order_id = order['id']

        # 2. Crear las líneas (detalle)
        items = [
            OrderItem(
                order_id=order_id,
                product_id=item['id'],
                product_name=item.get('name', ''),
                quantity=item['qty'],
                price_at_sale=float(item.get('price', 0)),
            ).to_dict()
            for item in cart_items
        ]
        try:
            self.order_item_repo.create_items(items)
        except DataStoreError as e:
            logger.error(
                "Orden %s guardada sin detalle: %s", order_id, e.message
            )
            return {
                'ok': False,
                'error': f'Error al guardar detalles: {e.message}',
                'order_id': order_id,
                'total': total,
            }

        logger.info(
            "Venta #%s sucursal %s total %.2f (%d líneas)",
            order_id, store_id, total, len(items)
        )
        return {
            'ok': True,
            'order_id': order_id,
            'total': total,
            'mensaje': f'¡Venta Exitosa! Total: ${total:.2f}. Ticket #{order_id}',
        }

    def cancel_sale(self, order_id: Any, confirmed: bool = False) -> Dict[str, Any]:
        """
        Anula una venta: status 'completada' -> 'cancelada'.
        Sin confirmación explícita no se escribe nada.
        """
        if not confirmed:
            return {'ok': False, 'error': 'Anulación no confirmada'}

        try:
            order_id = int(order_id)
        except (TypeError, ValueError):
            return {'ok': False, 'error': 'ID de venta inválido'}

        try:
            updated = self.order_repo.update_status(order_id, OrderStatus.CANCELADA.value)
        except DataStoreError as e:
            logger.error("Error al anular venta #%s: %s", order_id, e.message)
            return {'ok': False, 'error': f'Error al anular venta: {e.message}'}

        if not updated:
            return {'ok': False, 'error': f'Venta #{order_id} no encontrada'}

        logger.info("Venta #%s anulada", order_id)
        return {'ok': True, 'order_id': order_id, 'mensaje': f'Venta #{order_id} anulada'}
