# ==============================================================================
# SERVICIO DE CARRITO
# ==============================================================================
# Centraliza la lógica del carrito de la caja.
# El carrito se almacena en la sesión de Flask (session['carrito']) y nunca
# se persiste en el almacén de datos.
#
# INVARIANTE: ninguna línea queda con qty <= 0 (se elimina).
# ==============================================================================

from typing import Any, Dict, List, MutableMapping, Optional

from flask import session

from pos_sucursales.services.catalog_service import CatalogService

CART_SESSION_KEY = 'carrito'

# Campos del producto que viajan en la cookie; el resto se lee del catálogo
CART_LINE_FIELDS = ('id', 'name', 'price')


def apply_quantity_delta(
    cart: List[Dict[str, Any]],
    product: Dict[str, Any],
    delta: int
) -> List[Dict[str, Any]]:
    """
    Única primitiva de mutación de cantidades. Retorna un carrito nuevo.

    - producto ausente y delta > 0  -> se agrega con qty 1
    - producto presente             -> qty += delta
    - qty resultante <= 0           -> se elimina la línea
    - producto ausente y delta <= 0 -> sin cambios
    """
    pid = product.get('id')
    existing = next((item for item in cart if item.get('id') == pid), None)

    if existing is None:
        if delta > 0:
            line = {field: product.get(field) for field in CART_LINE_FIELDS}
            return cart + [{**line, 'qty': 1}]
        return list(cart)

    new_qty = existing.get('qty', 0) + delta
    if new_qty <= 0:
        return [item for item in cart if item.get('id') != pid]
    return [
        {**item, 'qty': new_qty} if item.get('id') == pid else item
        for item in cart
    ]


def cart_total(cart: List[Dict[str, Any]]) -> float:
    """Suma de price * qty, recalculada siempre."""
    return round(sum(float(item.get('price', 0)) * item.get('qty', 0) for item in cart), 2)


class CartService:
    """
    Servicio para gestión del carrito de ventas.

    Responsabilidades:
    - Ajustar cantidades (+/-) y eliminar líneas
    - Calcular totales
    - Limpiar carrito
    """

    def __init__(
        self,
        catalog_service: CatalogService,
        storage: Optional[MutableMapping] = None
    ):
        """
        Args:
            catalog_service: Para resolver el producto al agregarlo
            storage: Mapeo alternativo a la sesión de Flask (tests)
        """
        self.catalog_service = catalog_service
        self._storage = storage

    @property
    def _store(self) -> MutableMapping:
        return session if self._storage is None else self._storage

    def _get_cart(self) -> List[Dict[str, Any]]:
        return list(self._store.get(CART_SESSION_KEY, []))

    def _save_cart(self, cart: List[Dict[str, Any]]) -> None:
        self._store[CART_SESSION_KEY] = cart
        if self._storage is None:
            session.modified = True

    def get_cart_items(self) -> List[Dict[str, Any]]:
        return self._get_cart()

    def get_cart(self) -> Dict[str, Any]:
        """
        Carrito con totales calculados.

        Returns:
            Dict con items, total, total_items, items_count
        """
        cart = self._get_cart()
        return {
            'items': [
                {**item, 'subtotal': round(float(item.get('price', 0)) * item.get('qty', 0), 2)}
                for item in cart
            ],
            'total': cart_total(cart),
            'total_items': sum(item.get('qty', 0) for item in cart),
            'items_count': len(cart),
        }

    def adjust_quantity(self, product_id: Any, delta: Any) -> Dict[str, Any]:
        """
        Suma delta a la cantidad del producto (ver apply_quantity_delta).

        El producto se busca en el catálogo solo si hay que agregarlo;
        el precio queda congelado en la línea desde ese momento.
        """
        try:
            product_id = int(product_id)
            delta = int(delta)
        except (TypeError, ValueError):
            return {'ok': False, 'error': 'Producto o cantidad inválidos'}

        cart = self._get_cart()
        in_cart = next((item for item in cart if item.get('id') == product_id), None)

        if in_cart is not None:
            product = in_cart
        elif delta > 0:
            product = self.catalog_service.get_product(product_id)
            if not product:
                return {'ok': False, 'error': 'Producto no encontrado'}
        else:
            return {'ok': True, 'carrito': self.get_cart()}

        self._save_cart(apply_quantity_delta(cart, product, delta))
        return {'ok': True, 'carrito': self.get_cart()}

    def remove_item(self, product_id: Any) -> Dict[str, Any]:
        """Elimina la línea sin importar su cantidad."""
        try:
            product_id = int(product_id)
        except (TypeError, ValueError):
            return {'ok': False, 'error': 'ID de producto inválido'}

        self._save_cart([item for item in self._get_cart() if item.get('id') != product_id])
        return {'ok': True, 'carrito': self.get_cart()}

    def clear_cart(self) -> Dict[str, Any]:
        self._save_cart([])
        return {'ok': True, 'carrito': self.get_cart()}
