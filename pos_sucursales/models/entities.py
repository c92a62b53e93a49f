# ==============================================================================
# ENTIDADES DEL DOMINIO - Definiciones de dataclasses
# ==============================================================================
# Cada entidad representa un concepto del negocio.
# Diseñadas para ser independientes del mecanismo de persistencia
# (archivos JSON en desarrollo, Supabase/PostgREST en producción).
# ==============================================================================

from dataclasses import dataclass
from typing import Optional, Dict, Any
from enum import Enum


# ==============================================================================
# ENUMERACIONES - Estados y tipos válidos
# ==============================================================================

class OrderStatus(str, Enum):
    """Estados posibles de una orden."""
    COMPLETADA = "completada"  # Venta confirmada en caja
    CANCELADA = "cancelada"    # Venta anulada desde el dashboard


class Identity(str, Enum):
    """Identidades seleccionables en el login."""
    SUCURSAL_1 = "1"
    SUCURSAL_2 = "2"
    SUCURSAL_3 = "3"
    ADMIN = "admin"


# Clave de sesión donde se guarda la identidad activa
IDENTITY_SESSION_KEY = 'sucursal_activa'

# Sucursales fijas del sistema: id -> (nombre completo, etiqueta corta)
STORES = {
    1: ('Local Centro', 'Centro'),
    2: ('Local Shopping', 'Shopping'),
    3: ('Depósito', 'Depósito'),
}
STORE_IDS = tuple(STORES.keys())


def store_name(store_id: Any) -> str:
    """Nombre visible de una sucursal ('' si no existe)."""
    try:
        return STORES[int(store_id)][0]
    except (KeyError, TypeError, ValueError):
        return ''


def _to_float(value: Any) -> float:
    # Los decimales llegan como str desde PostgREST (numeric) o float desde JSON
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


# ==============================================================================
# ENTIDADES DE REFERENCIA
# ==============================================================================

@dataclass
class Store:
    """Sucursal (dato de referencia estático)."""
    id: int
    name: str

    def to_dict(self) -> Dict[str, Any]:
        return {'id': self.id, 'name': self.name}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Store':
        return cls(id=int(data.get('id', 0)), name=data.get('name', ''))


@dataclass
class Product:
    """
    Producto del catálogo. Solo lectura desde esta aplicación.

    Attributes:
        id: Identificador del producto
        name: Nombre visible
        price: Precio de venta
        image_url: URL de la imagen (opcional)
        category: Categoría usada en la búsqueda (opcional)
        subcategory: Subcategoría mostrada en la tarjeta (opcional)
    """
    id: int
    name: str
    price: float = 0.0
    image_url: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None

    def matches(self, query: str) -> bool:
        """Coincidencia por subcadena (sin mayúsculas) en nombre o categoría."""
        q = (query or '').lower()
        if not q:
            return True
        if q in (self.name or '').lower():
            return True
        return q in (self.category or '').lower()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'image_url': self.image_url,
            'category': self.category,
            'subcategory': self.subcategory,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Product':
        return cls(
            id=int(data.get('id', 0)),
            name=data.get('name', '') or '',
            price=_to_float(data.get('price')),
            image_url=data.get('image_url'),
            category=data.get('category'),
            subcategory=data.get('subcategory'),
        )


# ==============================================================================
# ENTIDADES DE VENTA
# ==============================================================================

@dataclass
class OrderItem:
    """
    Línea de una orden. Inmutable una vez creada.

    Attributes:
        order_id: Orden a la que pertenece
        product_id: Producto vendido
        product_name: Copia del nombre al momento de la venta
        quantity: Cantidad (>= 1)
        price_at_sale: Precio unitario al momento de agregar al carrito
    """
    order_id: int
    product_id: int
    product_name: str
    quantity: int
    price_at_sale: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'order_id': self.order_id,
            'product_id': self.product_id,
            'quantity': self.quantity,
            'price_at_sale': self.price_at_sale,
            'product_name': self.product_name,
        }


@dataclass
class Order:
    """Cabecera de venta."""
    id: int
    created_at: str
    store_id: int
    total: float
    status: str = OrderStatus.COMPLETADA.value
    store_name: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'created_at': self.created_at,
            'store_id': self.store_id,
            'total': self.total,
            'status': self.status,
            'stores': {'name': self.store_name},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Order':
        """Crea instancia desde una fila (con o sin el join 'stores')."""
        joined = data.get('stores') or {}
        return cls(
            id=int(data.get('id', 0)),
            created_at=data.get('created_at', '') or '',
            store_id=int(data.get('store_id', 0) or 0),
            total=_to_float(data.get('total')),
            status=data.get('status', OrderStatus.COMPLETADA.value),
            store_name=joined.get('name', '') or store_name(data.get('store_id')),
        )
