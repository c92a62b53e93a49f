# ==============================================================================
# SERVICIO DE CATÁLOGO
# ==============================================================================
# Carga el catálogo completo (una sola lectura, orden por nombre) y filtra
# en memoria por nombre o categoría.
# ==============================================================================

import logging
from typing import Any, Dict, List, Optional

from pos_sucursales.models import Product
from pos_sucursales.repositories.interfaces import DataStoreError, IProductRepository

logger = logging.getLogger(__name__)


def filter_products(products: List[Dict[str, Any]], query: str) -> List[Dict[str, Any]]:
    """
    Filtro de búsqueda: subcadena sin distinguir mayúsculas en name o category.
    Consulta vacía -> todos los productos, en el mismo orden.
    """
    query = (query or '').strip()
    if not query:
        return list(products)
    return [p for p in products if Product.from_dict(p).matches(query)]


class CatalogService:
    """Lectura del catálogo de productos."""

    def __init__(self, product_repo: IProductRepository):
        self.product_repo = product_repo

    def load_products(self) -> List[Dict[str, Any]]:
        """
        Catálogo completo normalizado.
        Si la lectura falla se registra el error y se retorna lista vacía.
        """
        try:
            rows = self.product_repo.list_products()
        except DataStoreError as e:
            logger.error("Error al cargar productos: %s", e.message)
            return []
        return [Product.from_dict(r).to_dict() for r in rows]

    def search(self, query: str = '') -> List[Dict[str, Any]]:
        return filter_products(self.load_products(), query)

    def get_product(self, product_id: Any) -> Optional[Dict[str, Any]]:
        try:
            row = self.product_repo.get_product(int(product_id))
        except (TypeError, ValueError):
            return None
        except DataStoreError as e:
            logger.error("Error al leer producto %s: %s", product_id, e.message)
            return None
        return Product.from_dict(row).to_dict() if row else None
