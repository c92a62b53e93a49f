# ==============================================================================
# REPOSITORIO DE PRODUCTOS (JSON)
# ==============================================================================
# Encapsula el acceso a products.json. Solo lectura desde la aplicación:
# el catálogo se carga fuera de este sistema.
# ==============================================================================

import os
from typing import Any, Dict, List, Optional

from pos_sucursales.repositories.base import ListRepository


class ProductRepository(ListRepository):
    """
    Repositorio del catálogo.

    Formato de products.json:
    [
        {
            "id": 1,
            "name": "Café molido 500g",
            "price": 4.5,
            "image_url": null,
            "category": "Almacén",
            "subcategory": "Infusiones"
        }
    ]
    """

    def __init__(self, base_path: str):
        super().__init__(os.path.join(base_path, 'products.json'))

    def list_products(self) -> List[Dict[str, Any]]:
        """Catálogo completo ordenado por nombre ascendente."""
        return sorted(self.get_all(), key=lambda p: p.get('name') or '')

    def get_product(self, product_id: int) -> Optional[Dict[str, Any]]:
        try:
            return self.find_by('id', int(product_id))
        except (TypeError, ValueError):
            return None
