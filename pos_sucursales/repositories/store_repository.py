# ==============================================================================
# REPOSITORIO DE SUCURSALES (JSON)
# ==============================================================================
# Encapsula el acceso a stores.json. Se crea con las tres sucursales fijas.
# ==============================================================================

import os
from typing import Any, Dict, List

from pos_sucursales.models import STORES, Store
from pos_sucursales.repositories.base import ListRepository


class StoreRepository(ListRepository):
    """
    Repositorio de sucursales.

    Formato de stores.json:
    [
        {"id": 1, "name": "Local Centro"},
        ...
    ]
    """

    def __init__(self, base_path: str):
        super().__init__(os.path.join(base_path, 'stores.json'))

    def _empty_data(self) -> List[Dict[str, Any]]:
        return [Store(id=sid, name=names[0]).to_dict() for sid, names in STORES.items()]

    def list_stores(self) -> List[Dict[str, Any]]:
        stores = [Store.from_dict(row) for row in self.get_all()]
        return [s.to_dict() for s in sorted(stores, key=lambda s: s.id)]
