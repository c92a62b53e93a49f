# ==============================================================================
# SERVICIO DE IDENTIDAD - Selector de rol / sucursal
# ==============================================================================
# La identidad activa vive en la sesión del cliente (cookie firmada de Flask)
# bajo la clave 'sucursal_activa':
#   "1", "2", "3" -> vendedor de esa sucursal (pantalla /pos)
#   "admin"       -> administrador (pantalla /dashboard)
# No hay validación contra el servidor: es una bandera confiada al cliente.
# ==============================================================================

import logging
from typing import Any, Dict, List, MutableMapping, Optional, Tuple

from flask import session

from pos_sucursales.models import Identity, IDENTITY_SESSION_KEY, STORES

logger = logging.getLogger(__name__)


# Opciones del login, en el orden en que se muestran
IDENTITY_OPTIONS: List[Tuple[str, str]] = [
    (Identity.SUCURSAL_1.value, f'Vendedor - {STORES[1][0]}'),
    (Identity.SUCURSAL_2.value, f'Vendedor - {STORES[2][0]}'),
    (Identity.SUCURSAL_3.value, f'Vendedor - {STORES[3][0]}'),
    (Identity.ADMIN.value, 'ADMINISTRADOR - (Dashboard Global)'),
]
VALID_IDENTITIES = frozenset(value for value, _ in IDENTITY_OPTIONS)


class IdentityService:
    """
    Servicio para la identidad activa.

    Responsabilidades:
    - Guardar la elección del login
    - Resolver la pantalla destino
    - Responder a los guards de /pos y /dashboard
    """

    def __init__(self, storage: Optional[MutableMapping] = None):
        """
        Args:
            storage: Mapeo donde guardar la identidad. Por defecto la
                     sesión de Flask (solo válido dentro de un request).
        """
        self._storage = storage

    @property
    def _store(self) -> MutableMapping:
        return session if self._storage is None else self._storage

    def options(self) -> List[Tuple[str, str]]:
        return list(IDENTITY_OPTIONS)

    def login(self, value: Any) -> Dict[str, Any]:
        """
        Guarda la identidad elegida tal cual.

        Returns:
            {'ok': True, 'identity': str, 'destination': 'pos'|'dashboard'}
            o {'ok': False, 'error': str} si el valor no es una opción
        """
        value = (str(value) if value is not None else '').strip()
        if value not in VALID_IDENTITIES:
            return {'ok': False, 'error': 'Selecciona una sucursal o el rol administrador.'}

        self._store[IDENTITY_SESSION_KEY] = value
        logger.info("Ingreso con identidad %s", value)
        return {
            'ok': True,
            'identity': value,
            'destination': 'dashboard' if value == Identity.ADMIN.value else 'pos',
        }

    def logout(self) -> None:
        self._store.pop(IDENTITY_SESSION_KEY, None)

    def current(self) -> Optional[str]:
        """Identidad guardada o None."""
        return self._store.get(IDENTITY_SESSION_KEY)

    def is_admin(self) -> bool:
        return self.current() == Identity.ADMIN.value

    def cashier_store_id(self) -> Optional[int]:
        """
        Id de sucursal de una sesión de caja.
        None si no hay identidad, si es admin o si el valor no es numérico.
        """
        value = self.current()
        if not value or value == Identity.ADMIN.value:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
