# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto único para obtener repositorios y servicios. Facilita:
#   - Elegir el almacén de datos (JSON local o Supabase) por configuración
#   - Testing (contenedor apuntando a una carpeta temporal)
#
# CAMBIO DE ALMACÉN:
#   POS_DATA_BACKEND=json      -> archivos en POS_DATA_DIR
#   POS_DATA_BACKEND=supabase  -> SUPABASE_URL + SUPABASE_KEY
# Los servicios NO requieren cambios: dependen de las interfaces.
# ==============================================================================

import logging
from typing import Optional

from pos_sucursales import config

# ═══════════════════════════════════════════════════════════════════════════════
# REPOSITORIOS - Capa de persistencia
# ═══════════════════════════════════════════════════════════════════════════════
from pos_sucursales.repositories import (
    StoreRepository,
    ProductRepository,
    OrderRepository,
    OrderItemRepository,
    SupabaseClient,
    SupabaseStoreRepository,
    SupabaseProductRepository,
    SupabaseOrderRepository,
    SupabaseOrderItemRepository,
)

# ═══════════════════════════════════════════════════════════════════════════════
# SERVICIOS - Capa de lógica de negocio
# ═══════════════════════════════════════════════════════════════════════════════
from pos_sucursales.services import (
    IdentityService,
    CatalogService,
    CartService,
    SalesService,
    StatsService,
)

logger = logging.getLogger(__name__)

BACKENDS = ('json', 'supabase')


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Implementa el patrón Singleton para asegurar una única instancia
    de cada repositorio y servicio.

    Uso:
        container = AppContainer(base_path='/ruta/a/datos')
        sales_service = container.sales_service
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls, base_path: str = None, backend: str = None):
        """Singleton pattern."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, base_path: str = None, backend: str = None):
        """
        Args:
            base_path: Carpeta de los archivos JSON (backend 'json')
            backend: 'json' o 'supabase' (por defecto config.DATA_BACKEND)
        """
        if self._initialized:
            return

        self._base_path = base_path or config.DATA_DIR
        self._backend = (backend or config.DATA_BACKEND).lower()
        if self._backend not in BACKENDS:
            raise ValueError(f"POS_DATA_BACKEND inválido: {self._backend!r}")

        self._supabase_client: Optional[SupabaseClient] = None
        self._store_repo = None
        self._product_repo = None
        self._order_repo = None
        self._order_item_repo = None

        self._identity_service: Optional[IdentityService] = None
        self._catalog_service: Optional[CatalogService] = None
        self._cart_service: Optional[CartService] = None
        self._sales_service: Optional[SalesService] = None
        self._stats_service: Optional[StatsService] = None

        logger.info("Almacén de datos: %s", self._backend)
        self._initialized = True

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def supabase_client(self) -> SupabaseClient:
        if self._supabase_client is None:
            self._supabase_client = SupabaseClient(
                config.SUPABASE_URL,
                config.SUPABASE_KEY,
                timeout=config.REQUEST_TIMEOUT,
            )
        return self._supabase_client

    @property
    def store_repo(self):
        """Repositorio de sucursales (singleton)."""
        if self._store_repo is None:
            if self._backend == 'supabase':
                self._store_repo = SupabaseStoreRepository(self.supabase_client)
            else:
                self._store_repo = StoreRepository(self._base_path)
        return self._store_repo

    @property
    def product_repo(self):
        """Repositorio de productos (singleton)."""
        if self._product_repo is None:
            if self._backend == 'supabase':
                self._product_repo = SupabaseProductRepository(self.supabase_client)
            else:
                self._product_repo = ProductRepository(self._base_path)
        return self._product_repo

    @property
    def order_repo(self):
        """Repositorio de órdenes (singleton)."""
        if self._order_repo is None:
            if self._backend == 'supabase':
                self._order_repo = SupabaseOrderRepository(self.supabase_client)
            else:
                self._order_repo = OrderRepository(self._base_path, self.store_repo)
        return self._order_repo

    @property
    def order_item_repo(self):
        """Repositorio de líneas de venta (singleton)."""
        if self._order_item_repo is None:
            if self._backend == 'supabase':
                self._order_item_repo = SupabaseOrderItemRepository(self.supabase_client)
            else:
                self._order_item_repo = OrderItemRepository(self._base_path, self.order_repo)
        return self._order_item_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def identity_service(self) -> IdentityService:
        if self._identity_service is None:
            self._identity_service = IdentityService()
        return self._identity_service

    @property
    def catalog_service(self) -> CatalogService:
        if self._catalog_service is None:
            self._catalog_service = CatalogService(self.product_repo)
        return self._catalog_service

    @property
    def cart_service(self) -> CartService:
        if self._cart_service is None:
            self._cart_service = CartService(self.catalog_service)
        return self._cart_service

    @property
    def sales_service(self) -> SalesService:
        if self._sales_service is None:
            self._sales_service = SalesService(self.order_repo, self.order_item_repo)
        return self._sales_service

    @property
    def stats_service(self) -> StatsService:
        if self._stats_service is None:
            self._stats_service = StatsService(self.order_repo, self.order_item_repo)
        return self._stats_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """Reinicia todas las instancias (útil para tests o recarga)."""
        self._supabase_client = None
        self._store_repo = None
        self._product_repo = None
        self._order_repo = None
        self._order_item_repo = None

        self._identity_service = None
        self._catalog_service = None
        self._cart_service = None
        self._sales_service = None
        self._stats_service = None

    @classmethod
    def get_instance(cls, base_path: str = None, backend: str = None) -> 'AppContainer':
        """
        Obtiene la instancia singleton del contenedor.
        base_path y backend solo se usan en la primera llamada.
        """
        if cls._instance is None:
            return cls(base_path, backend)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia singleton (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container(base_path: str = None, backend: str = None) -> AppContainer:
    """Obtiene el contenedor de dependencias global."""
    return AppContainer.get_instance(base_path, backend)
