# ==============================================================================
# CLIENTE REST DE SUPABASE (PostgREST)
# ==============================================================================
# Cliente genérico de consultas sobre la API REST del proyecto:
#   GET    {url}/rest/v1/<tabla>?select=...&col=eq.valor&order=col.asc
#   POST   {url}/rest/v1/<tabla>            (insert simple o masivo)
#   PATCH  {url}/rest/v1/<tabla>?id=eq.N    (update por filtro)
#
# Cualquier error HTTP o de red se traduce a DataStoreError con el mensaje
# crudo que devuelve PostgREST.
# ==============================================================================

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from pos_sucursales.repositories.interfaces import DataStoreError

logger = logging.getLogger(__name__)


class SupabaseClient:
    """
    Cliente mínimo para la API REST de Supabase.

    Uso:
        client = SupabaseClient('https://xxxx.supabase.co', 'anon-key')
        rows = client.select('products', order='name.asc')
    """

    def __init__(
        self,
        url: str,
        key: str,
        timeout: float = 15,
        session: Optional[requests.Session] = None
    ):
        if not url or not key:
            raise DataStoreError('SUPABASE_URL y SUPABASE_KEY son obligatorias')
        self.base_url = url.rstrip('/') + '/rest/v1'
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            'apikey': key,
            'Authorization': f'Bearer {key}',
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        })

    @staticmethod
    def eq(value: Any) -> str:
        """Filtro de igualdad en sintaxis PostgREST."""
        return f'eq.{value}'

    def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, str]] = None,
        payload: Union[Dict[str, Any], List[Dict[str, Any]], None] = None,
        prefer: Optional[str] = None
    ) -> Any:
        headers = {'Prefer': prefer} if prefer else None
        try:
            resp = self.session.request(
                method,
                f'{self.base_url}/{table}',
                params=params,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Supabase %s %s: %s", method, table, e)
            raise DataStoreError(str(e))

        if not resp.ok:
            message = self._error_message(resp)
            logger.error("Supabase %s %s -> %s: %s", method, table, resp.status_code, message)
            raise DataStoreError(message, status_code=resp.status_code)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            raise DataStoreError(f'Respuesta inválida de {table}', status_code=resp.status_code)

    @staticmethod
    def _error_message(resp: requests.Response) -> str:
        try:
            body = resp.json()
        except ValueError:
            return resp.text or f'HTTP {resp.status_code}'
        if isinstance(body, dict):
            return body.get('message') or body.get('error') or str(body)
        return str(body)

    # =========================================================================
    # OPERACIONES
    # =========================================================================

    def select(
        self,
        table: str,
        columns: str = '*',
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Lectura completa con filtros de igualdad y orden.

        Args:
            table: Relación a consultar
            columns: Lista select, admite joins de un nivel ('*, stores(name)')
            filters: {columna: valor}; admite columnas embebidas ('orders.status')
            order: 'columna.asc' o 'columna.desc'
        """
        params = {'select': columns}
        for column, value in (filters or {}).items():
            params[column] = self.eq(value)
        if order:
            params['order'] = order
        return self._request('GET', table, params=params) or []

    def insert(
        self,
        table: str,
        rows: Union[Dict[str, Any], List[Dict[str, Any]]],
        returning: bool = True
    ) -> List[Dict[str, Any]]:
        """Inserta una fila o una lista de filas."""
        prefer = 'return=representation' if returning else 'return=minimal'
        return self._request('POST', table, payload=rows, prefer=prefer) or []

    def update(
        self,
        table: str,
        values: Dict[str, Any],
        filters: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        """Actualiza campos de las filas que cumplen los filtros de igualdad."""
        if not filters:
            raise DataStoreError('Update sin filtro no permitido')
        params = {column: self.eq(value) for column, value in filters.items()}
        return self._request(
            'PATCH', table, params=params, payload=values,
            prefer='return=representation'
        ) or []
