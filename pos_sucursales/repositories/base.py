# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para el almacén JSON local
# ==============================================================================

import json
import os
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pos_sucursales.repositories.interfaces import DataStoreError


class BaseRepository(ABC):
    """
    Clase base abstracta para los repositorios JSON.
    Proporciona lectura/escritura de archivos JSON con un lock
    compartido entre todos los repositorios del proceso.

    Cada archivo representa una relación del almacén (stores.json,
    products.json, orders.json, order_items.json).
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, file_path: str):
        """
        Inicializa el repositorio con la ruta al archivo JSON.

        Args:
            file_path: Ruta absoluta al archivo JSON de datos
        """
        self.file_path = file_path
        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        """Crea el archivo (y su carpeta) con datos iniciales si no existe."""
        if not os.path.exists(self.file_path):
            os.makedirs(os.path.dirname(os.path.abspath(self.file_path)), exist_ok=True)
            self._write_raw(self._empty_data())

    @abstractmethod
    def _empty_data(self) -> Any:
        """
        Retorna la estructura inicial para este repositorio.

        Returns:
            Estructura vacía (o semilla) según el repositorio
        """

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.

        Raises:
            DataStoreError: Si el archivo no se puede leer o tiene JSON inválido
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except FileNotFoundError:
                return self._empty_data()
            except (json.JSONDecodeError, OSError) as e:
                raise DataStoreError(f"{os.path.basename(self.file_path)}: {e}")

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON (archivo temporal + reemplazo atómico).

        Raises:
            DataStoreError: Si hay error de escritura
        """
        with self._file_lock:
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except (OSError, TypeError, ValueError) as e:
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise DataStoreError(f"{os.path.basename(self.file_path)}: {e}")


class ListRepository(BaseRepository):
    """
    Repositorio base para relaciones almacenadas como lista de filas.

    Ejemplo: orders.json -> [{"id": 1, ...}, {"id": 2, ...}]
    """

    def _empty_data(self) -> List:
        return []

    def get_all(self) -> List[Dict[str, Any]]:
        """Todas las filas (lista vacía si el archivo no contiene una lista)."""
        data = self._read_raw()
        return data if isinstance(data, list) else []

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        """Reemplazo completo de la relación."""
        self._write_raw(data)

    def next_id(self, rows: Optional[List[Dict[str, Any]]] = None) -> int:
        """Siguiente id autoincremental."""
        rows = self.get_all() if rows is None else rows
        return max((int(r.get('id', 0) or 0) for r in rows), default=0) + 1

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Agrega una fila asignando id. Retorna la fila almacenada.

        Args:
            record: Datos de la nueva fila (sin id)
        """
        with self._file_lock:
            data = self.get_all()
            row = dict(record)
            row['id'] = self.next_id(data)
            data.append(row)
            self._write_raw(data)
        return row

    def insert_many(self, records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Inserción masiva en una sola escritura."""
        with self._file_lock:
            data = self.get_all()
            next_id = self.next_id(data)
            rows = []
            for offset, record in enumerate(records):
                row = dict(record)
                row['id'] = next_id + offset
                rows.append(row)
            data.extend(rows)
            self._write_raw(data)
        return rows

    def find_by(self, field: str, value: Any) -> Optional[Dict[str, Any]]:
        """Primera fila cuyo campo coincide, o None."""
        for record in self.get_all():
            if record.get(field) == value:
                return record
        return None

    def find_all_by(self, field: str, value: Any) -> List[Dict[str, Any]]:
        """Todas las filas cuyo campo coincide."""
        return [r for r in self.get_all() if r.get(field) == value]

    def update_where(self, field: str, value: Any, updates: Dict[str, Any]) -> bool:
        """
        Actualiza las filas que coinciden con un campo.

        Returns:
            True si se actualizó al menos una fila
        """
        with self._file_lock:
            data = self.get_all()
            updated = False
            for record in data:
                if record.get(field) == value:
                    record.update(updates)
                    updated = True
            if updated:
                self._write_raw(data)
        return updated


def utc_now_iso() -> str:
    """Timestamp ISO en UTC, formato usado por created_at."""
    return datetime.now(timezone.utc).isoformat()
