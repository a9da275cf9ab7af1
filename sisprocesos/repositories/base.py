# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para acceso a archivos JSON
# ==============================================================================

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Generic, Iterable, List, Optional, Type
import threading

from sisprocesos.models.entities import E
from sisprocesos.repositories.filters import apply_sort
from sisprocesos.repositories.pagination import Page, PageRequest, paginate

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Clase base abstracta para todos los repositorios.
    Proporciona funcionalidad común para lectura/escritura de archivos JSON
    con manejo de concurrencia básico mediante locks.

    Al migrar a una base de datos:
    - Esta clase se reemplazará por una conexión a base de datos
    - Los métodos de lectura/escritura se convertirán en queries SQL
    - Los locks se reemplazarán por transacciones de BD
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
        """Crea el archivo (y su carpeta) con datos vacíos si no existe."""
        if not os.path.exists(self.file_path):
            os.makedirs(os.path.dirname(os.path.abspath(self.file_path)), exist_ok=True)
            self._write_raw(self._empty_data())

    @abstractmethod
    def _empty_data(self) -> Any:
        """
        Retorna la estructura de datos vacía para este repositorio.
        Debe ser implementado por cada repositorio concreto.
        """
        pass

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.

        Returns:
            Datos parseados del JSON (estructura vacía si el archivo no existe)

        Raises:
            json.JSONDecodeError: Si el archivo tiene JSON inválido
            OSError: Si hay error de lectura
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except FileNotFoundError:
                return self._empty_data()
            except json.JSONDecodeError:
                logger.error('[REPO] Archivo corrupto: %s', self.file_path)
                raise

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON.

        Args:
            data: Datos a serializar y escribir

        Raises:
            OSError: Si hay error de escritura
        """
        with self._file_lock:
            # Escribir a archivo temporal primero para atomicidad
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                # Reemplazar archivo original (operación atómica en la mayoría de sistemas)
                os.replace(temp_path, self.file_path)
            except Exception:
                # Limpiar archivo temporal si algo falla
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise


class EntityRepository(BaseRepository, Generic[E]):
    """
    Repositorio CRUD genérico para entidades con id numérico generado.

    Formato del archivo:
    {
        "next_id": 3,
        "records": {
            "1": {"id": 1, ...},
            "2": {"id": 2, ...}
        }
    }

    Las claves de "records" son el id como texto (JSON no admite claves int);
    el orden de inserción es el orden natural del repositorio.
    """

    def __init__(self, file_path: str, entity_class: Type[E]):
        """
        Args:
            file_path: Ruta al archivo JSON
            entity_class: Clase de la entidad (subclase de BaseEntity)
        """
        self.entity_class = entity_class
        super().__init__(file_path)

    def _empty_data(self) -> Dict[str, Any]:
        return {'next_id': 1, 'records': {}}

    @staticmethod
    def _key(record_id: Any) -> str:
        return str(record_id)

    def _to_entity(self, record: Dict[str, Any]) -> E:
        return self.entity_class.from_dict(record)

    def _records(self) -> Dict[str, Dict[str, Any]]:
        return self._read_raw().get('records', {})

    # =========================================================================
    # LECTURA
    # =========================================================================

    def find_by_id(self, record_id: Any) -> Optional[E]:
        """
        Obtiene una entidad por su ID.

        Returns:
            Entidad o None si no existe
        """
        if record_id is None:
            return None
        record = self._records().get(self._key(record_id))
        return self._to_entity(record) if record is not None else None

    def find_all_by_id(self, ids: Iterable[Any]) -> List[E]:
        """
        Obtiene las entidades cuyos IDs están en la lista.
        Los IDs inexistentes se omiten; el resultado sigue el orden del repositorio.
        """
        wanted = {self._key(i) for i in ids if i is not None}
        return [
            self._to_entity(record)
            for key, record in self._records().items()
            if key in wanted
        ]

    def find_all(self) -> List[E]:
        """Obtiene todas las entidades (sin paginar)."""
        return [self._to_entity(record) for record in self._records().values()]

    def find_page(
        self,
        page_request: PageRequest,
        predicate: Optional[Callable[[E], bool]] = None
    ) -> Page[E]:
        """
        Obtiene una página de entidades.

        Args:
            page_request: Página, tamaño y orden
            predicate: Filtro opcional aplicado antes de paginar

        Returns:
            Página con el total de entidades que cumplen el filtro
        """
        items = self.find_all()
        if predicate is not None:
            items = [e for e in items if predicate(e)]
        return paginate(apply_sort(items, page_request), page_request)

    def find_all_by(self, field: str, value: Any) -> List[E]:
        """Todas las entidades cuyo campo coincide exactamente con el valor."""
        return [e for e in self.find_all() if getattr(e, field) == value]

    def count(self) -> int:
        return len(self._records())

    # =========================================================================
    # ESCRITURA
    # =========================================================================

    def save(self, entity: E) -> E:
        """
        Inserta o actualiza una entidad (upsert).

        Si la entidad no tiene id se le asigna el siguiente de la secuencia.
        Si tiene id se reemplaza el registro (o se crea con ese id).

        Args:
            entity: Entidad a guardar (se le asigna el id si es nueva)

        Returns:
            Copia de la entidad tal como quedó almacenada
        """
        with self._file_lock:
            data = self._read_raw()
            records = data.setdefault('records', {})
            next_id = data.get('next_id', 1)

            entity_id = next_id if entity.id is None else entity.id
            if isinstance(entity_id, int) and entity_id >= next_id:
                next_id = entity_id + 1

            record = entity.to_dict()
            record['id'] = entity_id
            records[self._key(entity_id)] = record
            data['next_id'] = next_id
            self._write_raw(data)
            entity.id = entity_id

        logger.debug('[REPO] %s %s guardado', self.entity_class.__name__, entity.id)
        return self._to_entity(record)

    def delete_by_id(self, record_id: Any) -> None:
        """
        Elimina una entidad por su ID.
        Si el ID no existe no hace nada.
        """
        with self._file_lock:
            data = self._read_raw()
            removed = data.get('records', {}).pop(self._key(record_id), None)
            if removed is not None:
                self._write_raw(data)
        if removed is not None:
            logger.debug('[REPO] %s %s eliminado', self.entity_class.__name__, record_id)
