"""Record store abstraction with in-memory and JSON file backends."""

from abc import ABC, abstractmethod
from copy import copy
from typing import Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar
import json
import logging
import os
import tempfile
import threading

from ..models import Housing, Traffic
from ..utils.error_handling import ConfigurationError, StorageError

logger = logging.getLogger(__name__)

R = TypeVar('R')

TRAFFIC_PARTITION = "traffic"
HOUSING_PARTITION = "housing"


class RecordStore(ABC, Generic[R]):
    """Keyed collection of records supporting insert, lookup and enumeration."""
    
    def __init__(self, partition: str):
        self.partition = partition
    
    @abstractmethod
    def get(self, key: str) -> Optional[R]:
        """Return the record stored under key, or None."""
    
    @abstractmethod
    def insert(self, key: str, record: R) -> None:
        """Store record under key, replacing any previous record."""
    
    @abstractmethod
    def values(self) -> List[R]:
        """Return every stored record."""
    
    def scan(self, predicate: Callable[[R], bool]) -> List[R]:
        """Return the records for which predicate is true."""
        return [record for record in self.values() if predicate(record)]
    
    def __len__(self) -> int:
        return len(self.values())
    
    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class InMemoryRecordStore(RecordStore[R]):
    """Dictionary-backed record store guarded by a re-entrant lock.
    
    Records are copied on the way in and out; changing a returned record
    never changes what is stored.
    """
    
    def __init__(self, partition: str):
        super().__init__(partition)
        self._records: Dict[str, R] = {}
        self._lock = threading.RLock()
    
    def get(self, key: str) -> Optional[R]:
        with self._lock:
            record = self._records.get(key)
            return copy(record) if record is not None else None
    
    def insert(self, key: str, record: R) -> None:
        with self._lock:
            self._records[key] = copy(record)
        logger.debug(f"Stored {self.partition} record {key}")
    
    def values(self) -> List[R]:
        with self._lock:
            return [copy(record) for record in self._records.values()]
    
    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


class JsonFileRecordStore(InMemoryRecordStore[R]):
    """Record store persisted to a single JSON file.
    
    The whole partition is loaded at construction and rewritten atomically
    after every insert. Records are converted with the record class's
    to_dict/from_dict.
    """
    
    def __init__(self, partition: str, file_path: str, record_cls: Type[R]):
        super().__init__(partition)
        self.file_path = file_path
        self.record_cls = record_cls
        self._load()
    
    def _load(self) -> None:
        if not os.path.exists(self.file_path):
            logger.info(f"No {self.partition} data file at {self.file_path}, starting empty")
            return
        
        try:
            with open(self.file_path, 'r') as f:
                raw = json.load(f)
            self._records = {key: self.record_cls.from_dict(value) for key, value in raw.items()}
        except Exception as e:
            raise StorageError(
                f"Failed to load {self.partition} records from {self.file_path}: {e}",
                partition=self.partition
            ) from e
        
        logger.info(f"Loaded {len(self._records)} {self.partition} records from {self.file_path}")
    
    def insert(self, key: str, record: R) -> None:
        with self._lock:
            previous = self._records.get(key)
            self._records[key] = copy(record)
            try:
                self._save()
            except OSError as e:
                # keep memory consistent with the file
                if previous is None:
                    del self._records[key]
                else:
                    self._records[key] = previous
                raise StorageError(
                    f"Failed to write {self.partition} record {key}: {e}",
                    partition=self.partition
                ) from e
        logger.debug(f"Persisted {self.partition} record {key}")
    
    def _save(self) -> None:
        directory = os.path.dirname(self.file_path) or "."
        os.makedirs(directory, exist_ok=True)
        
        payload = {key: record.to_dict() for key, record in self._records.items()}
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{self.partition}-", suffix=".json")
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_path, self.file_path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


def create_stores(config) -> Tuple[RecordStore[Traffic], RecordStore[Housing]]:
    """
    Build the traffic and housing partitions for a SystemConfig.
    
    Args:
        config: SystemConfig naming the storage backend and data directory
    
    Returns:
        Tuple of (traffic_store, housing_store)
    """
    backend = config.storage_backend
    
    if backend == "memory":
        return InMemoryRecordStore(TRAFFIC_PARTITION), InMemoryRecordStore(HOUSING_PARTITION)
    
    if backend == "json":
        traffic_store = JsonFileRecordStore(
            TRAFFIC_PARTITION, os.path.join(config.data_dir, f"{TRAFFIC_PARTITION}.json"), Traffic
        )
        housing_store = JsonFileRecordStore(
            HOUSING_PARTITION, os.path.join(config.data_dir, f"{HOUSING_PARTITION}.json"), Housing
        )
        return traffic_store, housing_store
    
    raise ConfigurationError(f"Unknown storage backend: {backend}", config_section="storage_backend")
