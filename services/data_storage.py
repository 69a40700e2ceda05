"""
Data Storage Management

Stores uploaded datasets and the recent prediction history, either in
memory or as JSON files under the configured data directory.
"""

import json
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional
import logging

from models.dataset_models import Dataset
from models.prediction_models import PredictionRecord
from services.exceptions import DatasetNotFoundError

logger = logging.getLogger("riskcast.data_storage")


class DatasetStore(ABC):
    """Contract for dataset persistence"""

    @abstractmethod
    def get_stored_datasets(self) -> List[Dataset]:
        """All stored datasets, oldest first"""

    @abstractmethod
    def save_dataset(self, dataset: Dataset) -> Dataset:
        """Insert or replace a dataset by id"""

    @abstractmethod
    def delete_dataset(self, dataset_id: str) -> None:
        """Remove a dataset; raises DatasetNotFoundError if absent"""

    def get_dataset(self, dataset_id: str) -> Dataset:
        for dataset in self.get_stored_datasets():
            if dataset.id == dataset_id:
                return dataset
        raise DatasetNotFoundError(dataset_id)


class InMemoryDatasetStore(DatasetStore):

    def __init__(self):
        self._datasets: Dict[str, Dataset] = {}
        self._lock = threading.Lock()

    def get_stored_datasets(self) -> List[Dataset]:
        with self._lock:
            return list(self._datasets.values())

    def save_dataset(self, dataset: Dataset) -> Dataset:
        with self._lock:
            self._datasets[dataset.id] = dataset
        return dataset

    def delete_dataset(self, dataset_id: str) -> None:
        with self._lock:
            if dataset_id not in self._datasets:
                raise DatasetNotFoundError(dataset_id)
            del self._datasets[dataset_id]


class JsonFileDatasetStore(DatasetStore):
    """Datasets kept as a single JSON array on disk"""

    def __init__(self, data_dir: str = "data", filename: str = "datasets.json"):
        """
        Initialize file storage

        Args:
            data_dir: Base directory for data storage
            filename: JSON file holding every dataset
        """
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.path = self.data_dir / filename
        self._lock = threading.Lock()

    def _load(self) -> List[Dataset]:
        if not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Error loading datasets from {self.path}: {e}")
            return []
        return [Dataset.model_validate(item) for item in raw]

    def _write(self, datasets: List[Dataset]):
        payload = [dataset.model_dump(mode="json") for dataset in datasets]
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        tmp_path.replace(self.path)

    def get_stored_datasets(self) -> List[Dataset]:
        with self._lock:
            return self._load()

    def save_dataset(self, dataset: Dataset) -> Dataset:
        with self._lock:
            datasets = [d for d in self._load() if d.id != dataset.id]
            datasets.append(dataset)
            self._write(datasets)
        logger.info(f"Saved dataset {dataset.id} ({len(dataset.records)} records) to {self.path}")
        return dataset

    def delete_dataset(self, dataset_id: str) -> None:
        with self._lock:
            datasets = self._load()
            remaining = [d for d in datasets if d.id != dataset_id]
            if len(remaining) == len(datasets):
                raise DatasetNotFoundError(dataset_id)
            self._write(remaining)
        logger.info(f"Deleted dataset {dataset_id}")


class PredictionHistory:
    """
    Most recent predictions, newest first

    Only the last `limit` entries are kept. With a `path` the history
    survives restarts.
    """

    def __init__(self, limit: int = 10, path: Optional[Path] = None):
        self.limit = limit
        self.path = Path(path) if path else None
        self._lock = threading.Lock()
        self._entries: List[PredictionRecord] = self._load()

    def _load(self) -> List[PredictionRecord]:
        if self.path is None or not self.path.exists():
            return []
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning(f"Error loading prediction history: {e}")
            return []
        return [PredictionRecord.model_validate(item) for item in raw][:self.limit]

    def _save(self):
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump([entry.model_dump(mode="json") for entry in self._entries], f, indent=2)

    def add(self, entry: PredictionRecord) -> PredictionRecord:
        with self._lock:
            self._entries = ([entry] + self._entries)[:self.limit]
            self._save()
        return entry

    def list(self) -> List[PredictionRecord]:
        with self._lock:
            return list(self._entries)

    def clear(self):
        with self._lock:
            self._entries = []
            self._save()

    def __len__(self) -> int:
        return len(self._entries)
