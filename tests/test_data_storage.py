"""
Storage tests: dataset stores and the prediction history
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from models.base import BaseConditions, DisasterType, PredictionMethod, RiskLevel
from models.dataset_models import WeatherRecord
from models.prediction_models import PredictionRecord
from services.data_storage import InMemoryDatasetStore, JsonFileDatasetStore, PredictionHistory
from services.exceptions import DatasetNotFoundError

from conftest import make_dataset


def make_history_entry(score: int) -> PredictionRecord:
    return PredictionRecord(
        risk_score=score,
        risk_level=RiskLevel.LOW,
        confidence=80,
        timeline="3-7 days",
        affected_population=100,
        method=PredictionMethod.MANUAL,
        location="mumbai",
        disaster_type=DisasterType.FLOOD,
        conditions=BaseConditions(),
    )


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path):
    if request.param == "memory":
        return InMemoryDatasetStore()
    return JsonFileDatasetStore(str(tmp_path), "datasets.json")


class TestDatasetStore:

    def test_save_and_get(self, store):
        dataset = make_dataset([WeatherRecord(date="2024-01-01", temperature=30)], "a")
        store.save_dataset(dataset)

        loaded = store.get_dataset("a")
        assert loaded.id == "a"
        assert loaded.records[0].temperature == 30.0
        assert [d.id for d in store.get_stored_datasets()] == ["a"]

    def test_save_replaces_by_id(self, store):
        store.save_dataset(make_dataset([WeatherRecord(temperature=1)], "a", name="first"))
        store.save_dataset(make_dataset([WeatherRecord(temperature=2)], "a", name="second"))

        datasets = store.get_stored_datasets()
        assert len(datasets) == 1
        assert datasets[0].name == "second"

    def test_delete(self, store):
        store.save_dataset(make_dataset([WeatherRecord(temperature=1)], "a"))
        store.save_dataset(make_dataset([WeatherRecord(temperature=2)], "b"))
        store.delete_dataset("a")

        assert [d.id for d in store.get_stored_datasets()] == ["b"]
        with pytest.raises(DatasetNotFoundError):
            store.get_dataset("a")

    def test_delete_missing_raises(self, store):
        with pytest.raises(DatasetNotFoundError):
            store.delete_dataset("missing")


class TestJsonFileDatasetStore:

    def test_survives_reopen(self, tmp_path):
        first = JsonFileDatasetStore(str(tmp_path))
        dataset = make_dataset([WeatherRecord(date="2024-01-01", temperature="hot", rainfall=12.5)], "a")
        first.save_dataset(dataset)

        reopened = JsonFileDatasetStore(str(tmp_path)).get_dataset("a")
        assert reopened.upload_date == dataset.upload_date
        assert reopened.records[0].temperature == "hot"
        assert reopened.records[0].rainfall == 12.5
        assert reopened.summary == dataset.summary

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        (tmp_path / "datasets.json").write_text("{not json", encoding="utf-8")
        assert JsonFileDatasetStore(str(tmp_path)).get_stored_datasets() == []


class TestPredictionHistory:

    def test_keeps_last_ten_newest_first(self):
        history = PredictionHistory(limit=10)
        for score in range(12):
            history.add(make_history_entry(score))

        entries = history.list()
        assert len(entries) == 10
        assert entries[0].risk_score == 11
        assert entries[-1].risk_score == 2

    def test_clear(self):
        history = PredictionHistory()
        history.add(make_history_entry(5))
        history.clear()
        assert history.list() == []
        assert len(history) == 0

    def test_persisted_history(self, tmp_path):
        path = tmp_path / "history.json"
        history = PredictionHistory(limit=3, path=path)
        for score in (10, 20, 30, 40):
            history.add(make_history_entry(score))

        reloaded = PredictionHistory(limit=3, path=path)
        assert [e.risk_score for e in reloaded.list()] == [40, 30, 20]
        assert reloaded.list()[0].id == history.list()[0].id


class TestConcurrentAccess:

    def test_parallel_saves_are_all_kept(self, store):
        datasets = [make_dataset([WeatherRecord(temperature=i)], f"ds-{i}") for i in range(20)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(store.save_dataset, datasets))

        assert sorted(d.id for d in store.get_stored_datasets()) == sorted(d.id for d in datasets)

    def test_parallel_history_adds_respect_limit(self, tmp_path):
        history = PredictionHistory(limit=10, path=tmp_path / "history.json")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(history.add, [make_history_entry(i) for i in range(30)]))

        assert len(history) == 10
        assert len(PredictionHistory(limit=10, path=tmp_path / "history.json")) == 10
