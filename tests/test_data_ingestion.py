"""
Dataset ingestion tests

Covers:
- Header mapping and value coercion
- Row rejection and empty-record handling
- Upload validation (size, type)
- Document parsing through an injected extractor
"""

import pytest

from config import Settings
from models.base import DatasetSource
from services.data_ingestion import (
    DatasetIdSequence,
    DatasetNormalizer,
    ingest_upload,
    parse_csv,
    parse_csv_text,
    parse_document,
    validate_upload,
)
from services.exceptions import FileValidationError, ParseError


class TestParseCsv:

    def test_minimal_csv(self):
        content = b"date,location,temp,humidity\n2024-01-01,Mumbai,30,70\n"
        dataset = parse_csv(content, "weather.csv")

        assert dataset.name == "weather"
        assert dataset.source == DatasetSource.CSV
        assert dataset.columns == ["date", "location", "temp", "humidity"]
        assert len(dataset.records) == 1

        record = dataset.records[0]
        assert record.date == "2024-01-01"
        assert record.location == "Mumbai"
        assert record.temperature == 30.0
        assert record.humidity == 70.0
        assert record.rainfall is None
        assert dataset.summary.total_records == 1
        assert dataset.summary.avg_temperature == 30

    def test_synonym_headers_are_mapped(self):
        content = (
            b"Timestamp,City,Temperature_C,RH,Pressure_hPa,Wind_kmh,Precipitation\n"
            b"2024-02-01,Chennai,31.5,80,1002,45,12.5\n"
        )
        record = parse_csv(content, "chennai.csv").records[0]

        assert record.date == "2024-02-01"
        assert record.location == "Chennai"
        assert record.temperature == 31.5
        assert record.humidity == 80.0
        assert record.pressure == 1002.0
        assert record.wind_speed == 45.0
        assert record.rainfall == 12.5

    def test_mismatched_rows_are_rejected(self):
        normalizer = DatasetNormalizer()
        headers, records = parse_csv_text(
            "date,temp\n2024-01-01,30\n2024-01-02,31,99\n2024-01-03\n", normalizer
        )

        assert headers == ["date", "temp"]
        assert len(records) == 1
        assert normalizer.get_report()["rejected_rows"] == 2

    def test_unknown_columns_are_dropped(self):
        normalizer = DatasetNormalizer()
        _, records = parse_csv_text("date,station_id_x,rain\n2024-01-01,A7,5\n", normalizer)

        assert records[0].rainfall == 5.0
        assert "station_id_x" in normalizer.get_report()["unmapped_columns"]
        assert not hasattr(records[0], "station_id_x")

    def test_non_numeric_cell_is_kept_verbatim(self):
        dataset = parse_csv(b"date,temp\n2024-01-01,hot\n", "odd.csv")
        record = dataset.records[0]

        assert record.temperature == "hot"
        assert record.numeric("temperature") is None

    def test_blank_rows_and_empty_records_are_skipped(self):
        normalizer = DatasetNormalizer()
        _, records = parse_csv_text("date,temp,rain\n\n , , \n2024-01-01,30,1\n   \n", normalizer)

        assert len(records) == 1
        assert normalizer.get_report()["empty_records"] == 1

    def test_byte_order_mark_is_ignored(self):
        dataset = parse_csv(b"\xef\xbb\xbfdate,temp\n2024-01-01,30\n", "bom.csv")
        assert dataset.columns == ["date", "temp"]
        assert dataset.records[0].date == "2024-01-01"

    def test_header_only_raises(self):
        with pytest.raises(ParseError) as exc_info:
            parse_csv(b"date,temp\n", "empty.csv")
        assert str(exc_info.value).startswith("Failed to parse CSV")

    def test_invalid_utf8_raises(self):
        with pytest.raises(ParseError):
            parse_csv(b"date,temp\n\xff\xfe\xfd,30\n", "broken.csv")

    def test_quoted_comma_stays_in_one_cell(self):
        content = (
            b'date,location,rain,humidity\n'
            b'2024-01-01,"Mumbai, India",120,80\n'
            b'2024-01-02,Chennai,10,60\n'
        )
        dataset = parse_csv(content, "w.csv")

        assert [r.location for r in dataset.records] == ["Mumbai, India", "Chennai"]
        assert dataset.records[0].rainfall == 120.0

    def test_quoted_header_and_crlf_lines(self):
        headers, records = parse_csv_text('"Date","Temp"\r\n2024-01-01,"30"\r\n')

        assert headers == ["date", "temp"]
        assert records[0].temperature == 30.0

    def test_empty_text_raises(self):
        with pytest.raises(ParseError):
            parse_csv_text("")

    def test_dataset_ids_are_unique(self):
        content = b"date,temp\n2024-01-01,30\n"
        sequence = DatasetIdSequence()
        ids = {parse_csv(content, "a.csv", id_factory=sequence.next_id).id for _ in range(5)}
        assert len(ids) == 5


class TestDatasetIdSequence:

    def test_epoch_milliseconds(self):
        sequence = DatasetIdSequence(clock=lambda: 1700000000.5)
        assert sequence.next_id() == "1700000000500"

    def test_same_millisecond_is_bumped(self):
        sequence = DatasetIdSequence(clock=lambda: 1700000000.0)
        assert [sequence.next_id() for _ in range(3)] == [
            "1700000000000", "1700000000001", "1700000000002"
        ]

    def test_sequences_are_independent(self):
        first = DatasetIdSequence(clock=lambda: 1700000000.0)
        second = DatasetIdSequence(clock=lambda: 1700000000.0)
        first.next_id()
        assert second.next_id() == "1700000000000"


class TestValidateUpload:

    def test_csv_extension(self):
        assert validate_upload("data.csv", 100) == DatasetSource.CSV

    def test_pdf_extension(self):
        assert validate_upload("report.PDF", 100) == DatasetSource.PDF

    def test_content_type_fallback(self):
        assert validate_upload("upload", 100, content_type="text/csv") == DatasetSource.CSV

    def test_unsupported_type(self):
        with pytest.raises(FileValidationError) as exc_info:
            validate_upload("notes.txt", 100, content_type="text/plain")
        assert not exc_info.value.too_large
        assert "Only CSV and PDF" in str(exc_info.value)

    def test_oversized_file(self):
        config = Settings(max_upload_bytes=1024)
        with pytest.raises(FileValidationError) as exc_info:
            validate_upload("big.csv", 2048, config=config)
        assert exc_info.value.too_large

    def test_size_checked_before_parsing(self):
        config = Settings(max_upload_bytes=10)
        with pytest.raises(FileValidationError):
            ingest_upload(b"not,a,valid,csv,at,all", "big.csv", config=config)


class TestParseDocument:

    def test_without_extractor_raises(self):
        with pytest.raises(ParseError):
            parse_document(b"%PDF-1.4", "report.pdf")

    def test_extractor_rows_are_normalized(self):
        def extractor(content):
            return ["Date", "Rain", "City"], [["2024-03-01", "12", "Kolkata"]]

        dataset = parse_document(b"%PDF-1.4", "report.pdf", extractor=extractor)

        assert dataset.source == DatasetSource.PDF
        assert dataset.name == "report"
        assert dataset.records[0].rainfall == 12.0
        assert dataset.records[0].location == "Kolkata"

    def test_extractor_failure_becomes_parse_error(self):
        def extractor(content):
            raise RuntimeError("corrupt xref table")

        with pytest.raises(ParseError) as exc_info:
            parse_document(b"%PDF-1.4", "report.pdf", extractor=extractor)
        assert "corrupt xref table" in str(exc_info.value)

    def test_empty_table_raises(self):
        with pytest.raises(ParseError):
            parse_document(b"%PDF-1.4", "report.pdf", extractor=lambda content: (["date"], []))
