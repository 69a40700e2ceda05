"""
Dataset Ingestion

Turns uploaded CSV (or document) bytes into a typed Dataset:
1. Validate the upload (size, extension) before any parsing
2. Map arbitrary headers onto the fixed record schema
3. Coerce cell values (strings for date/location, floats elsewhere)
4. Drop empty records and attach a summary
"""

from typing import Callable, Dict, List, Optional, Tuple
from datetime import datetime
from pathlib import Path
import io
import logging
import math
import threading
import time

import pandas as pd

from config import Settings, settings as default_settings
from models.base import DatasetSource
from models.dataset_models import Dataset, WeatherRecord
from services.dataset_summary import build_summary
from services.exceptions import FileValidationError, ParseError

logger = logging.getLogger("riskcast.data_ingestion")

# Document bytes -> (headers, rows). Real table extraction lives behind this.
DocumentTableExtractor = Callable[[bytes], Tuple[List[str], List[List[str]]]]
IdFactory = Callable[[], str]

STRING_FIELDS = ("date", "location")

ALLOWED_CONTENT_TYPES = {
    "text/csv": ".csv",
    "application/csv": ".csv",
    "application/pdf": ".pdf",
}


class DatasetNormalizer:
    """Map raw headers and cells onto WeatherRecord fields"""

    # Standard column name mappings (keys are lower-case)
    COLUMN_MAPPINGS: Dict[str, str] = {
        # Date
        "date": "date",
        "time": "date",
        "datetime": "date",
        "timestamp": "date",

        # Location
        "location": "location",
        "city": "location",
        "place": "location",
        "station": "location",

        # Temperature
        "temperature": "temperature",
        "temp": "temperature",
        "temperature_c": "temperature",
        "temp_c": "temperature",

        # Humidity
        "humidity": "humidity",
        "humidity_%": "humidity",
        "rh": "humidity",
        "relative_humidity": "humidity",

        # Pressure
        "pressure": "pressure",
        "atmospheric_pressure": "pressure",
        "pressure_mb": "pressure",
        "pressure_hpa": "pressure",

        # Wind speed
        "wind_speed": "wind_speed",
        "windspeed": "wind_speed",
        "wind": "wind_speed",
        "wind_kmh": "wind_speed",

        # Rainfall
        "rainfall": "rainfall",
        "rain": "rainfall",
        "precipitation": "rainfall",
        "precip": "rainfall",
        "rainfall_mm": "rainfall",
    }

    def __init__(self):
        self.report = {}
        self._reset_report()

    def _reset_report(self):
        """Reset ingestion report for a new run"""
        self.report = {
            "input_rows": 0,
            "output_records": 0,
            "rejected_rows": 0,
            "empty_records": 0,
            "unmapped_columns": [],
        }

    @classmethod
    def map_column_name(cls, header: str) -> Optional[str]:
        """Return the schema field for a raw header, or None if unknown"""
        return cls.COLUMN_MAPPINGS.get(header.strip().lower())

    @staticmethod
    def coerce_value(field: str, raw: str):
        """Strings stay verbatim for date/location; other fields try float"""
        if field in STRING_FIELDS:
            return raw
        try:
            number = float(raw)
        except ValueError:
            return raw
        if math.isnan(number) or math.isinf(number):
            return raw
        return number

    def normalize_rows(self, headers: List[str], rows: List[List[str]]) -> List[WeatherRecord]:
        """
        Build records from header and row cells

        Rows whose cell count differs from the header count are rejected.
        Unknown columns are dropped from every row.
        """
        self._reset_report()
        self.report["input_rows"] = len(rows)

        mapped = [self.map_column_name(h) for h in headers]
        self.report["unmapped_columns"] = [
            h for h, field in zip(headers, mapped) if field is None
        ]

        records: List[WeatherRecord] = []
        for cells in rows:
            if len(cells) != len(headers):
                self.report["rejected_rows"] += 1
                continue

            values = {}
            for field, raw in zip(mapped, cells):
                raw = raw.strip()
                if field and raw:
                    values[field] = self.coerce_value(field, raw)

            if not values:
                self.report["empty_records"] += 1
                continue
            records.append(WeatherRecord(**values))

        self.report["output_records"] = len(records)
        if self.report["rejected_rows"]:
            logger.info(f"  Rejected {self.report['rejected_rows']} rows with mismatched cell counts")
        return records

    def get_report(self) -> Dict:
        return dict(self.report)


class DatasetIdSequence:
    """Epoch-millisecond dataset ids, bumped so a sequence never repeats"""

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            self._last = max(int(self.clock() * 1000), self._last + 1)
            return str(self._last)


def _read_cells(text: str) -> List[List[str]]:
    """
    Split CSV text into per-line cells, honoring quoting

    Lines with more cells than the first line are kept as-is; short lines
    come back without their padding, so both fail the header count check.
    """
    overflow: List[List[str]] = []

    def keep_overflow(line: List[str]) -> None:
        overflow.append(line)

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=keep_overflow,
        )
    except pd.errors.EmptyDataError:
        return []
    except pd.errors.ParserError as e:
        raise ParseError(str(e)) from e

    lines = []
    for row in frame.values.tolist():
        cells = [cell for cell in row if isinstance(cell, str)]
        if len(cells) == 1 and not cells[0].strip():
            continue
        lines.append(cells)
    return lines + overflow


def parse_csv_text(text: str, normalizer: Optional[DatasetNormalizer] = None) -> Tuple[List[str], List[WeatherRecord]]:
    """
    Parse comma-delimited text with a header row

    Returns:
        Tuple of (lower-cased headers, records)

    Raises:
        ParseError: fewer than two non-blank lines
    """
    lines = _read_cells(text)
    if len(lines) < 2:
        raise ParseError("CSV file must have at least a header and one data row")

    headers = [h.strip().lower() for h in lines[0]]
    rows = [[cell.strip() for cell in cells] for cells in lines[1:]]

    normalizer = normalizer or DatasetNormalizer()
    return headers, normalizer.normalize_rows(headers, rows)


def _build_dataset(name: str, source: DatasetSource, headers: List[str],
                   records: List[WeatherRecord], id_factory: Optional[IdFactory]) -> Dataset:
    return Dataset(
        id=(id_factory or DatasetIdSequence().next_id)(),
        name=name,
        source=source,
        upload_date=datetime.now(),
        records=records,
        columns=headers,
        summary=build_summary(records),
    )


def parse_csv(content: bytes, filename: str, id_factory: Optional[IdFactory] = None) -> Dataset:
    """Parse UTF-8 CSV bytes into a Dataset"""
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"Failed to parse CSV: file is not valid UTF-8 ({e.reason})") from e

    try:
        headers, records = parse_csv_text(text)
    except ParseError as e:
        raise ParseError(f"Failed to parse CSV: {e}") from e

    dataset = _build_dataset(Path(filename).stem, DatasetSource.CSV, headers, records, id_factory)
    logger.info(f"Parsed CSV '{filename}': {len(records)} records, {len(headers)} columns")
    return dataset


def parse_document(content: bytes, filename: str,
                   extractor: Optional[DocumentTableExtractor] = None,
                   id_factory: Optional[IdFactory] = None) -> Dataset:
    """
    Produce a Dataset from a document

    Table extraction is delegated to the injected extractor; the extracted
    cells pass through the same normalizer as CSV rows.
    """
    if extractor is None:
        raise ParseError(
            f"Failed to parse PDF '{filename}': no document table extractor is configured"
        )

    try:
        raw_headers, rows = extractor(content)
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(f"Failed to parse PDF: {e}") from e

    if not raw_headers or not rows:
        raise ParseError("Failed to parse PDF: no table rows found in document")

    headers = [str(h).strip().lower() for h in raw_headers]
    records = DatasetNormalizer().normalize_rows(headers, [[str(c) for c in row] for row in rows])

    dataset = _build_dataset(Path(filename).stem, DatasetSource.PDF, headers, records, id_factory)
    logger.info(f"Parsed document '{filename}': {len(records)} records")
    return dataset


def validate_upload(filename: str, size: int, content_type: Optional[str] = None,
                    config: Settings = default_settings) -> DatasetSource:
    """
    Check size and type before any parsing

    Returns:
        The dataset source kind the file will be parsed as

    Raises:
        FileValidationError: oversized or unsupported file
    """
    if size > config.max_upload_bytes:
        limit_mb = config.max_upload_bytes / (1024 * 1024)
        raise FileValidationError(f"File size must be less than {limit_mb:g}MB", too_large=True)

    extension = Path(filename or "").suffix.lower()
    if extension not in config.allowed_extensions:
        extension = ALLOWED_CONTENT_TYPES.get((content_type or "").lower(), "")
    if extension not in config.allowed_extensions:
        raise FileValidationError("Only CSV and PDF files are supported")

    return DatasetSource.CSV if extension == ".csv" else DatasetSource.PDF


def ingest_upload(content: bytes, filename: str, content_type: Optional[str] = None,
                  extractor: Optional[DocumentTableExtractor] = None,
                  config: Settings = default_settings,
                  id_factory: Optional[IdFactory] = None) -> Dataset:
    """Validate an upload, then parse it as CSV or document"""
    source = validate_upload(filename, len(content), content_type, config=config)
    if source == DatasetSource.CSV:
        return parse_csv(content, filename, id_factory=id_factory)
    return parse_document(content, filename, extractor=extractor, id_factory=id_factory)
