"""CSV and JSON output files for raw records and cleaned sales."""

import csv
import io
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from models.parcel import (
    CLEANED_SALE_FIELDS,
    RAW_RECORD_FIELDS,
    CleanedSale,
    DateRange,
    RawParcelRecord,
)
from processors.transform import get_sales_stats
from utils.date_range import format_date

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def ensure_output_dir(out_dir: PathLike) -> Path:
    """Create the output directory if needed."""
    path = Path(out_dir)
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Created output directory: {path}")
    return path


def write_atomic(filepath: Path, content: str) -> Path:
    """Write content to filepath via a temp file and rename."""
    temp_path = filepath.with_suffix(filepath.suffix + ".tmp")
    with open(temp_path, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    temp_path.replace(filepath)
    return filepath


def generate_filename(prefix: str, date_label: str, extension: str) -> str:
    """
    Build an output filename from a week label.

    Example:
        ("cleaned_sales", "Week of 2025-01-06", "csv") → "cleaned_sales_2025_01_06.csv"
    """
    date_part = date_label.replace("Week of ", "").replace("-", "_")
    return f"{prefix}_{date_part}.{extension}"


def _to_csv(rows: Iterable[Dict[str, Any]], columns: List[str]) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=columns, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow({key: "" if value is None else value for key, value in row.items()})
    return buffer.getvalue()


def cleaned_sales_to_csv_string(sales: List[CleanedSale]) -> str:
    """Cleaned sales as CSV text (used for the email attachment)."""
    return _to_csv((sale.to_dict() for sale in sales), CLEANED_SALE_FIELDS)


def write_cleaned_csv(sales: List[CleanedSale], out_dir: PathLike, filename: str) -> str:
    """Write cleaned sales to CSV. Returns the file path."""
    filepath = ensure_output_dir(out_dir) / filename
    write_atomic(filepath, cleaned_sales_to_csv_string(sales))
    logger.info(f"Wrote CSV (cleaned): {filepath} ({len(sales)} records)")
    return str(filepath)


def write_raw_csv(records: List[RawParcelRecord], out_dir: PathLike, filename: str) -> str:
    """Write raw records to CSV. Returns the file path."""
    filepath = ensure_output_dir(out_dir) / filename
    write_atomic(filepath, _to_csv((r.to_dict() for r in records), RAW_RECORD_FIELDS))
    logger.info(f"Wrote CSV (raw): {filepath} ({len(records)} records)")
    return str(filepath)


def build_json_output(
    sales: List[CleanedSale], date_range: DateRange, county_name: str
) -> Dict[str, Any]:
    """JSON document with run metadata, price stats and the records."""
    stats = get_sales_stats(sales)
    return {
        "metadata": {
            "generated_at": datetime.now().isoformat(),
            "date_range": {
                "start": format_date(date_range.start),
                "end": format_date(date_range.end),
                "label": date_range.label,
            },
            "county": county_name,
            "record_count": len(sales),
            "stats": {
                "total_value": stats.total_value,
                "average_price": round(stats.average_price),
                "median_price": round(stats.median_price),
                "min_price": stats.min_price,
                "max_price": stats.max_price,
            },
        },
        "records": [sale.to_dict() for sale in sales],
    }


def write_cleaned_json(
    sales: List[CleanedSale],
    date_range: DateRange,
    county_name: str,
    out_dir: PathLike,
    filename: str,
) -> str:
    """Write cleaned sales with metadata to JSON. Returns the file path."""
    filepath = ensure_output_dir(out_dir) / filename
    output = build_json_output(sales, date_range, county_name)
    write_atomic(filepath, json.dumps(output, indent=2, ensure_ascii=False))
    logger.info(f"Wrote JSON: {filepath} ({len(sales)} records)")
    return str(filepath)
