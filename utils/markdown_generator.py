"""Markdown run summary with YAML frontmatter."""

import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from models.metadata import ExtractionResult, PipelineResult
from models.parcel import CleanedSale, DateRange
from processors.normalize import format_display_date, format_sale_price
from processors.transform import get_sales_stats
from utils.date_range import format_date, format_date_range
from utils.maps import build_full_address, get_google_maps_link
from utils.output_writer import ensure_output_dir, write_atomic

logger = logging.getLogger(__name__)


class MarkdownGenerator:
    """Generator for the per-run summary.md."""

    def __init__(self, county_name: str, generated_at: Optional[datetime] = None):
        """
        Initialize the generator.

        Args:
            county_name: County shown in the report header
            generated_at: Report timestamp (defaults to now)
        """
        self.county_name = county_name
        self.generated_at = generated_at or datetime.now()

    def generate_yaml_frontmatter(
        self,
        date_range: DateRange,
        extraction: ExtractionResult,
        pipeline: PipelineResult,
        output_files: Optional[Dict[str, str]] = None,
    ) -> str:
        """Run metadata, counts, filter reasons and price stats as YAML."""
        stats = get_sales_stats(pipeline.cleaned_sales)

        frontmatter: Dict[str, Any] = {
            "generated_at": self.generated_at.isoformat(timespec="seconds"),
            "county": self.county_name,
            "date_range": {
                "start": format_date(date_range.start),
                "end": format_date(date_range.end),
                "label": date_range.label,
            },
            "counts": {
                "total_parcels": extraction.total_parcels,
                "total_pages": extraction.total_pages,
                "raw_records": len(extraction.raw_records),
                "unique_records": len(pipeline.deduped_raw),
                "passed_filters": len(pipeline.filter_result.passed),
                "cleaned_sales": len(pipeline.cleaned_sales),
            },
            "enrichment": extraction.outcome_counts(),
            "filter_reasons": dict(pipeline.filter_result.reasons),
            "stats": {
                "total_value": stats.total_value,
                "average_price": round(stats.average_price),
                "median_price": round(stats.median_price),
                "min_price": stats.min_price,
                "max_price": stats.max_price,
            },
        }

        if output_files:
            frontmatter["output_files"] = dict(output_files)

        return yaml.dump(
            frontmatter,
            allow_unicode=True,
            sort_keys=False,
            default_flow_style=False,
        )

    def generate_sales_table(self, sales: List[CleanedSale]) -> List[str]:
        """Markdown table rows, one per sale."""
        lines = [
            "| # | Address | City | Owner | Sale Date | Price | Instrument | Map |",
            "|---|---------|------|-------|-----------|-------|------------|-----|",
        ]

        for index, sale in enumerate(sales, 1):
            address = build_full_address(sale)
            map_link = f"[Map]({get_google_maps_link(address)})" if address else "n/a"
            lines.append(
                f"| {index} | {sale.situs_address or 'n/a'} | {sale.city or 'n/a'} | "
                f"{sale.owner_name or 'n/a'} | {format_display_date(sale.sale_date) or 'n/a'} | "
                f"{format_sale_price(sale.sale_price)} | {sale.deed_instrument or 'n/a'} | "
                f"{map_link} |"
            )

        return lines

    def generate_summary(
        self,
        date_range: DateRange,
        extraction: ExtractionResult,
        pipeline: PipelineResult,
        output_files: Optional[Dict[str, str]] = None,
    ) -> str:
        """Full summary.md content."""
        sales = pipeline.cleaned_sales
        stats = get_sales_stats(sales)
        frontmatter = self.generate_yaml_frontmatter(
            date_range, extraction, pipeline, output_files
        )

        content = [
            f"# New Homeowners - {self.county_name} County",
            "",
            f"**Generated:** {self.generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"**Period:** {format_date_range(date_range)} ({date_range.label})",
            "",
            "## Statistics",
            "",
            f"- **Parcels found:** {extraction.total_parcels} ({extraction.total_pages} pages)",
            f"- **Raw records:** {len(extraction.raw_records)}",
            f"- **Passed filters:** {len(pipeline.filter_result.passed)}",
            f"- **Cleaned sales:** {stats.count}",
        ]

        if stats.count:
            content.extend([
                f"- **Total value:** {format_sale_price(stats.total_value)}",
                f"- **Average price:** {format_sale_price(stats.average_price)}",
                f"- **Median price:** {format_sale_price(stats.median_price)}",
                f"- **Range:** {format_sale_price(stats.min_price)} - "
                f"{format_sale_price(stats.max_price)}",
            ])
        content.append("")

        rejected = {k: v for k, v in pipeline.filter_result.reasons.items() if v > 0}
        if rejected:
            content.append("**Filtered out:**")
            for reason, count in rejected.items():
                content.append(f"- {reason}: {count}")
            content.append("")

        city_counts = Counter(sale.city for sale in sales if sale.city)
        if city_counts:
            content.append("**Sales by city:**")
            for city, count in city_counts.most_common():
                content.append(f"- {city}: {count}")
            content.append("")

        content.extend(["## Sales", ""])
        if sales:
            content.extend(self.generate_sales_table(sales))
        else:
            content.append("No qualifying sales this period.")

        body = "\n".join(content)
        return f"---\n{frontmatter}---\n\n{body}\n"

    def write_summary(
        self,
        out_dir: str,
        filename: str,
        date_range: DateRange,
        extraction: ExtractionResult,
        pipeline: PipelineResult,
        output_files: Optional[Dict[str, str]] = None,
    ) -> str:
        """Write summary.md atomically. Returns the file path."""
        filepath = Path(ensure_output_dir(out_dir)) / filename
        write_atomic(
            filepath,
            self.generate_summary(date_range, extraction, pipeline, output_files),
        )
        logger.info(
            f"Summary saved: {filepath} ({len(pipeline.cleaned_sales)} sales)"
        )
        return str(filepath)
