"""HTML and plain-text bodies for the weekly report email."""

from html import escape
from typing import Any, Dict, List, Optional

from models.parcel import CleanedSale, DateRange
from processors.normalize import format_display_date, format_sale_price
from processors.transform import get_sales_stats
from utils.maps import build_full_address, get_google_maps_link, get_property_image_url

MAX_TABLE_ROWS = 50
MAX_CARDS = 20
MAX_TEXT_SALES = 30

CARD_STYLE = (
    "background: white; border-radius: 8px; box-shadow: 0 1px 3px rgba(0,0,0,0.1); "
    "overflow: hidden; margin-bottom: 16px;"
)
STAT_STYLE = (
    "flex: 1; min-width: 150px; background: white; padding: 20px; border-radius: 8px; "
    "box-shadow: 0 1px 3px rgba(0,0,0,0.1);"
)
CELL_STYLE = "padding: 12px; border-bottom: 1px solid #e5e7eb;"
HEADER_CELL_STYLE = (
    "padding: 12px; border-bottom: 2px solid #e5e7eb; color: #6b7280; font-weight: 600;"
)
LABEL_STYLE = (
    "font-size: 11px; color: #9ca3af; text-transform: uppercase; "
    "letter-spacing: 0.5px; margin-bottom: 4px;"
)


def _stat_box(value: str, label: str, size: int = 24) -> str:
    return (
        f'<div style="{STAT_STYLE}">'
        f'<div style="font-size: {size}px; font-weight: bold; color: #059669;">{value}</div>'
        f'<div style="color: #6b7280; font-size: 14px;">{label}</div>'
        f"</div>"
    )


def generate_property_card(sale: CleanedSale, email_config: Dict[str, Any]) -> str:
    """Card with a Street View / satellite image linking to Google Maps."""
    image_url = get_property_image_url(
        sale,
        email_config.get("google_maps_api_key", ""),
        email_config.get("map_image_type", "streetview"),
        email_config.get("map_image_width", 600),
        email_config.get("map_image_height", 300),
    )
    maps_link = escape(get_google_maps_link(build_full_address(sale)))
    address = escape(sale.situs_address)

    if image_url:
        image_html = (
            f'<a href="{maps_link}" target="_blank" style="display: block;">'
            f'<img src="{escape(image_url)}" alt="Property at {address}" '
            f'style="width: 100%; height: 180px; object-fit: cover; '
            f'border-radius: 8px 8px 0 0;" /></a>'
        )
    else:
        image_html = (
            f'<a href="{maps_link}" target="_blank" style="display: block; background: #e5e7eb; '
            f"height: 180px; border-radius: 8px 8px 0 0; text-decoration: none; "
            f'text-align: center; padding-top: 70px;">'
            f'<span style="color: #6b7280; font-size: 14px;">📍 View on Google Maps</span></a>'
        )

    location = escape(f"{sale.city}, {sale.state} {sale.zip or ''}".strip())
    owner = escape(sale.owner_name or "N/A")

    return f"""
    <div style="{CARD_STYLE}">
      {image_html}
      <div style="padding: 16px;">
        <div style="font-weight: 600; font-size: 16px; color: #1f2937; margin-bottom: 4px;">
          <a href="{maps_link}" target="_blank" style="color: #1f2937; text-decoration: none;">{address}</a>
        </div>
        <div style="color: #6b7280; font-size: 14px; margin-bottom: 16px;">{location}</div>
        <table style="width: 100%; border-top: 1px solid #e5e7eb; border-collapse: collapse;">
          <tr>
            <td style="padding: 12px 0; vertical-align: top; width: 60%;">
              <div style="{LABEL_STYLE}">Owner</div>
              <div style="font-size: 14px; color: #1f2937; font-weight: 500;">{owner}</div>
            </td>
            <td style="padding: 12px 0; vertical-align: top; width: 40%; text-align: right;">
              <div style="{LABEL_STYLE}">Sold {format_display_date(sale.sale_date)}</div>
              <div style="font-size: 20px; font-weight: 700; color: #059669;">{format_sale_price(sale.sale_price)}</div>
            </td>
          </tr>
        </table>
      </div>
    </div>
    """


def _cards_section(sales: List[CleanedSale], email_config: Dict[str, Any]) -> str:
    cards = "".join(generate_property_card(sale, email_config) for sale in sales[:MAX_CARDS])
    showing = f" (showing {MAX_CARDS} of {len(sales)})" if len(sales) > MAX_CARDS else ""
    return f"""
      <div style="padding: 15px 20px; border-bottom: 1px solid #e5e7eb;">
        <h2 style="margin: 0; font-size: 18px; color: #1f2937;">Properties{showing}</h2>
        <p style="margin: 5px 0 0 0; font-size: 13px; color: #6b7280;">Click images to open in Google Maps</p>
      </div>
      <div style="padding: 16px;">{cards}</div>
    """


def _table_section(sales: List[CleanedSale]) -> str:
    rows = []
    for index, sale in enumerate(sales[:MAX_TABLE_ROWS]):
        background = "#ffffff" if index % 2 == 0 else "#f9fafb"
        rows.append(
            f'<tr style="background-color: {background};">'
            f'<td style="{CELL_STYLE}">{escape(sale.situs_address)}</td>'
            f'<td style="{CELL_STYLE}">{escape(sale.city)}</td>'
            f'<td style="{CELL_STYLE}">{escape(sale.owner_name or "N/A")}</td>'
            f'<td style="{CELL_STYLE}">{format_display_date(sale.sale_date)}</td>'
            f'<td style="{CELL_STYLE} text-align: right;">{format_sale_price(sale.sale_price)}</td>'
            f"</tr>"
        )

    body = "".join(rows) or (
        '<tr><td colspan="5" style="padding: 20px; text-align: center; color: #6b7280;">'
        "No sales found for this period</td></tr>"
    )
    showing = f" (showing {MAX_TABLE_ROWS} of {len(sales)})" if len(sales) > MAX_TABLE_ROWS else ""
    headers = "".join(
        f'<th style="{HEADER_CELL_STYLE} text-align: {align};">{title}</th>'
        for title, align in [
            ("Address", "left"),
            ("City", "left"),
            ("Owner", "left"),
            ("Sale Date", "left"),
            ("Price", "right"),
        ]
    )
    return f"""
      <div style="padding: 15px 20px; border-bottom: 1px solid #e5e7eb;">
        <h2 style="margin: 0; font-size: 18px; color: #1f2937;">Recent Sales{showing}</h2>
      </div>
      <div style="overflow-x: auto;">
        <table style="width: 100%; border-collapse: collapse; font-size: 14px;">
          <thead><tr style="background: #f9fafb;">{headers}</tr></thead>
          <tbody>{body}</tbody>
        </table>
      </div>
    """


def generate_email_html(
    sales: List[CleanedSale],
    date_range: DateRange,
    county_name: str,
    email_config: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Full HTML report.

    With a Google Maps API key the sales are shown as image cards (first
    20), otherwise as a table (first 50). The full list is always attached
    as CSV.
    """
    email_config = email_config or {}
    stats = get_sales_stats(sales)
    has_images = bool(email_config.get("google_maps_api_key"))

    if has_images:
        properties_html = _cards_section(sales, email_config)
        truncated = len(sales) > MAX_CARDS
    else:
        properties_html = _table_section(sales)
        truncated = len(sales) > MAX_TABLE_ROWS

    limit_note = (
        f'<p style="margin-top: 15px; color: #6b7280; font-size: 14px; text-align: center;">'
        f"📎 Full list of {len(sales)} properties attached as CSV</p>"
        if truncated
        else ""
    )
    county = escape(county_name)

    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>New Homeowners Report - {county} County</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6; color: #1f2937; max-width: 800px; margin: 0 auto; padding: 20px;">
  <div style="background: linear-gradient(135deg, #059669 0%, #047857 100%); color: white; padding: 30px; border-radius: 12px 12px 0 0;">
    <h1 style="margin: 0 0 10px 0; font-size: 24px;">New Homeowners Report</h1>
    <p style="margin: 0; opacity: 0.9; font-size: 16px;">{county} County, TN - {escape(date_range.label)}</p>
  </div>
  <div style="background: #f3f4f6; padding: 20px; border-radius: 0 0 12px 12px;">
    <div style="display: flex; gap: 15px; margin-bottom: 25px; flex-wrap: wrap;">
      {_stat_box(str(stats.count), "New Sales", size=32)}
      {_stat_box(format_sale_price(stats.total_value), "Total Value")}
      {_stat_box(format_sale_price(stats.average_price), "Avg Price")}
      {_stat_box(format_sale_price(stats.median_price), "Median Price")}
    </div>
    <div style="background: white; border-radius: 8px; box-shadow: 0 1px 3px rgba(0,0,0,0.1); overflow: hidden;">
      {properties_html}
    </div>
    {limit_note}
    <div style="margin-top: 30px; padding-top: 20px; border-top: 1px solid #d1d5db; text-align: center; color: #9ca3af; font-size: 12px;">
      <p style="margin: 0;">Generated by New Homeowners Extractor</p>
      <p style="margin: 5px 0 0 0;">Data source: Tennessee Property Assessment Data (TPAD)</p>
    </div>
  </div>
</body>
</html>
"""


def generate_email_text(sales: List[CleanedSale], date_range: DateRange, county_name: str) -> str:
    """Plain-text alternative listing the first 30 sales."""
    stats = get_sales_stats(sales)
    rule = "=" * 50

    lines = [
        "NEW HOMEOWNERS REPORT",
        f"{county_name} County, TN - {date_range.label}",
        rule,
        "",
        "SUMMARY",
        "-------",
        f"New Sales: {stats.count}",
        f"Total Value: {format_sale_price(stats.total_value)}",
        f"Average Price: {format_sale_price(stats.average_price)}",
        f"Median Price: {format_sale_price(stats.median_price)}",
        "",
        "RECENT SALES",
        "------------",
    ]

    for sale in sales[:MAX_TEXT_SALES]:
        lines.extend([
            "",
            f"{sale.situs_address}, {sale.city}",
            f"  Owner: {sale.owner_name or 'N/A'}",
            f"  Sale Date: {format_display_date(sale.sale_date)}",
            f"  Price: {format_sale_price(sale.sale_price)}",
        ])

    if len(sales) > MAX_TEXT_SALES:
        lines.extend(["", f"... and {len(sales) - MAX_TEXT_SALES} more (see attached CSV)"])

    lines.extend([
        "",
        rule,
        "Generated by New Homeowners Extractor",
        "Data source: Tennessee Property Assessment Data (TPAD)",
    ])
    return "\n".join(lines) + "\n"
