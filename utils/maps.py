"""Google Maps links and static image URLs for property addresses."""

from typing import Optional
from urllib.parse import quote

from models.parcel import CleanedSale

STREET_VIEW_URL = "https://maps.googleapis.com/maps/api/streetview"
STATIC_MAP_URL = "https://maps.googleapis.com/maps/api/staticmap"
MAPS_SEARCH_URL = "https://www.google.com/maps/search/"


def build_full_address(sale: CleanedSale) -> str:
    """"123 MAIN ST, COVINGTON, TN, 38019" (empty parts skipped)."""
    parts = [sale.situs_address, sale.city, sale.state, sale.zip]
    return ", ".join(part for part in parts if part)


def get_street_view_url(address: str, api_key: str, width: int = 400, height: int = 200) -> str:
    return (
        f"{STREET_VIEW_URL}?size={width}x{height}"
        f"&location={quote(address, safe='')}&key={api_key}"
    )


def get_satellite_view_url(
    address: str, api_key: str, width: int = 400, height: int = 200, zoom: int = 19
) -> str:
    encoded = quote(address, safe="")
    return (
        f"{STATIC_MAP_URL}?center={encoded}&zoom={zoom}&size={width}x{height}"
        f"&maptype=satellite&markers=color:red%7C{encoded}&key={api_key}"
    )


def get_google_maps_link(address: str) -> str:
    """Clickable Google Maps search link."""
    return f"{MAPS_SEARCH_URL}?api=1&query={quote(address, safe='')}"


def get_property_image_url(
    sale: CleanedSale,
    api_key: str,
    image_type: str = "streetview",
    width: int = 600,
    height: int = 300,
) -> Optional[str]:
    """
    Street View or satellite image URL for a sale's address.

    Returns:
        None when there is no API key or no address
    """
    if not api_key:
        return None

    address = build_full_address(sale)
    if not address:
        return None

    if image_type == "streetview":
        return get_street_view_url(address, api_key, width, height)
    return get_satellite_view_url(address, api_key, width, height)
