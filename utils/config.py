"""Configuration loading: config.json merged over defaults, then env overrides."""

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from models.constants import DEFAULT_INSTRUMENT_DENYLIST

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.json"

DEFAULT_CONFIG: Dict[str, Any] = {
    "portal": "tpad",
    "county_code": "084",  # Tipton County
    "county_name": "Tipton",
    "classification": "00",  # Residential
    "filters": {
        "min_sale_price": 100000,
        "instrument_denylist": list(DEFAULT_INSTRUMENT_DENYLIST),
    },
    "scraping": {
        "headless": True,
        "concurrency": 3,
        "request_delay_ms": 1000,
        "max_retries": 3,
        "detail_max_retries": 2,
        "max_pages": None,
    },
    "output": {
        "out_dir": "./data",
        "generate_summary": True,
    },
    "email": {
        "sendgrid_api_key": "",
        "to": "",
        "from": "noreply@example.com",
        "google_maps_api_key": "",
        "map_image_type": "streetview",
        "map_image_width": 600,
        "map_image_height": 300,
    },
}


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or parsed."""


def _parse_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _parse_bool(value: str) -> bool:
    return value.lower() == "true" or value == "1"


# env var -> (section or None, key, parser)
ENV_OVERRIDES: Dict[str, tuple] = {
    "COUNTY_CODE": (None, "county_code", str),
    "COUNTY_NAME": (None, "county_name", str),
    "MIN_SALE_PRICE": ("filters", "min_sale_price", int),
    "INSTRUMENT_DENYLIST": ("filters", "instrument_denylist", _parse_list),
    "HEADLESS": ("scraping", "headless", _parse_bool),
    "CONCURRENCY": ("scraping", "concurrency", int),
    "REQUEST_DELAY_MS": ("scraping", "request_delay_ms", int),
    "OUT_DIR": ("output", "out_dir", str),
    "SENDGRID_API_KEY": ("email", "sendgrid_api_key", str),
    "EMAIL_TO": ("email", "to", str),
    "EMAIL_FROM": ("email", "from", str),
    "GOOGLE_MAPS_API_KEY": ("email", "google_maps_api_key", str),
    "MAP_IMAGE_TYPE": ("email", "map_image_type", str),
}


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge overrides into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def apply_env_overrides(
    config: Dict[str, Any], environ: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Apply environment variable overrides; unparseable values are ignored."""
    environ = os.environ if environ is None else environ
    result = copy.deepcopy(config)

    for env_name, (section, key, parser) in ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is None or raw == "":
            continue
        try:
            value = parser(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid value for {env_name}: {raw!r}")
            continue

        target = result.setdefault(section, {}) if section else result
        target[key] = value

    return result


def load_config(
    path: Optional[Union[str, Path]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Load configuration.

    Reads the JSON file if it exists (a missing default file is fine, a
    missing explicitly-requested file is not), merges it over DEFAULT_CONFIG
    and applies environment overrides.

    Raises:
        ConfigError: If the file is missing (when explicitly given) or invalid
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    file_config: Dict[str, Any] = {}

    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                file_config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e
        logger.debug(f"Loaded config from {config_path}")
    elif path:
        raise ConfigError(f"Config file not found: {config_path}")

    if not isinstance(file_config, dict):
        raise ConfigError(f"Config root must be an object: {config_path}")

    return apply_env_overrides(_merge(DEFAULT_CONFIG, file_config), environ)


def _is_non_negative_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0


def validate_config(config: Dict[str, Any], require_email: bool = True) -> List[str]:
    """
    Validate a resolved configuration.

    Returns:
        List of human-readable problems (empty if valid)
    """
    errors: List[str] = []
    email = config.get("email", {})
    scraping = config.get("scraping", {})
    filters = config.get("filters", {})

    if require_email:
        if not email.get("sendgrid_api_key"):
            errors.append("SENDGRID_API_KEY is required for email delivery")
        if not email.get("to"):
            errors.append("EMAIL_TO is required for email delivery")

    concurrency = scraping.get("concurrency", 0)
    if not isinstance(concurrency, int) or concurrency < 1 or concurrency > 10:
        errors.append("CONCURRENCY must be between 1 and 10")

    if not _is_non_negative_number(filters.get("min_sale_price", 0)):
        errors.append("MIN_SALE_PRICE must be a non-negative number")

    if not _is_non_negative_number(scraping.get("request_delay_ms", 0)):
        errors.append("REQUEST_DELAY_MS must be a non-negative number")

    if not config.get("county_code"):
        errors.append("COUNTY_CODE is required")

    return errors

