"""Portal adapter factory and exports."""

import logging
from typing import Any, Dict

from portals.base import PortalAdapter

logger = logging.getLogger(__name__)


def get_adapter(config: Dict[str, Any]) -> PortalAdapter:
    """
    Factory function to get appropriate portal adapter.

    Args:
        config: Configuration dictionary (see utils.config)

    Returns:
        Portal adapter instance

    Raises:
        ValueError: If portal is not supported

    Example:
        >>> config = {"portal": "tpad", "county_code": "084", ...}
        >>> adapter = get_adapter(config)
        >>> print(adapter.get_portal_name())
        "tpad"
    """
    portal = config.get("portal", "tpad").lower()

    if portal == "tpad":
        from portals.tpad.adapter import TpadAdapter

        logger.info(f"Initializing TPAD adapter for county {config.get('county_code')}")
        return TpadAdapter(config)

    else:
        raise ValueError(f"Unsupported portal: {portal}. Supported portals: 'tpad'")


__all__ = ["get_adapter", "PortalAdapter"]
