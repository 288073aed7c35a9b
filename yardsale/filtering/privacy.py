"""
Location privacy for sales that hide their exact address until shortly
before they start.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple

from yardsale.models import PrivacyMode, SaleRecord

REVEAL_LEAD_TIME = timedelta(hours=24)

# 3 decimal places is roughly block-level (~100m)
MASK_PRECISION = 3


def reveal_time(sale: SaleRecord) -> datetime:
    return sale.starts_at - REVEAL_LEAD_TIME


def should_mask(sale: SaleRecord, now: datetime) -> bool:
    """True while a block_until_24h sale is more than 24h from starting."""
    if sale.privacy_mode != PrivacyMode.BLOCK_UNTIL_24H:
        return False
    return now < reveal_time(sale)


def mask_coords(lat: float, lng: float) -> Tuple[float, float]:
    return round(lat, MASK_PRECISION), round(lng, MASK_PRECISION)


def public_location(sale: SaleRecord, now: datetime) -> Tuple[float, float, bool, Optional[datetime]]:
    """
    Coordinates to publish for a sale.

    Returns:
        Tuple of (lat, lng, is_masked, reveal_time); reveal_time is set
        only when the coordinates are masked
    """
    if not should_mask(sale, now):
        return sale.lat, sale.lng, False, None

    lat, lng = mask_coords(sale.lat, sale.lng)
    return lat, lng, True, reveal_time(sale)
