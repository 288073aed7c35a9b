"""
Opaque pagination cursors.

A cursor carries the sort key of the last row on a page. The token format
is internal and may change between releases.
"""

import base64
import json
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Tuple

from yardsale.error_handling import CursorDecodeError


@dataclass(frozen=True)
class CursorKey:
    """Sort-key triple a page resumes after"""
    distance_meters: float
    starts_at: datetime
    id: str

    def as_tuple(self) -> Tuple[float, datetime, str]:
        return (self.distance_meters, self.starts_at, self.id)


def encode_cursor(distance_meters: float, starts_at: datetime, sale_id: str) -> str:
    """
    Encode a sort key as an opaque token.

    Args:
        distance_meters: Distance of the last returned row
        starts_at: Start instant of the last returned row
        sale_id: Id of the last returned row

    Returns:
        urlsafe base64 of a compact JSON payload
    """
    payload = {
        "d": distance_meters,
        "s": starts_at.isoformat(),
        "i": sale_id,
    }
    blob = json.dumps(payload, separators=(",", ":"))
    return base64.urlsafe_b64encode(blob.encode("utf-8")).decode("ascii")


def decode_cursor(token: str) -> CursorKey:
    """
    Decode a token produced by encode_cursor.

    Raises:
        CursorDecodeError: If the token is malformed or tampered with
    """
    try:
        decoded = base64.urlsafe_b64decode(token.encode("ascii")).decode("utf-8")
        data = json.loads(decoded)
        distance = float(data["d"])
        starts_at = datetime.fromisoformat(data["s"])
        sale_id = data["i"]
    except (ValueError, KeyError, TypeError) as e:
        raise CursorDecodeError(f"Malformed cursor: {e}") from e

    if not isinstance(sale_id, str) or not sale_id:
        raise CursorDecodeError("Malformed cursor: id must be a non-empty string")
    if not math.isfinite(distance) or distance < 0:
        raise CursorDecodeError("Malformed cursor: distance out of range")
    if starts_at.tzinfo is None:
        starts_at = starts_at.replace(tzinfo=timezone.utc)

    return CursorKey(distance_meters=distance, starts_at=starts_at, id=sale_id)
