"""
Sales repository: the two queries the search pipeline needs from the
database.
"""

import logging
import re
from datetime import date
from typing import Any, Dict, List, Optional, Protocol, Sequence

import asyncpg

from yardsale.config import DatabaseConfig
from yardsale.error_handling import PersistenceError, SpatialQueryUnavailable
from yardsale.filtering import TEXT_SEARCH_FIELDS
from yardsale.geo import BoundingBox, GeoPoint
from yardsale.models import SaleStatus

logger = logging.getLogger(__name__)

SALE_COLUMNS = (
    "id, title, description, lat, lng, city, state, zip_code, "
    "date_start, time_start, date_end, time_end, tags, status, privacy_mode"
)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")


def _checked_identifier(name: str) -> str:
    if not _IDENTIFIER.match(name):
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    return name


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SalesRepository(Protocol):
    """Query interface the search orchestrator depends on"""

    async def search_within_distance(
        self,
        *,
        center: GeoPoint,
        radius_meters: float,
        city: Optional[str],
        categories: Sequence[str],
        date_start: Optional[date],
        date_end: Optional[date],
        limit: int,
    ) -> List[Dict[str, Any]]:
        """Rows within radius_meters, with distance_meters, nearest first.

        Raises SpatialQueryUnavailable when the spatial procedure fails.
        """
        ...

    async def find_in_bounding_box(
        self,
        *,
        box: BoundingBox,
        statuses: Optional[Sequence[SaleStatus]],
        categories: Sequence[str],
        text: Optional[str],
        city: Optional[str],
        limit: int,
    ) -> List[Dict[str, Any]]:
        """Rows whose lat/lng fall inside box. statuses=None means any status.

        Raises PersistenceError when the query fails.
        """
        ...


class PostgresSalesRepository:
    """SalesRepository backed by an asyncpg pool"""

    def __init__(self, pool: asyncpg.Pool, config: DatabaseConfig):
        self.pool = pool
        self.table = _checked_identifier(config.sales_table)
        self.spatial_function = _checked_identifier(config.spatial_function)

    async def search_within_distance(
        self,
        *,
        center: GeoPoint,
        radius_meters: float,
        city: Optional[str],
        categories: Sequence[str],
        date_start: Optional[date],
        date_end: Optional[date],
        limit: int,
    ) -> List[Dict[str, Any]]:
        sql = f"SELECT * FROM {self.spatial_function}($1, $2, $3, $4, $5, $6, $7, $8)"
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    sql,
                    center.lat,
                    center.lng,
                    radius_meters,
                    city,
                    list(categories) or None,
                    date_start,
                    date_end,
                    limit,
                )
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise SpatialQueryUnavailable(f"Spatial search failed: {e}") from e

        return [dict(row) for row in rows]

    async def find_in_bounding_box(
        self,
        *,
        box: BoundingBox,
        statuses: Optional[Sequence[SaleStatus]],
        categories: Sequence[str],
        text: Optional[str],
        city: Optional[str],
        limit: int,
    ) -> List[Dict[str, Any]]:
        args: List[Any] = [box.min_lat, box.max_lat, box.min_lng, box.max_lng]
        clauses = ["lat BETWEEN $1 AND $2", "lng BETWEEN $3 AND $4"]

        def param(value: Any) -> str:
            args.append(value)
            return f"${len(args)}"

        if statuses:
            clauses.append(f"status = ANY({param([s.value for s in statuses])}::text[])")
        if categories:
            clauses.append(f"tags && {param(list(categories))}::text[]")
        if text:
            pattern = param(f"%{_escape_like(text)}%")
            matches = " OR ".join(f"{name} ILIKE {pattern}" for name in TEXT_SEARCH_FIELDS)
            clauses.append(f"({matches})")
        if city:
            clauses.append(f"city ILIKE {param(f'%{_escape_like(city)}%')}")

        sql = (
            f"SELECT {SALE_COLUMNS} FROM {self.table} "
            f"WHERE {' AND '.join(clauses)} "
            f"LIMIT {param(limit)}"
        )

        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(sql, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            raise PersistenceError("Bounding-box sales query failed", detail=str(e)) from e

        logger.debug(f"Bounding-box query returned {len(rows)} rows")
        return [dict(row) for row in rows]
