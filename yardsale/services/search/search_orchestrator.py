"""
Search orchestrator - coordinates the spatial query, the bounding-box
fallback, filtering, ordering and cursor pagination.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional, Set, Tuple, Union

from yardsale.config import SearchConfig
from yardsale.dates import DateWindow, resolve_date_window
from yardsale.error_handling import CursorDecodeError, SpatialQueryUnavailable
from yardsale.filtering import SaleFilter
from yardsale.geo import bounding_box
from yardsale.models import SaleStatus, SearchQuery, SearchResultRow
from .cursor import CursorKey, decode_cursor, encode_cursor
from .normalizer import SearchPath, normalize_rows
from .repository import SalesRepository

logger = logging.getLogger(__name__)

Log = Union[logging.Logger, logging.LoggerAdapter]


@dataclass
class SearchOutcome:
    """Result of one search, before response assembly"""
    rows: List[SearchResultRow] = field(default_factory=list)
    degraded: bool = False
    next_cursor: Optional[str] = None
    date_window: Optional[DateWindow] = None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SearchOrchestrator:
    """Orchestrate the complete sales search workflow"""

    # Status constraint for the first fallback attempt
    FALLBACK_STATUSES = (SaleStatus.PUBLISHED,)

    def __init__(
        self,
        repository: SalesRepository,
        config: Optional[SearchConfig] = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.repository = repository
        self.config = config or SearchConfig()
        self.clock = clock
        self.sale_filter = SaleFilter()

    async def search(self, query: SearchQuery, log: Log = logger) -> SearchOutcome:
        """
        Run a search.

        1. Resolves the date window (InvalidDateRange propagates)
        2. Tries the spatial procedure; on SpatialQueryUnavailable falls
           back to a bounding-box query with haversine distances
        3. Normalizes, then filters by radius, text (primary only) and date
        4. Deduplicates, sorts by (distance, start, id), applies the cursor
           and slices one page

        Args:
            query: Validated search parameters
            log: Logger carrying request context

        Returns:
            SearchOutcome with the page rows and pagination metadata
        """
        now = self.clock()
        window = resolve_date_window(query.date_range, query.start_date, query.end_date, now=now)
        cursor_key = self._decode_cursor(query.cursor, log)

        try:
            path = SearchPath.PRIMARY
            rows, page, next_cursor = await self._search_primary(query, window, cursor_key, now, log)
        except SpatialQueryUnavailable as e:
            log.warning(f"Spatial search unavailable, using bounding-box fallback: {e}")
            path = SearchPath.FALLBACK
            raw_rows = await self._query_fallback(query, log)
            rows = self._prepare_rows(raw_rows, path, query, window, now, log)
            page, next_cursor = self.paginate(rows, cursor_key, query.limit)

        log.info(
            f"Search ({path.value}) returned {len(page)} of {len(rows)} candidates "
            f"within {query.radius_km}km of ({query.lat}, {query.lng})"
        )

        return SearchOutcome(
            rows=page,
            degraded=path is SearchPath.FALLBACK,
            next_cursor=next_cursor,
            date_window=window,
        )

    def _prepare_rows(
        self,
        raw_rows: List[dict],
        path: SearchPath,
        query: SearchQuery,
        window: Optional[DateWindow],
        now: datetime,
        log: Log,
    ) -> List[SearchResultRow]:
        """Normalize, filter, deduplicate and sort rows from either path."""
        rows = normalize_rows(raw_rows, path, query.center, now, log=log)
        rows = self.sale_filter.filter_by_radius(rows, query.radius_meters)
        if path is SearchPath.PRIMARY:
            rows = self.sale_filter.filter_by_text(rows, query.q)
        rows = self.sale_filter.filter_by_date_window(rows, window)

        rows = self.deduplicate_rows(rows)
        rows.sort(key=lambda row: row.sort_key)
        return rows

    async def _search_primary(
        self,
        query: SearchQuery,
        window: Optional[DateWindow],
        cursor_key: Optional[CursorKey],
        now: datetime,
        log: Log,
    ) -> Tuple[List[SearchResultRow], List[SearchResultRow], Optional[str]]:
        """
        Page through the spatial procedure.

        The procedure has no cursor parameter, so a page deep into the
        results can come back short while more rows exist. When the
        procedure returned every row asked for, the request is repeated
        with twice the limit, up to primary_max_rows.

        Returns:
            Tuple of (all prepared rows, page rows, next cursor or None)

        Raises:
            SpatialQueryUnavailable: If the procedure fails or times out
        """
        fetch_limit = min(query.limit + self.config.overfetch, self.config.primary_max_rows)

        while True:
            raw_rows = await self._query_primary(query, window, fetch_limit)
            rows = self._prepare_rows(raw_rows, SearchPath.PRIMARY, query, window, now, log)
            page, next_cursor = self.paginate(rows, cursor_key, query.limit)

            exhausted = len(raw_rows) < fetch_limit
            if exhausted or len(page) >= query.limit or fetch_limit >= self.config.primary_max_rows:
                return rows, page, next_cursor

            fetch_limit = min(fetch_limit * 2, self.config.primary_max_rows)
            log.info(f"Short page from spatial search, refetching with limit {fetch_limit}")

    async def _query_primary(
        self,
        query: SearchQuery,
        window: Optional[DateWindow],
        fetch_limit: int,
    ) -> List[dict]:
        """
        Call the spatial procedure.

        The window is passed as coarse date bounds; exact overlap is
        checked after normalization. fetch_limit is larger than the page
        to cover rows the date and cursor filters drop.

        Raises:
            SpatialQueryUnavailable: If the procedure fails or times out
        """
        date_start = window.start.date() if window else None
        date_end = (window.end - timedelta(microseconds=1)).date() if window else None

        try:
            return await asyncio.wait_for(
                self.repository.search_within_distance(
                    center=query.center,
                    radius_meters=query.radius_meters,
                    city=query.city,
                    categories=query.categories,
                    date_start=date_start,
                    date_end=date_end,
                    limit=fetch_limit,
                ),
                timeout=self.config.spatial_timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            raise SpatialQueryUnavailable(
                f"Spatial search timed out after {self.config.spatial_timeout_seconds}s"
            ) from e

    async def _query_fallback(self, query: SearchQuery, log: Log) -> List[dict]:
        """
        Bounding-box query over the sales table.

        Retried once without the status constraint when the first attempt
        comes back empty.

        Raises:
            PersistenceError: If the query fails
        """
        box = bounding_box(query.center, query.radius_km)

        rows = await self.repository.find_in_bounding_box(
            box=box,
            statuses=self.FALLBACK_STATUSES,
            categories=query.categories,
            text=query.q,
            city=query.city,
            limit=self.config.fallback_max_rows,
        )
        if rows:
            return rows

        log.info("Bounding-box query empty, retrying once without status constraint")
        return await self.repository.find_in_bounding_box(
            box=box,
            statuses=None,
            categories=query.categories,
            text=query.q,
            city=query.city,
            limit=self.config.fallback_max_rows,
        )

    def _decode_cursor(self, token: Optional[str], log: Log) -> Optional[CursorKey]:
        if not token:
            return None
        try:
            return decode_cursor(token)
        except CursorDecodeError as e:
            log.warning(f"Ignoring undecodable cursor: {e}")
            return None

    def deduplicate_rows(self, rows: List[SearchResultRow]) -> List[SearchResultRow]:
        """
        Remove duplicate rows by ID, keeping the first occurrence.

        Args:
            rows: Rows (may contain duplicates)

        Returns:
            Deduplicated list
        """
        seen_ids: Set[str] = set()
        unique_rows = []

        for row in rows:
            if row.id not in seen_ids:
                seen_ids.add(row.id)
                unique_rows.append(row)

        return unique_rows

    def paginate(
        self,
        rows: List[SearchResultRow],
        cursor_key: Optional[CursorKey],
        limit: int,
    ) -> Tuple[List[SearchResultRow], Optional[str]]:
        """
        Slice one page from sorted rows.

        Rows at or before the cursor are dropped. A next cursor is issued
        when at least a full page of candidates remained.

        Returns:
            Tuple of (page rows, next cursor or None)
        """
        if cursor_key is not None:
            boundary = cursor_key.as_tuple()
            rows = [row for row in rows if row.sort_key > boundary]

        page = rows[:limit]
        if page and len(rows) >= limit:
            last = page[-1]
            return page, encode_cursor(last.distance_meters, last.starts_at, last.id)
        return page, None
