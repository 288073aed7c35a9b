"""Search data models"""

from datetime import date, datetime, time
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from yardsale.geo import GeoPoint


class CamelModel(BaseModel):
    """Base model that serializes field names in camelCase"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchQuery(BaseModel):
    """Validated search parameters for one request"""
    lat: float
    lng: float
    radius_km: float
    date_range: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    q: Optional[str] = None
    city: Optional[str] = None
    limit: int = 24
    cursor: Optional[str] = None

    @property
    def center(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lng=self.lng)

    @property
    def radius_meters(self) -> float:
        return self.radius_km * 1000


class SearchResultRow(CamelModel):
    """A sale projected for search results"""
    id: str
    title: str
    description: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    lat: float
    lng: float
    date_start: date
    time_start: Optional[time] = None
    date_end: Optional[date] = None
    time_end: Optional[time] = None
    tags: List[str] = Field(default_factory=list)
    status: Optional[str] = None
    starts_at: datetime
    ends_at: datetime
    distance_meters: float
    is_masked: bool = False
    reveal_time: Optional[datetime] = None

    @property
    def sort_key(self):
        return (self.distance_meters, self.starts_at, self.id)


class Center(CamelModel):
    lat: float
    lng: float


class DateWindowInfo(CamelModel):
    start: datetime
    end: datetime
    label: str
    display: str


# Top-level response keys omitted when None
SPARSE_RESPONSE_KEYS = ("nextCursor", "degraded", "dateWindow")


class SearchResponse(CamelModel):
    """
    Search endpoint payload.

    next_cursor, degraded and date_window are None when absent and are
    left out of the serialized payload. Null fields inside rows are kept.
    """
    ok: bool = True
    data: List[SearchResultRow]
    center: Center
    distance_km: float
    count: int
    duration_ms: float
    next_cursor: Optional[str] = None
    degraded: Optional[bool] = None
    date_window: Optional[DateWindowInfo] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(mode="json", by_alias=True)
        for key in SPARSE_RESPONSE_KEYS:
            if payload[key] is None:
                del payload[key]
        return payload
