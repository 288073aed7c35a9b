"""Sale data models"""

from datetime import date, datetime, time
from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator

from yardsale.dates import combine_date_time, end_of_day


class SaleStatus(str, Enum):
    """Sale lifecycle status"""
    DRAFT = "draft"
    PUBLISHED = "published"
    HIDDEN = "hidden"
    AUTO_HIDDEN = "auto_hidden"


class PrivacyMode(str, Enum):
    """How precisely a sale's location is shown before it starts"""
    EXACT = "exact"
    BLOCK_UNTIL_24H = "block_until_24h"


class SaleRecord(BaseModel):
    """
    A sale as stored by the persistence layer.

    Accepts both lat/lng and latitude/longitude spellings so rows from
    the spatial procedure and from the table load the same way.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    title: str
    description: Optional[str] = None
    date_start: date = Field(validation_alias=AliasChoices("date_start", "dateStart"))
    time_start: Optional[time] = Field(default=None, validation_alias=AliasChoices("time_start", "timeStart"))
    date_end: Optional[date] = Field(default=None, validation_alias=AliasChoices("date_end", "dateEnd"))
    time_end: Optional[time] = Field(default=None, validation_alias=AliasChoices("time_end", "timeEnd"))
    lat: float = Field(validation_alias=AliasChoices("lat", "latitude"))
    lng: float = Field(validation_alias=AliasChoices("lng", "longitude", "lon"))
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(default=None, validation_alias=AliasChoices("zip_code", "zipCode"))
    tags: List[str] = Field(default_factory=list)
    status: Optional[SaleStatus] = None
    privacy_mode: PrivacyMode = Field(
        default=PrivacyMode.EXACT,
        validation_alias=AliasChoices("privacy_mode", "privacyMode"),
    )

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value: Any) -> Any:
        # uuid columns arrive as uuid.UUID
        return str(value) if value is not None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _tags_default(cls, value: Any) -> Any:
        return [] if value is None else list(value)

    @field_validator("privacy_mode", mode="before")
    @classmethod
    def _privacy_default(cls, value: Any) -> Any:
        return PrivacyMode.EXACT if value is None else value

    @model_validator(mode="after")
    def _end_not_before_start(self) -> "SaleRecord":
        if self.ends_at < self.starts_at:
            raise ValueError("sale end is before its start")
        return self

    @property
    def starts_at(self) -> datetime:
        return combine_date_time(self.date_start, self.time_start)

    @property
    def ends_at(self) -> datetime:
        """End instant; a missing end time runs to the end of the end day."""
        end_day = self.date_end or self.date_start
        if self.time_end is not None:
            return combine_date_time(end_day, self.time_end)
        return end_of_day(end_day)
