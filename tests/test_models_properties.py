"""
Property-based tests for sale models, row normalization and location privacy.

These tests verify that rows from either query path load into the same
shape and that masked locations never leak exact coordinates.
"""

import uuid
from datetime import date, datetime, time, timedelta, timezone

import pytest
from hypothesis import given, settings, strategies as st
from pydantic import ValidationError

from yardsale.filtering import SaleFilter, public_location, should_mask
from yardsale.geo import GeoPoint, haversine_km
from yardsale.models import PrivacyMode, SaleRecord, SaleStatus
from yardsale.services.search import SearchPath, normalize_row, normalize_rows

from factories import FIXED_NOW, LOUISVILLE, destination_point, make_sale


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


class TestSaleRecord:

    def test_latitude_longitude_spelling(self):
        raw = make_sale("a", LOUISVILLE)
        raw["latitude"] = raw.pop("lat")
        raw["longitude"] = raw.pop("lng")

        sale = SaleRecord.model_validate(raw)

        assert (sale.lat, sale.lng) == (LOUISVILLE.lat, LOUISVILLE.lng)

    def test_camel_case_columns(self):
        sale = SaleRecord.model_validate({
            "id": "a", "title": "Sale", "lat": 1.0, "lon": 2.0,
            "dateStart": "2024-10-12", "timeStart": "08:00", "zipCode": "40202",
            "privacyMode": "block_until_24h",
        })

        assert sale.lng == 2.0
        assert sale.date_start == date(2024, 10, 12)
        assert sale.time_start == time(8, 0)
        assert sale.zip_code == "40202"
        assert sale.privacy_mode is PrivacyMode.BLOCK_UNTIL_24H

    def test_uuid_id_and_null_columns(self):
        sale_id = uuid.uuid4()
        raw = make_sale(sale_id, LOUISVILLE, tags=None, privacy_mode=None)
        raw["tags"] = None

        sale = SaleRecord.model_validate(raw)

        assert sale.id == str(sale_id)
        assert sale.tags == []
        assert sale.privacy_mode is PrivacyMode.EXACT
        assert sale.status is SaleStatus.PUBLISHED

    def test_unknown_columns_are_ignored(self):
        raw = make_sale("a", LOUISVILLE, owner_id="u1", geom="0101000020E6100000")
        assert SaleRecord.model_validate(raw).id == "a"

    def test_start_and_end_instants(self):
        sale = SaleRecord.model_validate(make_sale("a", LOUISVILLE))

        assert sale.starts_at == utc(2024, 10, 12, 8)
        assert sale.ends_at == utc(2024, 10, 12, 14)

    def test_missing_times(self):
        sale = SaleRecord.model_validate(make_sale(
            "a", LOUISVILLE, time_start=None, time_end=None, date_end=date(2024, 10, 13)))

        assert sale.starts_at == utc(2024, 10, 12)
        assert sale.ends_at == utc(2024, 10, 13, 23, 59, 59, 999999)

    @pytest.mark.parametrize("changes", [
        {"time_start": time(15, 0), "time_end": time(9, 0)},
        {"date_end": date(2024, 10, 11)},
    ])
    def test_end_before_start_is_rejected(self, changes):
        with pytest.raises(ValidationError):
            SaleRecord.model_validate(make_sale("a", LOUISVILLE, **changes))

    @pytest.mark.parametrize("missing", ["id", "title", "date_start", "lat", "lng"])
    def test_required_columns(self, missing):
        raw = make_sale("a", LOUISVILLE)
        del raw[missing]
        with pytest.raises(ValidationError):
            SaleRecord.model_validate(raw)


class TestNormalization:

    @pytest.mark.parametrize("reported", [2994.0, 1.0, None])
    def test_distance_is_haversine_from_true_coordinates(self, reported):
        """A distance column on the row (ellipsoidal, stale or absent) is not trusted."""
        raw = {**make_sale("a", destination_point(LOUISVILLE, 3, 0)), "distance_meters": reported}

        row = normalize_row(raw, LOUISVILLE, FIXED_NOW)

        assert row.distance_meters == pytest.approx(3000, rel=1e-9)

    @given(distance=st.floats(min_value=0, max_value=100), bearing=st.floats(min_value=0, max_value=360))
    @settings(max_examples=50)
    def test_both_spellings_normalize_identically(self, distance, bearing):
        """A row keyed lat/lng and the same row keyed latitude/longitude match."""
        raw = make_sale("a", destination_point(LOUISVILLE, distance, bearing))
        renamed = {k: v for k, v in raw.items() if k not in ("lat", "lng")}
        renamed.update(latitude=raw["lat"], longitude=raw["lng"])

        first = normalize_row(raw, LOUISVILLE, FIXED_NOW)
        second = normalize_row(renamed, LOUISVILLE, FIXED_NOW)

        assert first == second

    def test_malformed_rows_are_skipped_and_logged(self, caplog):
        rows = [
            make_sale("good", LOUISVILLE),
            {"id": "broken", "title": "No location"},
        ]

        normalized = normalize_rows(rows, SearchPath.FALLBACK, LOUISVILLE, FIXED_NOW)

        assert [row.id for row in normalized] == ["good"]
        assert "broken" in caplog.text


class TestPrivacy:

    def test_exact_sales_are_never_masked(self):
        sale = SaleRecord.model_validate(make_sale("a", LOUISVILLE))
        assert should_mask(sale, FIXED_NOW) is False

    def test_masked_until_reveal_time(self):
        sale = SaleRecord.model_validate(make_sale("a", LOUISVILLE, privacy_mode="block_until_24h"))
        reveal = utc(2024, 10, 11, 8)

        assert should_mask(sale, reveal - timedelta(seconds=1)) is True
        assert should_mask(sale, reveal) is False

        lat, lng, is_masked, reveal_at = public_location(sale, FIXED_NOW)
        assert is_masked is True
        assert reveal_at == reveal
        assert (lat, lng) == (round(LOUISVILLE.lat, 3), round(LOUISVILLE.lng, 3))

        assert public_location(sale, reveal) == (sale.lat, sale.lng, False, None)

    @given(
        lat=st.floats(min_value=-89, max_value=89),
        lng=st.floats(min_value=-179, max_value=179),
    )
    def test_masked_coordinates_stay_near_true_location(self, lat, lng):
        sale = SaleRecord.model_validate(
            make_sale("a", GeoPoint(lat, lng), privacy_mode="block_until_24h"))

        masked_lat, masked_lng, is_masked, _ = public_location(sale, FIXED_NOW)

        assert is_masked
        assert abs(masked_lat - lat) <= 0.0005 + 1e-9
        assert abs(masked_lng - lng) <= 0.0005 + 1e-9
        assert haversine_km(GeoPoint(lat, lng), GeoPoint(masked_lat, masked_lng)) < 0.1


class TestSaleFilter:

    def rows(self):
        layouts = [("a", 1, "Tools galore", None), ("b", 5, "Baby clothes", "Crib and stroller"),
                   ("c", 9, "Moving sale", None)]
        return [
            normalize_row(make_sale(sale_id, destination_point(LOUISVILLE, km, 0), title=title,
                                    description=description),
                          LOUISVILLE, FIXED_NOW)
            for sale_id, km, title, description in layouts
        ]

    def test_radius(self):
        kept = SaleFilter().filter_by_radius(self.rows(), 5000.001)
        assert [row.id for row in kept] == ["a", "b"]

    @pytest.mark.parametrize("text,expected", [
        ("TOOLS", ["a"]),
        ("stroller", ["b"]),
        ("louisville", ["a", "b", "c"]),
        ("ky", ["a", "b", "c"]),
        ("lamps", []),
        ("  ", ["a", "b", "c"]),
        (None, ["a", "b", "c"]),
    ])
    def test_text(self, text, expected):
        kept = SaleFilter().filter_by_text(self.rows(), text)
        assert [row.id for row in kept] == expected

    def test_no_window_keeps_everything(self):
        rows = self.rows()
        assert SaleFilter().filter_by_date_window(rows, None) == rows
