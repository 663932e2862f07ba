"""
Tests for the in-process location provider and the GPSFix model.
"""

from datetime import datetime, timezone

import pytest

from trailguard.features.recording import GPSFix, PushLocationProvider
from trailguard.shared.errors import LocationUnavailableError

BASE_TIME = datetime(2024, 6, 1, 8, 0, tzinfo=timezone.utc)


class TestPushLocationProvider:

    def test_fans_out_in_order(self, make_fix):
        provider = PushLocationProvider()
        received = []
        provider.subscribe(lambda f: received.append(("a", f)))
        provider.subscribe(lambda f: received.append(("b", f)))

        fix = make_fix(0)
        provider.push(fix)

        assert received == [("a", fix), ("b", fix)]
        assert provider.last_fix is fix

    def test_cancel_stops_delivery(self, make_fix):
        provider = PushLocationProvider()
        received = []
        sub = provider.subscribe(received.append)
        sub.cancel()
        sub.cancel()

        provider.push(make_fix(0))
        assert received == []
        assert provider.subscriber_count == 0

    def test_unavailable(self):
        provider = PushLocationProvider()
        provider.mark_unavailable("no GPS hardware")
        assert provider.available is False

        with pytest.raises(LocationUnavailableError):
            provider.subscribe(lambda f: None)

        provider.mark_available()
        provider.subscribe(lambda f: None)
        assert provider.subscriber_count == 1


class TestGPSFix:

    @pytest.mark.parametrize("lat,lon", [(90.5, 0.0), (-91.0, 0.0), (0.0, 180.1), (0.0, -181.0)])
    def test_out_of_range(self, lat, lon):
        with pytest.raises(ValueError):
            GPSFix(latitude=lat, longitude=lon, timestamp=BASE_TIME)

    def test_bounds_inclusive(self):
        GPSFix(latitude=90.0, longitude=-180.0, timestamp=BASE_TIME)

    def test_naive_timestamp_rejected(self):
        with pytest.raises(ValueError):
            GPSFix(latitude=43.0, longitude=76.0, timestamp=BASE_TIME.replace(tzinfo=None))

    def test_immutable(self, make_fix):
        fix = make_fix(0)
        with pytest.raises(AttributeError):
            fix.latitude = 10.0
