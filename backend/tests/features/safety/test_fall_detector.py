"""
Tests for the acceleration-spike fall detector and sensor feeds.
"""

import pytest

from trailguard.features.safety import AccelerationSample, FallDetector, SensorFeed


class TestAccelerationSample:

    def test_magnitude(self):
        assert AccelerationSample(3.0, 4.0, 12.0).magnitude == pytest.approx(13.0)

    def test_at_rest(self):
        assert AccelerationSample(0.0, 0.0, 9.81).magnitude == pytest.approx(9.81)


class TestFallDetector:

    def test_spike_detected(self):
        detector = FallDetector(threshold=20)
        assert detector.add(AccelerationSample(0.0, 0.0, 9.8)) is False
        assert detector.add(AccelerationSample(12.0, 12.0, 12.0)) is True

    def test_threshold_exclusive(self):
        detector = FallDetector(threshold=13)
        assert detector.add(AccelerationSample(3.0, 4.0, 12.0)) is False

    def test_history_bounded(self):
        detector = FallDetector(history_size=3)
        for i in range(10):
            detector.add(AccelerationSample(float(i), 0.0, 0.0))
        assert len(detector.history) == 3
        assert [s.x for s in detector.history] == [7.0, 8.0, 9.0]

    def test_peak_and_clear(self):
        detector = FallDetector()
        assert detector.peak_magnitude is None
        detector.add(AccelerationSample(0.0, 0.0, 5.0))
        detector.add(AccelerationSample(0.0, 0.0, 25.0))
        assert detector.peak_magnitude == pytest.approx(25.0)

        detector.clear()
        assert len(detector.history) == 0


class TestSensorFeed:

    def test_push_and_level(self):
        feed = SensorFeed()
        readings = []
        sub = feed.subscribe(readings.append)

        assert feed.level is None
        feed.push(80.0)
        assert readings == [80.0]
        assert feed.level == 80.0

        sub.cancel()
        feed.push(70.0)
        assert readings == [80.0]
        assert feed.subscriber_count == 0
