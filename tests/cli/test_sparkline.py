"""Tests for history display helpers."""

from plan_wolf.cli.history import _sparkline, _trend_direction


class TestSparkline:
    def test_empty(self):
        assert _sparkline([]) == ""

    def test_flat(self):
        assert _sparkline([5, 5, 5]) == "▄▄▄"

    def test_rising(self):
        line = _sparkline([0, 50, 100])
        assert line[0] == " "
        assert line[-1] == "█"


class TestTrendDirection:
    def test_directions(self):
        assert "improving" in _trend_direction([50, 52, 70, 80])
        assert "declining" in _trend_direction([80, 70, 52, 50])
        assert "stable" in _trend_direction([70, 70])
        assert "n/a" in _trend_direction([70])
