"""
Unit tests for nexrad_level2.message31 module.

Tests ray metadata validation, the azimuth fallback and block dispatch.
"""
import struct
from datetime import datetime, timezone

import numpy as np
import pytest

from nexrad_level2 import message31
from nexrad_level2.message31 import decode_azimuth, decode_message31, scaled_integer_azimuth
from nexrad_level2.reader import ByteReader
from nexrad_level2.result import is_skip

import synthetic


def _decode(body):
    return decode_message31(ByteReader(body))


class TestDecodeAzimuth:
    """Test the float / scaled integer azimuth fallback."""

    def test_float_encoding(self):
        assert decode_azimuth(struct.pack(">f", 123.5)) == 123.5

    def test_zero_is_valid(self):
        assert decode_azimuth(struct.pack(">f", 0.0)) == 0.0

    def test_scaled_integer_reading(self):
        assert scaled_integer_azimuth(struct.pack(">I", 2000)) == 250.0

    def test_small_integer_reads_as_float_first(self):
        # These bytes are a tiny positive denormal as a float, which is in range
        assert decode_azimuth(struct.pack(">I", 2000)) < 1e-30

    def test_out_of_range_float_uses_integer_reading(self, monkeypatch):
        monkeypatch.setattr(message31, "scaled_integer_azimuth", lambda raw: 12.5)
        assert decode_azimuth(struct.pack(">f", -1.0)) == 12.5

    def test_out_of_range_integer_reading_rejects(self, monkeypatch):
        monkeypatch.setattr(message31, "scaled_integer_azimuth", lambda raw: 360.0)
        assert decode_azimuth(struct.pack(">f", 400.0)) is None

    @pytest.mark.parametrize("value", [-1.0, 360.0, 400.0, float("nan")])
    def test_both_readings_out_of_range(self, value):
        assert decode_azimuth(struct.pack(">f", value)) is None


class TestDecodeMessage31:
    """Test message 31 decoding."""

    def test_basic_ray(self):
        body = synthetic.message31_body(
            [synthetic.moment_block(values=(2, 3, 4))],
            azimuth=45.0, elevation=0.5, sweep_number=3,
        )
        ray = _decode(body)

        assert ray.azimuth == 45.0
        assert ray.elevation == 0.5
        assert ray.sweep_number == 3
        assert ray.station_id == "KTLX"
        assert ray.timestamp is None
        assert list(ray.moments) == ["REF"]
        np.testing.assert_array_equal(ray.moments["REF"].data, [2.0, 3.0, 4.0])

    def test_timestamp(self):
        body = synthetic.message31_body([synthetic.moment_block()], julian=2, ms=3_600_000)
        ray = _decode(body)
        assert ray.timestamp == datetime(1970, 1, 2, 1, 0, tzinfo=timezone.utc)

    def test_several_moments(self):
        blocks = [
            synthetic.moment_block(b"REF"),
            synthetic.moment_block(b"VEL"),
            synthetic.moment_block(b"ZDR"),
        ]
        ray = _decode(synthetic.message31_body(blocks))
        assert sorted(ray.moments) == ["REF", "VEL", "ZDR"]

    def test_volume_block(self):
        blocks = [synthetic.volume_block(vcp=215, height=370), synthetic.moment_block()]
        ray = _decode(synthetic.message31_body(blocks))

        assert ray.vcp == 215
        assert ray.site.latitude == pytest.approx(35.333, abs=1e-4)
        assert ray.site.longitude == pytest.approx(-97.278, abs=1e-4)
        assert ray.site.height == 370.0

    def test_zero_vcp_is_ignored(self):
        blocks = [synthetic.volume_block(vcp=0), synthetic.moment_block()]
        assert _decode(synthetic.message31_body(blocks)).vcp == 0

    def test_other_r_blocks_are_ignored(self):
        elv = b"RELV" + struct.pack(">Hhf", 12, 0, 0.0)
        ray = _decode(synthetic.message31_body([elv, synthetic.moment_block()]))
        assert ray.vcp == 0
        assert ray.site is None

    def test_unknown_moment_dropped_silently(self):
        blocks = [synthetic.moment_block(b"XYZ"), synthetic.moment_block(b"RHO")]
        ray = _decode(synthetic.message31_body(blocks))
        assert list(ray.moments) == ["RHO"]

    def test_unrecoverable_azimuth_rejected(self):
        body = synthetic.message31_body(
            [synthetic.moment_block()], azimuth_bytes=struct.pack(">I", 0x7F800000 + 8 * 100)
        )
        ray = _decode(body)
        # NaN as float, integer reading out of range as well
        assert is_skip(ray)

    @pytest.mark.parametrize("station", [b"ktlx", b"1TLX", b"\x00TLX"])
    def test_invalid_station_rejected(self, station):
        body = synthetic.message31_body([synthetic.moment_block()], station=station)
        assert is_skip(_decode(body))

    @pytest.mark.parametrize("elevation", [-10.5, 90.5, float("nan")])
    def test_invalid_elevation_rejected(self, elevation):
        body = synthetic.message31_body([synthetic.moment_block()], elevation=elevation)
        assert is_skip(_decode(body))

    @pytest.mark.parametrize("elevation", [-10.0, 90.0])
    def test_elevation_limits_inclusive(self, elevation):
        body = synthetic.message31_body([synthetic.moment_block()], elevation=elevation)
        assert _decode(body).elevation == elevation

    def test_invalid_azimuth_rejected(self):
        body = synthetic.message31_body([synthetic.moment_block()], azimuth=-5.0)
        assert is_skip(_decode(body))

    @pytest.mark.parametrize("count", [0, 16])
    def test_block_count_out_of_range(self, count):
        body = synthetic.message31_body([synthetic.moment_block()], block_count=count)
        assert is_skip(_decode(body))

    def test_no_recognized_moments(self):
        body = synthetic.message31_body([synthetic.volume_block(), synthetic.moment_block(b"XYZ")])
        result = _decode(body)
        assert is_skip(result)
        assert "no recognized moments" in result.reason

    def test_invalid_moment_block_alone_rejects_ray(self):
        body = synthetic.message31_body([synthetic.moment_block(scale=0.0)])
        assert is_skip(_decode(body))

    def test_invalid_moment_block_dropped_keeps_others(self):
        blocks = [synthetic.moment_block(b"VEL", scale=0.0), synthetic.moment_block(b"REF")]
        ray = _decode(synthetic.message31_body(blocks))
        assert list(ray.moments) == ["REF"]

    def test_null_and_out_of_range_pointers_skipped(self):
        block = synthetic.moment_block()
        body = synthetic.message31_body([block, b"", b""], pointers=[0, 44, 100000])
        ray = _decode(body)
        assert list(ray.moments) == ["REF"]

    def test_truncated_pointer_table(self):
        body = synthetic.message31_body([synthetic.moment_block()])[:32]
        body = body[:30] + struct.pack(">H", 5)
        assert is_skip(_decode(body))

    def test_truncated_body(self):
        assert is_skip(_decode(b"KTLX" + b"\x00" * 10))
