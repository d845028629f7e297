"""
Unit tests for nexrad_level2.messages module.

Tests message framing, resynchronization and dispatch of type 31 messages.
"""
import struct

from nexrad_level2.messages import iter_messages, iter_rays
from nexrad_level2.models import DecodeStats

import synthetic


def _types(segment, stats=None):
    return [m.msg_type for m in iter_messages(segment, stats)]


class TestIterMessages:
    """Test framing of the message stream."""

    def test_sequence_of_messages(self):
        segment = (
            synthetic.message(b"\x00" * 40, msg_type=2)
            + synthetic.message(b"\x00" * 10, msg_type=5)
            + synthetic.message(b"\x00" * 64, msg_type=31)
        )
        assert _types(segment) == [2, 5, 31]

    def test_body_length_excludes_header(self):
        segment = synthetic.message(b"\xab" * 40, msg_type=3)
        (msg,) = list(iter_messages(segment))
        assert msg.offset == 0
        assert len(msg.body) == 40
        assert msg.body.u8_at(39) == 0xab

    def test_header_only_message(self):
        segment = synthetic.message(b"", msg_type=7) + synthetic.message(b"\x00" * 4, msg_type=8)
        assert _types(segment) == [7, 8]

    def test_body_clipped_to_segment(self):
        segment = synthetic.message(b"\x00" * 8, msg_type=1, size_halfwords=100)
        (msg,) = list(iter_messages(segment))
        assert len(msg.body) == 8

    def test_undersized_length_triggers_single_byte_resync(self):
        """A declared length below the header size advances by exactly one byte."""
        # 7 halfwords = 14 bytes, below the 16-byte header
        bad = b"\x00" * 12 + struct.pack(">HBB", 7, 0, 31) + b"\x00" * 12
        stats = DecodeStats()
        msgs = list(iter_messages(bad + b"\x00", stats))

        # The scan retried at offset 1 instead of abandoning the segment
        assert stats.resyncs == 1
        assert [m.offset for m in msgs] == [1]

    def test_zero_length_resyncs_to_next_message(self):
        # Framing field and a header declaring 0 halfwords
        bad = b"\x00" * 28
        good = synthetic.message(b"\x00" * 20, msg_type=13)
        stats = DecodeStats()

        assert _types(bad + good, stats) == [13]
        assert stats.resyncs == len(bad)
        assert stats.messages == 1

    def test_zero_padding_resyncs_to_next_message(self):
        segment = b"\x00" * 5 + synthetic.message(b"\x00" * 20, msg_type=2)
        stats = DecodeStats()
        msgs = list(iter_messages(segment, stats))
        assert [m.msg_type for m in msgs] == [2]
        assert msgs[0].offset == 5
        assert stats.resyncs == 5

    def test_oversized_length_triggers_resync(self):
        bad = b"\x00" * 12 + b"\xff\xff" + b"\x00" * 14
        good = synthetic.message(b"\x00" * 20, msg_type=2)
        assert _types(bad + good) == [2]

    def test_maximum_size_is_accepted(self):
        segment = synthetic.message(b"\x00" * (20000 - 16), msg_type=31)
        (msg,) = list(iter_messages(segment))
        assert len(msg.body) == 20000 - 16

    def test_segment_shorter_than_headers(self):
        assert _types(b"\x00" * 27) == []


class TestIterRays:
    """Test dispatch of message 31 to the ray decoder."""

    def test_only_type_31_is_decoded(self):
        body = synthetic.message31_body([synthetic.moment_block()])
        segment = (
            synthetic.message(body, msg_type=1)
            + synthetic.message(body, msg_type=31)
            + synthetic.message(body, msg_type=2)
        )
        stats = DecodeStats()
        rays = list(iter_rays(segment, stats))

        assert len(rays) == 1
        assert stats.messages == 3
        assert stats.radial_messages == 1
        assert stats.rays_accepted == 1

    def test_rejected_ray_does_not_stop_segment(self):
        bad = synthetic.ray_message(elevation=95.0)
        good = synthetic.ray_message(azimuth=10.0)
        stats = DecodeStats()
        rays = list(iter_rays(bad + good, stats))

        assert [r.azimuth for r in rays] == [10.0]
        assert stats.rays_rejected == 1

    def test_corrupt_length_between_rays(self):
        """A corrupt header between two rays does not desynchronize the second."""
        junk = b"\x00" * 30
        segment = synthetic.ray_message(azimuth=1.0) + junk + synthetic.ray_message(azimuth=2.0)
        rays = list(iter_rays(segment))
        assert [r.azimuth for r in rays] == [1.0, 2.0]
