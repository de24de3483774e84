"""
Unit tests for joining wrapped hcidump packets.
"""

from ruuvi_collector.hci.parser import HCIDumpAssembler, HCIParser
from tests.fixtures.hcidump_lines import HCIDumpFixtures
from tests.utils.test_helpers import format5_line, wrap_dump_line


class TestHCIDumpAssembler:
    """Test suite for HCIDumpAssembler."""

    def setup_method(self):
        """Set up test fixtures."""
        self.assembler = HCIDumpAssembler()

    def feed_all(self, lines):
        packets = []
        for line in lines:
            packets.extend(self.assembler.feed(line))
        packets.extend(self.assembler.flush())
        return packets

    def test_single_line_packet(self):
        """Test that a complete single line is emitted immediately."""
        packets = self.assembler.feed(HCIDumpFixtures.REFERENCE_LINE + "\n")

        assert packets == [HCIDumpFixtures.REFERENCE_LINE]

    def test_wrapped_packet_is_joined(self):
        """Test that continuation lines are appended to the pending packet."""
        wrapped = wrap_dump_line(HCIDumpFixtures.REFERENCE_LINE)
        assert len(wrapped) == 3

        assert self.assembler.feed(wrapped[0]) == []
        assert self.assembler.feed(wrapped[1]) == []
        assert self.assembler.feed(wrapped[2]) == [HCIDumpFixtures.REFERENCE_LINE]

    def test_joined_packet_decodes(self):
        """Test that a joined packet decodes like the unwrapped line."""
        packets = self.feed_all(wrap_dump_line(HCIDumpFixtures.REFERENCE_LINE))
        parser = HCIParser()

        assert len(packets) == 1
        assert parser.read_line(packets[0]) == parser.read_line(HCIDumpFixtures.REFERENCE_LINE)

    def test_banner_and_commands_dropped(self):
        """Test that non-event lines never produce packets."""
        lines = HCIDumpFixtures.BANNER + [HCIDumpFixtures.COMMAND_LINE] + [HCIDumpFixtures.REFERENCE_LINE]

        assert self.feed_all(lines) == [HCIDumpFixtures.REFERENCE_LINE]

    def test_interrupted_packet_dropped(self):
        """Test that an incomplete packet is dropped when a new event starts."""
        first = wrap_dump_line(format5_line(mac="111111111111"))
        second = format5_line(mac="222222222222")

        packets = self.feed_all([first[0], second])

        assert packets == [second]

    def test_continuation_without_packet_ignored(self):
        """Test that stray continuation lines are ignored."""
        assert self.feed_all(["  01 02 03\n", "  04 05\n"]) == []

    def test_flush_drops_incomplete_packet(self):
        """Test that an unfinished packet at end of input is discarded."""
        wrapped = wrap_dump_line(HCIDumpFixtures.REFERENCE_LINE)

        assert self.feed_all(wrapped[:2]) == []

    def test_multiple_packets_in_sequence(self):
        """Test a stream of several wrapped packets."""
        lines = []
        expected = []
        for index in range(3):
            line = format5_line(mac=f"AABBCCDDEE{index:02X}")
            expected.append(line)
            lines.extend(wrap_dump_line(line))

        assert self.feed_all(lines) == expected
