"""
Parser for raw HCI event dumps as printed by ``hcidump --raw``.

A dump line looks like::

    > 04 3E 2B 02 01 00 01 BF D7 AD 8A 1E FE 1F 02 01 06 1B FF 99 04 ... B1

The leading ``>`` marks an event received from the controller. The bytes that
follow are decoded positionally into an HCIFrame: the fixed event header, the
advertiser address (sent least significant byte first), one or more LE
advertising reports built from length-prefixed AD structures, and the RSSI in
the final byte.
"""

import logging
import struct
from dataclasses import dataclass
from typing import List, Optional, Tuple


EVENT_MARKER = "> "

HEADER_LENGTH = 7   # packet type .. peer address type
MAC_LENGTH = 6
MIN_FRAME_LENGTH = HEADER_LENGTH + MAC_LENGTH + 1  # + RSSI

# Byte offsets of the header fields, relative to the first byte after the marker
PACKET_TYPE = 0
EVENT_CODE = 1
PACKET_LENGTH = 2
SUB_EVENT = 3
NUMBER_OF_REPORTS = 4
EVENT_TYPE = 5
PEER_ADDRESS_TYPE = 6

# hcidump prints the event header (packet type, event code, length) before the
# parameters counted by the length byte
EVENT_HEADER_LENGTH = 3


class HCIParseError(ValueError):
    """Raised internally when a dump line cannot be framed."""
    pass


@dataclass(frozen=True)
class AdvertisementData:
    """One AD structure: declared length, AD type and payload (length - 1 bytes)."""
    length: int
    type: int
    data: bytes


@dataclass(frozen=True)
class Report:
    """One LE advertising report."""
    length: int
    advertisements: Tuple[AdvertisementData, ...]


@dataclass(frozen=True)
class HCIFrame:
    """A fully decoded HCI event line."""
    packet_type: int
    event_code: int
    packet_length: int
    sub_event: int
    number_of_reports: int
    event_type: int
    peer_address_type: int
    mac: str
    rssi: int
    reports: Tuple[Report, ...]

    def find_advertisement_data(self, ad_type: int) -> Optional[AdvertisementData]:
        """Return the first AD structure of the given type in the first report."""
        if not self.reports:
            return None
        for advertisement in self.reports[0].advertisements:
            if advertisement.type == ad_type:
                return advertisement
        return None


def is_event_line(line: Optional[str]) -> bool:
    return line is not None and line.startswith(EVENT_MARKER)


def tokens_to_bytes(tokens: List[str]) -> bytes:
    """
    Convert two-character hex tokens to bytes.

    Raises:
        HCIParseError: If any token is not exactly one hex byte
    """
    for token in tokens:
        if len(token) != 2:
            raise HCIParseError(f"Invalid byte token '{token}'")
    try:
        return bytes.fromhex("".join(tokens))
    except ValueError as e:
        raise HCIParseError(f"Invalid hex data: {e}")


def has_mac_address(line: Optional[str]) -> bool:
    """Whether the line is an event line long enough to carry the advertiser address."""
    return is_event_line(line) and len(line[len(EVENT_MARKER):].split()) >= HEADER_LENGTH + MAC_LENGTH


def get_mac_from_line(line: Optional[str]) -> Optional[str]:
    """
    Peek the advertiser MAC from a dump line without decoding the rest.

    Returns:
        The MAC as 12 upper-case hex characters in canonical order, or None
    """
    if not has_mac_address(line):
        return None
    tokens = line[len(EVENT_MARKER):].split()[HEADER_LENGTH:HEADER_LENGTH + MAC_LENGTH]
    try:
        return tokens_to_bytes(tokens)[::-1].hex().upper()
    except HCIParseError:
        return None


class HCIParser:
    """
    Decodes single ``hcidump --raw`` event lines into HCIFrame instances.

    The parser is stateless; any line that is not a complete, well framed
    event decodes to None. Nothing is raised for malformed input.
    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger('ruuvi.hci')

    def read_line(self, line: Optional[str]) -> Optional[HCIFrame]:
        """
        Decode one dump line.

        Args:
            line: Raw text line, optionally ending with a newline

        Returns:
            Optional[HCIFrame]: The decoded frame, or None if the line is not a
            well formed event
        """
        if not is_event_line(line):
            return None

        try:
            raw = tokens_to_bytes(line[len(EVENT_MARKER):].split())
            if len(raw) < MIN_FRAME_LENGTH:
                return None
            return self._decode(raw)
        except HCIParseError as e:
            self.logger.debug(f"Rejected HCI line: {e}")
            return None

    def _decode(self, raw: bytes) -> HCIFrame:
        mac = raw[HEADER_LENGTH:HEADER_LENGTH + MAC_LENGTH][::-1].hex().upper()
        rssi = struct.unpack('b', raw[-1:])[0]

        # Reports never extend into the trailing RSSI byte
        body = raw[HEADER_LENGTH + MAC_LENGTH:-1]
        reports = []
        offset = 0
        for _ in range(raw[NUMBER_OF_REPORTS]):
            report, offset = self._read_report(body, offset)
            reports.append(report)

        return HCIFrame(
            packet_type=raw[PACKET_TYPE],
            event_code=raw[EVENT_CODE],
            packet_length=raw[PACKET_LENGTH],
            sub_event=raw[SUB_EVENT],
            number_of_reports=raw[NUMBER_OF_REPORTS],
            event_type=raw[EVENT_TYPE],
            peer_address_type=raw[PEER_ADDRESS_TYPE],
            mac=mac,
            rssi=rssi,
            reports=tuple(reports)
        )

    def _read_report(self, body: bytes, offset: int) -> Tuple[Report, int]:
        """Read one length-prefixed report starting at offset; returns it and the next offset."""
        if offset >= len(body):
            raise HCIParseError("Missing report length")

        length = body[offset]
        start = offset + 1
        end = start + length
        if end > len(body):
            raise HCIParseError(f"Report length {length} exceeds remaining {len(body) - start} bytes")

        advertisements = []
        position = start
        while position < end:
            ad_length = body[position]
            if ad_length == 0:
                # Zero length ends the significant part; the rest is padding
                break
            ad_end = position + 1 + ad_length
            if ad_end > end:
                raise HCIParseError(f"AD structure length {ad_length} overruns report")
            advertisements.append(AdvertisementData(
                length=ad_length,
                type=body[position + 1],
                data=bytes(body[position + 2:ad_end])
            ))
            position = ad_end

        return Report(length=length, advertisements=tuple(advertisements)), end


class HCIDumpAssembler:
    """
    Joins packets that ``hcidump --raw`` wraps over several lines.

    The first line of a packet starts with the event marker, continuation
    lines start with whitespace. A packet is emitted as one single-line string
    once the number of bytes announced by its length byte has arrived.
    Incomplete packets interrupted by another line are dropped, and so is
    everything that is not part of an event (banner text, ``<`` command lines).
    """

    def __init__(self, logger=None):
        self.logger = logger or logging.getLogger('ruuvi.hci')
        self._tokens: Optional[List[str]] = None

    def feed(self, line: str) -> List[str]:
        """
        Feed one raw line.

        Returns:
            List[str]: Zero or more completed single-line packets
        """
        text = line.rstrip("\r\n")
        completed = []

        if is_event_line(text):
            self._drop_pending()
            self._tokens = text[len(EVENT_MARKER):].split()
        elif self._tokens is not None and text[:1].isspace():
            self._tokens.extend(text.split())
        else:
            self._drop_pending()
            return completed

        if self._is_complete():
            completed.append(self._emit())
        return completed

    def flush(self) -> List[str]:
        """Return a pending packet at end of input if it is complete."""
        if self._tokens is not None and self._is_complete():
            return [self._emit()]
        self._drop_pending()
        return []

    def _expected_length(self) -> Optional[int]:
        if len(self._tokens) <= PACKET_LENGTH:
            return None
        try:
            return EVENT_HEADER_LENGTH + int(self._tokens[PACKET_LENGTH], 16)
        except ValueError:
            return None

    def _is_complete(self) -> bool:
        expected = self._expected_length()
        return expected is not None and len(self._tokens) >= expected

    def _emit(self) -> str:
        packet = EVENT_MARKER + " ".join(self._tokens)
        self._tokens = None
        return packet

    def _drop_pending(self):
        if self._tokens is not None:
            self.logger.debug(f"Dropping incomplete packet of {len(self._tokens)} bytes")
        self._tokens = None
