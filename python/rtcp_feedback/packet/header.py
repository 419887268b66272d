"""
RTCP common header codec.

Every RTCP packet starts with the same 4 bytes::

     0                   1                   2                   3
     0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |V=2|P|  count  |      PT       |             length            |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+

length is the packet size in 32-bit words minus one.
"""

import struct
from dataclasses import dataclass
from enum import IntEnum

from .errors import BadVersionError, InvalidHeaderError, PacketTooShortError

RTP_VERSION = 2
HEADER_LENGTH = 4
COUNT_MAX = (1 << 5) - 1
SSRC_LENGTH = 4
SSRC_MAX = 0xFFFFFFFF

_VERSION_SHIFT = 6
_VERSION_MASK = 0x3
_PADDING_SHIFT = 5
_PADDING_MASK = 0x1
_COUNT_MASK = 0x1F


class PacketType(IntEnum):
    """RTCP packet types (RFC 3550, RFC 4585, RFC 3611)."""
    SENDER_REPORT = 200
    RECEIVER_REPORT = 201
    SOURCE_DESCRIPTION = 202
    GOODBYE = 203
    APPLICATION_DEFINED = 204
    TRANSPORT_SPECIFIC_FEEDBACK = 205
    PAYLOAD_SPECIFIC_FEEDBACK = 206
    EXTENDED_REPORT = 207


@dataclass
class Header:
    """Common RTCP header."""
    padding: bool
    count: int
    packet_type: int
    length: int

    def to_bytes(self) -> bytes:
        """
        Serialize the header into 4 bytes.

        Raises:
            InvalidHeaderError: If count, type or length do not fit their fields
        """
        if not 0 <= self.count <= COUNT_MAX:
            raise InvalidHeaderError(f"rtcp: invalid header: count {self.count} > {COUNT_MAX}")
        if not 0 <= self.packet_type <= 0xFF:
            raise InvalidHeaderError(f"rtcp: invalid header: packet type {self.packet_type}")
        if not 0 <= self.length <= 0xFFFF:
            raise InvalidHeaderError(f"rtcp: invalid header: length {self.length}")

        first_byte = (RTP_VERSION << _VERSION_SHIFT) | self.count
        if self.padding:
            first_byte |= 1 << _PADDING_SHIFT

        return struct.pack('!BBH', first_byte, int(self.packet_type), self.length)

    @classmethod
    def parse(cls, data: bytes) -> 'Header':
        """
        Parse the first 4 bytes of a packet.

        Args:
            data: Raw packet bytes (only the first 4 are read)

        Returns:
            Parsed Header instance

        Raises:
            PacketTooShortError: If fewer than 4 bytes are given
            BadVersionError: If the version bits are not 2
        """
        if len(data) < HEADER_LENGTH:
            raise PacketTooShortError()

        first_byte, packet_type, length = struct.unpack('!BBH', bytes(data[:HEADER_LENGTH]))

        version = (first_byte >> _VERSION_SHIFT) & _VERSION_MASK
        if version != RTP_VERSION:
            raise BadVersionError(f"rtcp: invalid packet version: {version} (expected 2)")

        return cls(
            padding=bool((first_byte >> _PADDING_SHIFT) & _PADDING_MASK),
            count=first_byte & _COUNT_MASK,
            packet_type=packet_type,
            length=length,
        )

    @property
    def packet_size(self) -> int:
        """Total packet size in bytes declared by the length field."""
        return (self.length + 1) * 4
