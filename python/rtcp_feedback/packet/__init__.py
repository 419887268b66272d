"""RTCP packet codecs."""
from .errors import (
    RTCPError,
    BadVersionError,
    DataTooLargeError,
    InvalidHeaderError,
    InvalidLengthError,
    InvalidNameError,
    InvalidSSRCError,
    PacketTooShortError,
    WrongPaddingError,
)
from .header import Header, PacketType, HEADER_LENGTH
from .application_defined import ApplicationDefined, MAX_DATA_LENGTH
from .raw import RawPacket
from .compound import Packet, parse_packet, parse_packets, marshal_packets

__all__ = [
    "RTCPError",
    "BadVersionError",
    "DataTooLargeError",
    "InvalidHeaderError",
    "InvalidLengthError",
    "InvalidNameError",
    "InvalidSSRCError",
    "PacketTooShortError",
    "WrongPaddingError",
    "Header",
    "PacketType",
    "HEADER_LENGTH",
    "ApplicationDefined",
    "MAX_DATA_LENGTH",
    "RawPacket",
    "Packet",
    "parse_packet",
    "parse_packets",
    "marshal_packets",
]
