"""
RTCP Application-Defined (APP) packet.

Wire layout::

     0                   1                   2                   3
     0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |V=2|P| subtype |   PT=APP=204  |             length            |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |                          sender SSRC                          |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |                          name (ASCII)                         |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |                           media SSRC                          |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |                   application-dependent data                ...
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+

Padding bytes, when present, each hold the padding count.
"""

import struct
from dataclasses import dataclass
from typing import List, Union

from .errors import (
    DataTooLargeError,
    InvalidLengthError,
    InvalidNameError,
    InvalidSSRCError,
    PacketTooShortError,
    WrongPaddingError,
)
from .header import HEADER_LENGTH, SSRC_MAX, Header, PacketType

FIXED_LENGTH = 16
NAME_LENGTH = 4
# Kept at 0xFFFF - 16 for compatibility even though the length field counts words.
MAX_DATA_LENGTH = 0xFFFF - FIXED_LENGTH


def _padding_for(data_length: int) -> int:
    return (4 - data_length % 4) % 4


def _encode_name(name: Union[str, bytes]) -> bytes:
    if isinstance(name, (bytes, bytearray, memoryview)):
        encoded = bytes(name)
    elif isinstance(name, str):
        try:
            encoded = name.encode("latin-1")
        except UnicodeEncodeError:
            raise InvalidNameError() from None
    else:
        raise InvalidNameError(
            f"rtcp: application defined name must be str or bytes, got {type(name).__name__}"
        )

    if len(encoded) != NAME_LENGTH:
        raise InvalidNameError()
    return encoded


@dataclass
class ApplicationDefined:
    """
    Parsed RTCP application-defined packet.

    ``name`` may be given as str or bytes; parse always returns str.

    ``data`` returned by :meth:`parse` is an owned copy, so the input buffer
    can be reused as soon as parse returns.
    """
    sub_type: int
    sender_ssrc: int
    media_ssrc: int
    name: Union[str, bytes]
    data: bytes = b""

    def padding_size(self) -> int:
        """Number of padding bytes needed to reach a 4-byte boundary (0-3)."""
        return _padding_for(len(self.data))

    def wire_size(self) -> int:
        """Size of the packet once serialized."""
        return FIXED_LENGTH + len(self.data) + self.padding_size()

    def destination_ssrc(self) -> List[int]:
        """SSRCs this packet refers to."""
        return [self.media_ssrc]

    def to_bytes(self) -> bytes:
        """
        Serialize into wire bytes, padded to a multiple of 4.

        Raises:
            DataTooLargeError: If data is longer than 65519 bytes
            InvalidNameError: If name is not exactly 4 single-byte characters
            InvalidSSRCError: If either SSRC does not fit in 32 bits
            InvalidHeaderError: If sub_type does not fit the 5-bit count field
        """
        data_length = len(self.data)
        if data_length > MAX_DATA_LENGTH:
            raise DataTooLargeError()

        name = _encode_name(self.name)

        for ssrc in (self.sender_ssrc, self.media_ssrc):
            if not 0 <= ssrc <= SSRC_MAX:
                raise InvalidSSRCError(f"rtcp: SSRC out of range: {ssrc}")

        padding_size = _padding_for(data_length)
        packet_size = FIXED_LENGTH + data_length + padding_size

        header = Header(
            padding=padding_size != 0,
            count=self.sub_type,
            packet_type=PacketType.APPLICATION_DEFINED,
            length=packet_size // 4 - 1,
        )
        raw = bytearray(packet_size)
        raw[0:HEADER_LENGTH] = header.to_bytes()
        struct.pack_into('!I', raw, 4, self.sender_ssrc)
        raw[8:12] = name
        struct.pack_into('!I', raw, 12, self.media_ssrc)
        raw[FIXED_LENGTH:FIXED_LENGTH + data_length] = self.data

        if padding_size:
            raw[FIXED_LENGTH + data_length:] = bytes([padding_size]) * padding_size

        return bytes(raw)

    @classmethod
    def parse(cls, data: bytes, strict_padding: bool = False) -> 'ApplicationDefined':
        """
        Parse raw bytes into an ApplicationDefined packet.

        Args:
            data: Exactly one APP packet (bytes, bytearray or memoryview)
            strict_padding: Also require a non-zero count and every padding
                byte to equal it. By default only the last byte is checked.

        Returns:
            Parsed ApplicationDefined instance

        Raises:
            PacketTooShortError: If shorter than the 16 fixed bytes
            InvalidLengthError: If the header length disagrees with len(data)
            WrongPaddingError: If the padding count is out of range
            BadVersionError: Propagated from header parsing
        """
        header = Header.parse(data)
        if len(data) < FIXED_LENGTH:
            raise PacketTooShortError()

        if header.packet_size != len(data):
            raise InvalidLengthError(
                f"rtcp: application defined packet length mismatch: "
                f"header declares {header.packet_size} bytes, got {len(data)}"
            )

        sender_ssrc, name, media_ssrc = struct.unpack_from('!I4sI', data, 4)

        padding_size = 0
        if header.padding:
            padding_size = data[-1]
            if padding_size > len(data) - FIXED_LENGTH:
                raise WrongPaddingError()
            if strict_padding:
                padding = bytes(data[len(data) - padding_size:])
                if padding_size == 0 or padding.count(padding_size) != padding_size:
                    raise WrongPaddingError()

        return cls(
            sub_type=header.count,
            sender_ssrc=sender_ssrc,
            media_ssrc=media_ssrc,
            name=name.decode("latin-1"),
            data=bytes(data[FIXED_LENGTH:len(data) - padding_size]),
        )

    def __str__(self) -> str:
        name = self.name
        if isinstance(name, (bytes, bytearray)):
            name = name.decode("latin-1")
        return (
            f"ApplicationDefined from {self.sender_ssrc:x}\n"
            f"Subtype: {self.sub_type}, Name: {name}, "
            f"MediaSSRC:{self.media_ssrc:x}, Data:0x{self.data.hex().upper()}"
        )
