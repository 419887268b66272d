"""Undecoded RTCP packet of any type."""

from dataclasses import dataclass
from typing import List

from .errors import InvalidLengthError
from .header import Header


@dataclass
class RawPacket:
    """RTCP packet kept as bytes; only its header is validated."""
    data: bytes

    @property
    def header(self) -> Header:
        return Header.parse(self.data)

    def wire_size(self) -> int:
        return len(self.data)

    def destination_ssrc(self) -> List[int]:
        return []

    def to_bytes(self) -> bytes:
        return bytes(self.data)

    @classmethod
    def parse(cls, data: bytes, strict_padding: bool = False) -> 'RawPacket':
        """
        Wrap raw bytes after validating the common header.

        strict_padding is accepted for signature parity and ignored.

        Raises:
            PacketTooShortError: If shorter than the 4-byte header
            BadVersionError: If the version bits are not 2
            InvalidLengthError: If the header length disagrees with len(data)
        """
        header = Header.parse(data)
        if header.packet_size != len(data):
            raise InvalidLengthError(
                f"rtcp: packet length mismatch: "
                f"header declares {header.packet_size} bytes, got {len(data)}"
            )
        return cls(data=bytes(data))

    def __str__(self) -> str:
        return f"RawPacket: {self.data.hex()}"
