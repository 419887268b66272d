"""
Compound RTCP packet reader and writer.

A datagram carries one or more RTCP packets back to back. Each packet is
dispatched on its header's packet type to one variant of :data:`Packet`.
"""

from typing import Dict, Iterable, List, Type, Union

from .application_defined import ApplicationDefined
from .errors import InvalidHeaderError, PacketTooShortError
from .header import Header, PacketType
from .raw import RawPacket

Packet = Union[ApplicationDefined, RawPacket]

_DECODERS: Dict[int, Type[ApplicationDefined]] = {
    PacketType.APPLICATION_DEFINED: ApplicationDefined,
}


def parse_packet(data: bytes, strict_padding: bool = False) -> Packet:
    """Decode exactly one packet, dispatching on its header type."""
    header = Header.parse(data)
    decoder = _DECODERS.get(header.packet_type, RawPacket)
    return decoder.parse(data, strict_padding=strict_padding)


def parse_packets(data: bytes, strict_padding: bool = False) -> List[Packet]:
    """
    Split a datagram into its RTCP packets and decode each one.

    Args:
        data: Raw datagram bytes
        strict_padding: Passed to the APP decoder

    Returns:
        Packets in wire order

    Raises:
        InvalidHeaderError: If data is empty
        PacketTooShortError: If a header declares more bytes than remain
        RTCPError: Any error raised by a packet decoder
    """
    view = memoryview(data)
    packets: List[Packet] = []

    while len(view) != 0:
        header = Header.parse(view)
        packet_size = header.packet_size
        if packet_size > len(view):
            raise PacketTooShortError(
                f"rtcp: packet too short: header declares {packet_size} bytes, "
                f"{len(view)} remain"
            )

        packets.append(parse_packet(view[:packet_size], strict_padding=strict_padding))
        view = view[packet_size:]

    if not packets:
        raise InvalidHeaderError("rtcp: invalid header: empty packet")

    return packets


def marshal_packets(packets: Iterable[Packet]) -> bytes:
    """Serialize packets back to back into one compound datagram."""
    return b"".join(packet.to_bytes() for packet in packets)
