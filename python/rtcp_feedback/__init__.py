"""
RTCP Feedback - RTCP application-defined packet codec and receiver.

Provides:
- RTCP common header codec
- Application-defined (APP, PT=204) packet encoding/decoding
- Compound packet splitting with dispatch on packet type
- Async UDP receiver with Prometheus metrics

Usage:
    python -m rtcp_feedback decode <hex>
    python -m rtcp_feedback encode --subtype 5 --sender 0x1 --media 0x2 --name TEST
    python -m rtcp_feedback listen

Environment Variables:
    RTCP_PORT - RTCP UDP port (default: 5005)
    RTCP_LOG_LEVEL - Log level (DEBUG, INFO, WARNING, ERROR)
"""

__version__ = "1.0.0"

from .config import ReceiverConfig, get_config
from .packet import (
    ApplicationDefined,
    Header,
    PacketType,
    RawPacket,
    RTCPError,
    marshal_packets,
    parse_packets,
)

__all__ = [
    "ReceiverConfig",
    "get_config",
    "ApplicationDefined",
    "Header",
    "PacketType",
    "RawPacket",
    "RTCPError",
    "marshal_packets",
    "parse_packets",
]
