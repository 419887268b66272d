"""Core receiver components."""
from .receiver import RTCPReceiver, RTCPProtocol

__all__ = [
    "RTCPReceiver",
    "RTCPProtocol",
]
