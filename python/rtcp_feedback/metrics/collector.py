"""
Prometheus Metrics Collector for the RTCP receiver.

Provides metrics for monitoring:
- Datagrams and bytes received
- Packets decoded per RTCP packet type
- Packets rejected per codec error
- Datagrams dropped before decoding
"""

from typing import Optional

from prometheus_client import Counter, start_http_server

from ..config import get_logger

logger = get_logger("metrics")


DATAGRAMS_TOTAL = Counter(
    'rtcp_datagrams_total',
    'Total RTCP datagrams received'
)
BYTES_TOTAL = Counter(
    'rtcp_bytes_total',
    'Total bytes received via UDP'
)
PACKETS_DECODED_TOTAL = Counter(
    'rtcp_packets_decoded_total',
    'RTCP packets decoded',
    ['packet_type']  # 'APPLICATION_DEFINED', 'SENDER_REPORT', ...
)
PACKETS_REJECTED_TOTAL = Counter(
    'rtcp_packets_rejected_total',
    'RTCP datagrams rejected by the codec',
    ['reason']  # error class name
)
DATAGRAMS_DROPPED_TOTAL = Counter(
    'rtcp_datagrams_dropped_total',
    'Datagrams dropped before decoding',
    ['reason']  # 'backpressure', 'unauthorized'
)


class MetricsCollector:
    """
    Centralized metrics collector for the RTCP receiver.

    Provides convenient methods for recording metrics
    and starts the Prometheus HTTP server.
    """

    def __init__(self, port: int = 9090, host: str = "0.0.0.0"):
        """
        Initialize metrics collector.

        Args:
            port: Port for Prometheus HTTP server
            host: Host to bind to
        """
        self.port = port
        self.host = host
        self._started = False

    def start(self) -> bool:
        """
        Start the Prometheus HTTP server.

        Returns:
            True if started (or already running), False on bind failure
        """
        if self._started:
            return True

        try:
            start_http_server(self.port, addr=self.host)
        except OSError as e:
            logger.error(f"Failed to start metrics server: {e}")
            return False

        self._started = True
        logger.info(f"Prometheus metrics server started on {self.host}:{self.port}")
        return True

    def datagram_received(self, bytes_count: int) -> None:
        """Record a datagram received."""
        DATAGRAMS_TOTAL.inc()
        BYTES_TOTAL.inc(bytes_count)

    def packet_decoded(self, packet_type: str) -> None:
        """Record a decoded packet."""
        PACKETS_DECODED_TOTAL.labels(packet_type=packet_type).inc()

    def packet_rejected(self, reason: str) -> None:
        """Record a datagram the codec rejected."""
        PACKETS_REJECTED_TOTAL.labels(reason=reason).inc()

    def datagram_dropped(self, reason: str) -> None:
        """Record a datagram dropped before decoding."""
        DATAGRAMS_DROPPED_TOTAL.labels(reason=reason).inc()

    @property
    def is_started(self) -> bool:
        return self._started


# Global instance
_metrics: Optional[MetricsCollector] = None


def get_metrics() -> MetricsCollector:
    """Get or create the global metrics collector."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics
