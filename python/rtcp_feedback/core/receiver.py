"""
Async RTCP Receiver using DatagramProtocol.

Decodes compound RTCP datagrams and hands application-defined packets to a
callback. Other packet types are counted and otherwise ignored.
"""

import asyncio
from typing import Callable, Optional, Set, Tuple

from ..config import ReceiverConfig, get_logger
from ..metrics import MetricsCollector, get_metrics
from ..packet import ApplicationDefined, PacketType, RTCPError, parse_packets

logger = get_logger("receiver")

Address = Tuple[str, int]
AppCallback = Callable[[ApplicationDefined, Address], None]


class RTCPProtocol(asyncio.DatagramProtocol):
    """Async UDP protocol that queues received datagrams."""

    def __init__(
        self,
        queue: asyncio.Queue,
        allowed_sources: Optional[Set[str]] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.queue = queue
        self.allowed_sources = allowed_sources
        self.metrics = metrics
        self.dropped_packets = 0
        self.received_packets = 0
        self.transport = None

    def connection_made(self, transport):
        self.transport = transport
        logger.debug("UDP transport connected")

    def datagram_received(self, data: bytes, addr: Address):
        self.received_packets += 1

        if self.allowed_sources and addr[0] not in self.allowed_sources:
            if self.dropped_packets % 100 == 0:
                logger.warning(f"Dropped datagram from unauthorized source: {addr[0]}")
            self.dropped_packets += 1
            if self.metrics:
                self.metrics.datagram_dropped("unauthorized")
            return

        try:
            self.queue.put_nowait((data, addr))
        except asyncio.QueueFull:
            self.dropped_packets += 1
            if self.metrics:
                self.metrics.datagram_dropped("backpressure")
            if self.dropped_packets % 100 == 0:
                logger.warning(
                    f"Dropped {self.dropped_packets} datagrams due to backpressure "
                    f"(received: {self.received_packets})"
                )

    def error_received(self, exc):
        logger.error(f"UDP error: {exc}")

    def connection_lost(self, exc):
        if exc:
            logger.error(f"UDP connection lost: {exc}")
        else:
            logger.debug("UDP connection closed")


class RTCPReceiver:
    """
    Non-blocking RTCP receiver.

    Features:
    - Async queue-based processing with backpressure dropping
    - Source IP whitelisting
    - Compound packet decoding with per-datagram error isolation
    """

    def __init__(
        self,
        port: int,
        on_app: AppCallback,
        bind_address: str = "127.0.0.1",
        queue_size: int = 1000,
        allowed_sources: Optional[Set[str]] = None,
        strict_padding: bool = False,
        metrics: Optional[MetricsCollector] = None,
    ):
        """
        Initialize RTCP receiver.

        Args:
            port: UDP port to listen on (0 picks a free port)
            on_app: Callback for each decoded APP packet (packet, source address)
            bind_address: Local address to bind
            queue_size: Datagrams buffered before dropping
            allowed_sources: Optional set of allowed source IPs. If None, all sources allowed.
            strict_padding: Validate every padding byte of APP packets
            metrics: Metrics collector (default: global collector)
        """
        self.port = port
        self.on_app = on_app
        self.bind_address = bind_address
        self.queue_size = queue_size
        self.allowed_sources = allowed_sources
        self.strict_padding = strict_padding
        self.metrics = metrics if metrics is not None else get_metrics()

        self._queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._protocol: Optional[RTCPProtocol] = None
        self._transport = None
        self._running = False
        self._process_task: Optional[asyncio.Task] = None

        self._app_count = 0
        self._other_count = 0
        self._error_count = 0

    @classmethod
    def from_config(
        cls,
        config: ReceiverConfig,
        on_app: AppCallback,
        metrics: Optional[MetricsCollector] = None,
    ) -> "RTCPReceiver":
        """Build a receiver from a ReceiverConfig, optionally sharing a collector."""
        return cls(
            port=config.port,
            on_app=on_app,
            bind_address=config.bind_address,
            queue_size=config.queue_maxsize,
            allowed_sources=config.source_whitelist,
            strict_padding=config.strict_padding,
            metrics=metrics,
        )

    async def start(self) -> None:
        """Start receiving RTCP datagrams (non-blocking)."""
        if self._running:
            return

        loop = asyncio.get_event_loop()

        self._transport, self._protocol = await loop.create_datagram_endpoint(
            lambda: RTCPProtocol(self._queue, self.allowed_sources, self.metrics),
            local_addr=(self.bind_address, self.port)
        )
        self.port = self._transport.get_extra_info("sockname")[1]

        self._running = True
        self._process_task = asyncio.create_task(self._process_loop())
        logger.info(f"RTCPReceiver listening on {self.bind_address}:{self.port}")
        if self.allowed_sources:
            logger.info(f"Source whitelist enabled: {self.allowed_sources}")

    async def _process_loop(self) -> None:
        """Decode queued datagrams."""
        while self._running:
            try:
                data, addr = await asyncio.wait_for(self._queue.get(), timeout=1.0)
            except asyncio.TimeoutError:
                continue
            except asyncio.CancelledError:
                break
            self.handle_datagram(data, addr)

    def handle_datagram(self, data: bytes, addr: Address) -> int:
        """
        Decode one datagram and dispatch its APP packets.

        Args:
            data: Raw datagram bytes
            addr: Source (ip, port)

        Returns:
            Number of APP packets dispatched
        """
        self.metrics.datagram_received(len(data))

        try:
            packets = parse_packets(data, strict_padding=self.strict_padding)
        except RTCPError as e:
            self._error_count += 1
            self.metrics.packet_rejected(type(e).__name__)
            if self._error_count <= 5 or self._error_count % 100 == 0:
                logger.warning(f"RTCP parse error from {addr[0]}:{addr[1]}: {e}")
            return 0

        dispatched = 0
        for packet in packets:
            if isinstance(packet, ApplicationDefined):
                self.metrics.packet_decoded(PacketType.APPLICATION_DEFINED.name)
                self._app_count += 1
                logger.debug(f"APP packet from {addr[0]}: {packet}")
                try:
                    self.on_app(packet, addr)
                    dispatched += 1
                except Exception as e:
                    logger.error(f"APP callback error: {e}")
            else:
                packet_type = packet.header.packet_type
                try:
                    type_name = PacketType(packet_type).name
                except ValueError:
                    type_name = str(packet_type)
                self.metrics.packet_decoded(type_name)
                self._other_count += 1

        return dispatched

    def stop(self) -> None:
        """Stop the receiver."""
        self._running = False
        if self._transport:
            self._transport.close()
        if self._process_task:
            self._process_task.cancel()
        logger.info(f"RTCPReceiver stopped ({self.bind_address}:{self.port})")

    async def wait_closed(self) -> None:
        """Wait for receiver to fully close."""
        if self._process_task:
            try:
                await self._process_task
            except asyncio.CancelledError:
                pass

    @property
    def stats(self) -> dict:
        """Get receiver statistics."""
        stats = {
            "port": self.port,
            "app_packets": self._app_count,
            "other_packets": self._other_count,
            "errors": self._error_count,
            "whitelist_enabled": self.allowed_sources is not None,
        }
        if self._protocol:
            stats.update(
                received=self._protocol.received_packets,
                dropped=self._protocol.dropped_packets,
                queue_size=self._queue.qsize(),
            )
        else:
            stats.update(received=0, dropped=0, queue_size=0)
        return stats

    def is_healthy(self) -> bool:
        """Check if receiver is healthy."""
        return self._running and self._transport is not None
