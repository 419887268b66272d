"""Tests for the async RTCP receiver."""

import os
import sys
import asyncio
import socket
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../../python'))

from rtcp_feedback.__main__ import listen_command
from rtcp_feedback.config import ReceiverConfig, reset_config
from rtcp_feedback.metrics import MetricsCollector, get_metrics
from rtcp_feedback.core import RTCPProtocol, RTCPReceiver
from rtcp_feedback.packet import ApplicationDefined

ADDR = ("127.0.0.1", 40000)


def make_receiver(on_app=None, **kwargs) -> RTCPReceiver:
    return RTCPReceiver(
        port=0,
        on_app=on_app or MagicMock(),
        metrics=MagicMock(),
        **kwargs
    )


class TestHandleDatagram:
    """Test datagram decoding and dispatch."""

    def test_app_packet_dispatched(self, sample_app_bytes, sample_app_packet):
        """APP packets reach the callback with the source address."""
        on_app = MagicMock()
        receiver = make_receiver(on_app)

        assert receiver.handle_datagram(sample_app_bytes, ADDR) == 1

        on_app.assert_called_once_with(sample_app_packet, ADDR)
        receiver.metrics.datagram_received.assert_called_once_with(20)
        receiver.metrics.packet_decoded.assert_called_once_with("APPLICATION_DEFINED")

    def test_compound_counts_other_types(self, sample_rr_bytes, sample_app_bytes):
        """Non-APP packets are counted, not dispatched."""
        on_app = MagicMock()
        receiver = make_receiver(on_app)

        receiver.handle_datagram(sample_rr_bytes + sample_app_bytes, ADDR)

        assert on_app.call_count == 1
        assert receiver.stats["app_packets"] == 1
        assert receiver.stats["other_packets"] == 1
        receiver.metrics.packet_decoded.assert_any_call("RECEIVER_REPORT")

    def test_malformed_datagram_rejected(self):
        """Codec errors are counted and the datagram is skipped."""
        on_app = MagicMock()
        receiver = make_receiver(on_app)

        assert receiver.handle_datagram(b'\x80\xcc\x00\x01' + b'\x00' * 6, ADDR) == 0

        on_app.assert_not_called()
        assert receiver.stats["errors"] == 1
        receiver.metrics.packet_rejected.assert_called_once_with("PacketTooShortError")

    def test_strict_padding(self):
        """Strict padding is applied when configured."""
        raw = bytes.fromhex('a5cc0004' '01020304' '54455354' '05060708' 'aabb0002')

        assert make_receiver().handle_datagram(raw, ADDR) == 1
        assert make_receiver(strict_padding=True).handle_datagram(raw, ADDR) == 0

    def test_callback_error_does_not_propagate(self, sample_app_bytes):
        """A failing callback is logged and the receiver keeps going."""
        receiver = make_receiver(MagicMock(side_effect=RuntimeError("boom")))

        assert receiver.handle_datagram(sample_app_bytes, ADDR) == 0
        assert receiver.stats["app_packets"] == 1


class TestRTCPProtocol:
    """Test datagram queuing."""

    def test_queues_datagram(self):
        """Accepted datagrams are queued with their source."""
        queue = asyncio.Queue(maxsize=10)
        protocol = RTCPProtocol(queue)

        protocol.datagram_received(b'data', ADDR)

        assert queue.get_nowait() == (b'data', ADDR)
        assert protocol.received_packets == 1

    def test_backpressure_drops(self):
        """Datagrams beyond the queue size are dropped."""
        metrics = MagicMock()
        protocol = RTCPProtocol(asyncio.Queue(maxsize=1), metrics=metrics)

        protocol.datagram_received(b'one', ADDR)
        protocol.datagram_received(b'two', ADDR)

        assert protocol.dropped_packets == 1
        metrics.datagram_dropped.assert_called_once_with("backpressure")

    def test_unauthorized_source(self):
        """Sources outside the whitelist are dropped."""
        queue = asyncio.Queue(maxsize=10)
        metrics = MagicMock()
        protocol = RTCPProtocol(queue, allowed_sources={"10.0.0.1"}, metrics=metrics)

        protocol.datagram_received(b'data', ADDR)

        assert queue.empty()
        assert protocol.dropped_packets == 1
        metrics.datagram_dropped.assert_called_once_with("unauthorized")


class TestRTCPReceiver:
    """Test receiver lifecycle."""

    def test_from_config(self):
        """Receiver settings come from the config."""
        config = ReceiverConfig(
            bind_address="127.0.0.1",
            port=6000,
            queue_maxsize=5,
            allowed_sources=["10.0.0.1"],
            strict_padding=True,
        )

        receiver = RTCPReceiver.from_config(config, MagicMock())

        assert receiver.port == 6000
        assert receiver.queue_size == 5
        assert receiver.allowed_sources == {"10.0.0.1"}
        assert receiver.strict_padding is True

    def test_from_config_shares_collector(self):
        """A collector passed to from_config is the one the receiver records to."""
        metrics = MetricsCollector(port=9999)

        receiver = RTCPReceiver.from_config(ReceiverConfig(port=0), MagicMock(), metrics=metrics)

        assert receiver.metrics is metrics

    def test_from_config_defaults_to_global_collector(self):
        """Without a collector the global one is used."""
        receiver = RTCPReceiver.from_config(ReceiverConfig(port=0), MagicMock())

        assert receiver.metrics is get_metrics()

    @pytest.mark.asyncio
    async def test_listen_passes_configured_collector(self):
        """The listen command hands its collector, on the configured port, to the receiver."""
        reset_config()
        os.environ['RTCP_METRICS_PORT'] = '9876'
        fake = MagicMock()
        fake.start = AsyncMock(side_effect=OSError("address in use"))
        fake.wait_closed = AsyncMock()
        try:
            with patch('rtcp_feedback.__main__.RTCPReceiver') as receiver_cls:
                receiver_cls.from_config.return_value = fake
                code = await listen_command(port=0)
        finally:
            del os.environ['RTCP_METRICS_PORT']
            reset_config()

        assert code == 1
        metrics = receiver_cls.from_config.call_args.kwargs['metrics']
        assert isinstance(metrics, MetricsCollector)
        assert metrics.port == 9876
        fake.stop.assert_called_once()

    def test_stats_before_start(self):
        """Stats are available before the socket is bound."""
        stats = make_receiver().stats

        assert stats["received"] == 0
        assert stats["dropped"] == 0

    @pytest.mark.asyncio
    async def test_receives_over_udp(self, sample_app_bytes, sample_app_packet):
        """An APP packet sent over UDP reaches the callback."""
        received = asyncio.Event()
        packets = []

        def on_app(packet: ApplicationDefined, addr):
            packets.append(packet)
            received.set()

        receiver = make_receiver(on_app)
        await receiver.start()
        try:
            assert receiver.is_healthy()
            assert receiver.port != 0

            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
            try:
                sock.sendto(sample_app_bytes, ("127.0.0.1", receiver.port))
            finally:
                sock.close()

            await asyncio.wait_for(received.wait(), timeout=5.0)
        finally:
            receiver.stop()
            await receiver.wait_closed()

        assert packets == [sample_app_packet]
        assert receiver.stats["received"] == 1
        assert not receiver.is_healthy()


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
