"""Tests for the Prometheus metrics collector."""

import os
import sys
import pytest
from unittest.mock import patch

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../../python'))

from prometheus_client import REGISTRY

from rtcp_feedback.metrics import MetricsCollector, get_metrics


def sample(name: str, labels: dict = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestMetricsCollector:
    """Test MetricsCollector recording."""

    def test_datagram_received(self):
        """Datagram and byte counters increase."""
        before_count = sample('rtcp_datagrams_total')
        before_bytes = sample('rtcp_bytes_total')

        MetricsCollector().datagram_received(20)

        assert sample('rtcp_datagrams_total') == before_count + 1
        assert sample('rtcp_bytes_total') == before_bytes + 20

    def test_packet_decoded_by_type(self):
        """Decoded packets are labelled by type."""
        labels = {'packet_type': 'APPLICATION_DEFINED'}
        before = sample('rtcp_packets_decoded_total', labels)

        MetricsCollector().packet_decoded('APPLICATION_DEFINED')

        assert sample('rtcp_packets_decoded_total', labels) == before + 1

    def test_packet_rejected_by_reason(self):
        """Rejections are labelled by error class."""
        labels = {'reason': 'WrongPaddingError'}
        before = sample('rtcp_packets_rejected_total', labels)

        MetricsCollector().packet_rejected('WrongPaddingError')

        assert sample('rtcp_packets_rejected_total', labels) == before + 1

    def test_datagram_dropped(self):
        """Drops are labelled by reason."""
        labels = {'reason': 'backpressure'}
        before = sample('rtcp_datagrams_dropped_total', labels)

        MetricsCollector().datagram_dropped('backpressure')

        assert sample('rtcp_datagrams_dropped_total', labels) == before + 1

    def test_start_once(self):
        """The HTTP exporter is started only once."""
        collector = MetricsCollector(port=9999)

        with patch('rtcp_feedback.metrics.collector.start_http_server') as start:
            assert collector.start() is True
            assert collector.start() is True

        start.assert_called_once_with(9999, addr="0.0.0.0")
        assert collector.is_started

    def test_start_failure(self):
        """Bind errors are reported, not raised."""
        collector = MetricsCollector(port=9999)

        with patch('rtcp_feedback.metrics.collector.start_http_server', side_effect=OSError("in use")):
            assert collector.start() is False

        assert not collector.is_started

    def test_singleton(self):
        """get_metrics returns one shared collector."""
        assert get_metrics() is get_metrics()


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
