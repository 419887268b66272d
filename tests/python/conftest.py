"""Pytest configuration and fixtures."""

import os
import sys
import pytest

# Add python directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../../python'))


def pytest_configure(config):
    """Configure pytest."""
    os.environ['RTCP_LOG_LEVEL'] = 'WARNING'
    # Register asyncio marker
    config.addinivalue_line("markers", "asyncio: mark test as async")


@pytest.fixture
def sample_app_packet():
    """APP packet with 3 data bytes (1 padding byte on the wire)."""
    from rtcp_feedback.packet import ApplicationDefined
    return ApplicationDefined(
        sub_type=5,
        sender_ssrc=0x01020304,
        media_ssrc=0x05060708,
        name="TEST",
        data=b'\x01\x02\x03',
    )


@pytest.fixture
def sample_app_bytes():
    """Wire bytes of sample_app_packet."""
    return bytes.fromhex('a5cc0004' '01020304' '54455354' '05060708' '01020301')


@pytest.fixture
def sample_rr_bytes():
    """Minimal receiver report: header + reporter SSRC, no report blocks."""
    import struct
    return struct.pack('!BBHI', 0x80, 201, 1, 0x0A0B0C0D)
