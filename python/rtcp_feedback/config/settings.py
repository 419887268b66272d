"""
Receiver configuration with environment variable support.

Environment Variables:
    RTCP_BIND_ADDRESS - Address the receiver binds to (default: 127.0.0.1)
    RTCP_PORT - RTCP UDP port (default: 5005)
    RTCP_QUEUE_MAXSIZE - Datagram queue size before dropping (default: 1000)
    RTCP_ALLOWED_SOURCES - Comma-separated source IP whitelist (default: all)
    RTCP_STRICT_PADDING - Validate every padding byte (true/false)
    RTCP_METRICS_ENABLED - Start the Prometheus exporter (true/false)
    RTCP_METRICS_PORT - Prometheus exporter port (default: 9090)
    RTCP_DEBUG - Enable debug logging (true/false)
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _split_sources(value: str) -> List[str]:
    """Split comma-separated source list and strip whitespace."""
    sources = []
    for raw in value.split(","):
        source = raw.strip()
        if source:
            sources.append(source)
    return sources


def _get_allowed_sources_from_env() -> List[str]:
    return _split_sources(os.getenv("RTCP_ALLOWED_SOURCES", ""))


@dataclass
class ReceiverConfig:
    """RTCP receiver configuration."""

    # UDP socket
    bind_address: str = field(
        default_factory=lambda: os.getenv("RTCP_BIND_ADDRESS", "127.0.0.1")
    )
    port: int = field(
        default_factory=lambda: int(os.getenv("RTCP_PORT", "5005"))
    )
    queue_maxsize: int = field(
        default_factory=lambda: int(os.getenv("RTCP_QUEUE_MAXSIZE", "1000"))
    )
    allowed_sources: List[str] = field(default_factory=_get_allowed_sources_from_env)

    # Codec
    strict_padding: bool = field(
        default_factory=lambda: _env_flag("RTCP_STRICT_PADDING")
    )

    # Metrics
    metrics_enabled: bool = field(
        default_factory=lambda: _env_flag("RTCP_METRICS_ENABLED")
    )
    metrics_port: int = field(
        default_factory=lambda: int(os.getenv("RTCP_METRICS_PORT", "9090"))
    )

    # Debug
    debug: bool = field(
        default_factory=lambda: _env_flag("RTCP_DEBUG")
    )

    def __post_init__(self):
        """Validate values after initialization."""
        if not 0 <= self.port <= 0xFFFF:
            raise ValueError(f"Invalid RTCP port: {self.port}")
        if self.queue_maxsize <= 0:
            raise ValueError(f"Queue size must be positive: {self.queue_maxsize}")

    @property
    def source_whitelist(self) -> Optional[set]:
        """Allowed sources as a set, or None when every source is accepted."""
        return set(self.allowed_sources) if self.allowed_sources else None


# Singleton config instance
_config: Optional[ReceiverConfig] = None


def get_config() -> ReceiverConfig:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = ReceiverConfig()
    return _config


def reset_config():
    """Reset the global config (useful for testing)."""
    global _config
    _config = None
