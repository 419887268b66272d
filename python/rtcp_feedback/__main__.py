"""
RTCP feedback entry point.

Usage:
    python -m rtcp_feedback decode a5cc0004 01020304 54455354 05060708 01020301
    python -m rtcp_feedback encode --subtype 5 --sender 0x01020304 \\
        --media 0x05060708 --name TEST --data 010203
    python -m rtcp_feedback listen [--port 5005]

Environment Variables:
    RTCP_PORT - RTCP UDP port (default: 5005)
    RTCP_BIND_ADDRESS - Address to bind (default: 127.0.0.1)
    RTCP_STRICT_PADDING - Validate every padding byte (true/false)
    RTCP_METRICS_ENABLED - Start the Prometheus exporter (true/false)
    RTCP_LOG_LEVEL - Log level (DEBUG, INFO, WARNING, ERROR)
"""

import argparse
import asyncio
import signal
import sys
from typing import List, Optional

from .config import get_config, setup_logging
from .core import RTCPReceiver
from .metrics import MetricsCollector
from .packet import ApplicationDefined, RTCPError, parse_packets

logger = setup_logging()


def _parse_hex(value: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid hex string: {value!r}") from None


def _parse_int(value: str) -> int:
    try:
        return int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rtcp_feedback",
        description="RTCP application-defined packet tools",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    decode = commands.add_parser("decode", help="Decode a hex RTCP datagram")
    decode.add_argument("packet", nargs="+", help="Hex bytes (spaces allowed)")
    decode.add_argument(
        "--strict-padding",
        action="store_true",
        help="Require every padding byte to equal the padding count",
    )

    encode = commands.add_parser("encode", help="Encode an APP packet as hex")
    encode.add_argument("--subtype", type=_parse_int, default=0)
    encode.add_argument("--sender", type=_parse_int, required=True, help="Sender SSRC")
    encode.add_argument("--media", type=_parse_int, required=True, help="Media SSRC")
    encode.add_argument("--name", required=True, help="4-character application name")
    encode.add_argument("--data", type=_parse_hex, default=b"", help="Payload as hex")

    listen = commands.add_parser("listen", help="Receive RTCP datagrams and log APP packets")
    listen.add_argument("--port", type=int, default=None, help="UDP port (default: RTCP_PORT)")

    return parser


def decode_command(packet_hex: str, strict_padding: bool = False) -> int:
    try:
        packets = parse_packets(bytes.fromhex(packet_hex), strict_padding=strict_padding)
    except ValueError as e:
        logger.error(f"Decode failed: {e}")
        return 1

    for packet in packets:
        print(packet)
    return 0


def encode_command(args: argparse.Namespace) -> int:
    packet = ApplicationDefined(
        sub_type=args.subtype,
        sender_ssrc=args.sender,
        media_ssrc=args.media,
        name=args.name,
        data=args.data,
    )
    try:
        raw = packet.to_bytes()
    except RTCPError as e:
        logger.error(f"Encode failed: {e}")
        return 1

    print(raw.hex())
    return 0


async def listen_command(port: Optional[int] = None) -> int:
    """Run the receiver until SIGINT/SIGTERM."""
    config = get_config()
    if port is not None:
        config.port = port

    if config.debug:
        setup_logging(debug=True)

    metrics = MetricsCollector(port=config.metrics_port)
    if config.metrics_enabled:
        metrics.start()

    def on_app(packet: ApplicationDefined, addr) -> None:
        logger.info(f"APP packet from {addr[0]}:{addr[1]}\n{packet}")

    receiver = RTCPReceiver.from_config(config, on_app, metrics=metrics)
    shutdown_event = asyncio.Event()

    def signal_handler():
        logger.info("Shutdown requested...")
        shutdown_event.set()

    loop = asyncio.get_event_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except NotImplementedError:
            # Windows doesn't support add_signal_handler
            signal.signal(sig, lambda s, f: signal_handler())

    try:
        await receiver.start()
        await shutdown_event.wait()
    except OSError as e:
        logger.error(f"Receiver failed: {e}")
        return 1
    finally:
        receiver.stop()
        await receiver.wait_closed()

    logger.info(f"Receiver stats: {receiver.stats}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if args.command == "decode":
        return decode_command("".join(args.packet), args.strict_padding)
    if args.command == "encode":
        return encode_command(args)
    return asyncio.run(listen_command(args.port))


if __name__ == "__main__":
    sys.exit(main())
