"""
RTCP codec errors.

All errors derive from ValueError so callers that already treat malformed
packets as ValueError keep working.
"""


class RTCPError(ValueError):
    """Base class for RTCP codec errors."""


class PacketTooShortError(RTCPError):
    """Packet is shorter than its fixed fields or declared length."""

    def __init__(self, message: str = "rtcp: packet too short"):
        super().__init__(message)


class BadVersionError(RTCPError):
    """Header version bits are not 2."""

    def __init__(self, message: str = "rtcp: invalid packet version"):
        super().__init__(message)


class InvalidHeaderError(RTCPError):
    """Header field out of range or unexpected packet type."""

    def __init__(self, message: str = "rtcp: invalid header"):
        super().__init__(message)


class InvalidLengthError(RTCPError):
    """Declared header length does not match the buffer size."""

    def __init__(
        self,
        message: str = "rtcp: application defined packet length does not match header",
    ):
        super().__init__(message)


class WrongPaddingError(RTCPError):
    """Padding count byte is out of range."""

    def __init__(self, message: str = "rtcp: invalid padding value"):
        super().__init__(message)


class DataTooLargeError(RTCPError):
    """Application data exceeds the maximum payload size."""

    def __init__(self, message: str = "rtcp: application defined data is too large"):
        super().__init__(message)


class InvalidNameError(RTCPError):
    """Application name is not exactly 4 bytes."""

    def __init__(self, message: str = "rtcp: application defined name must be 4 bytes"):
        super().__init__(message)


class InvalidSSRCError(RTCPError):
    """SSRC does not fit in 32 bits."""

    def __init__(self, message: str = "rtcp: SSRC must be a 32-bit unsigned integer"):
        super().__init__(message)
