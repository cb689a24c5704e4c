"""
Error Taxonomy

Structural failures (the byte stream itself is broken) are kept apart from
content failures (the bytes parse but a variant rejects what they say), so a
proof assembler can drop a single attestation without distrusting the rest.
"""

from typing import Optional


class DeserializationError(ValueError):
    """Base class for every failure raised while decoding a record."""
    pass


class TruncatedStream(DeserializationError):
    """Raised when the reader runs out of bytes before the expected count."""

    def __init__(self, wanted: int, available: int):
        self.wanted = wanted
        self.available = available
        super().__init__(
            f"Truncated stream: wanted {wanted} bytes, {available} available"
        )


class MalformedVarint(DeserializationError):
    """Raised when a varint has no terminating byte or overflows."""
    pass


class PayloadTooLarge(DeserializationError):
    """Raised when a declared varbytes length exceeds the caller's bound."""

    def __init__(self, length: int, max_len: int):
        self.length = length
        self.max_len = max_len
        super().__init__(f"Payload length {length} exceeds maximum {max_len}")


class TrailingGarbage(DeserializationError):
    """Raised when a payload holds bytes its decoder did not consume."""

    def __init__(self, remaining: int):
        self.remaining = remaining
        super().__init__(f"{remaining} unconsumed bytes after payload")


class InvalidContent(DeserializationError):
    """
    Raised when a known variant rejects well-formed bytes.

    The raw tag and payload stay attached for diagnostics.
    """

    def __init__(
        self,
        message: str,
        tag: Optional[bytes] = None,
        payload: Optional[bytes] = None
    ):
        self.tag = tag
        self.payload = payload
        super().__init__(message)


class UnsupportedOperation(TypeError):
    """Raised when applying an operation this build does not implement."""

    def __init__(self, tag: int):
        self.tag = tag
        super().__init__(f"Cannot apply unknown operation with tag 0x{tag:02x}")
