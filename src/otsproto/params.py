"""
Protocol Parameters

ProtocolParams collects the constants that are part of the wire contract.
The record families read DEFAULT_PARAMS once, at import; changing any of
those values produces proofs other implementations will not accept.

Only varint_max_bits is meant to vary: a StreamReader may be given a
narrower width than the default.
"""

from dataclasses import dataclass


ALLOWED_URI_CHARS = (
    b'ABCDEFGHIJKLMNOPQRSTUVWXYZ'
    b'abcdefghijklmnopqrstuvwxyz'
    b'0123456789'
    b'-._/:'
)


@dataclass(frozen=True)
class ProtocolParams:
    """
    Fixed sizes and bounds for both record families.

    All parameters are immutable and hashable.
    """

    # ==========================================================================
    # Operation family (read at import)
    # ==========================================================================

    op_tag_size: int = 1
    """Operations are identified by a single byte."""

    # ==========================================================================
    # Attestation family (read at import)
    # ==========================================================================

    attestation_tag_size: int = 8
    """Attestation tags are 8 opaque bytes."""

    attestation_max_payload: int = 8192
    """Generic bound applied before any variant decoder runs."""

    pending_max_uri_length: int = 1000
    """PendingAttestation's stricter bound on its URI."""

    pending_allowed_uri_chars: bytes = ALLOWED_URI_CHARS
    """Byte values a pending URI may contain."""

    # ==========================================================================
    # Codec (per reader)
    # ==========================================================================

    varint_max_bits: int = 64
    """Widest integer read_varint() will produce."""

    @property
    def varint_max_value(self) -> int:
        return (1 << self.varint_max_bits) - 1


DEFAULT_PARAMS = ProtocolParams()
