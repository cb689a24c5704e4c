"""
Wire Tags

Every tag here is part of the wire contract shared with other
implementations. Operation tag numbers follow RFC 4880's hash algorithm
ids where one exists.
"""

from enum import IntEnum


class OpTag(IntEnum):
    """Single-byte operation tags."""

    SHA1 = 0x02
    RIPEMD160 = 0x03
    SHA256 = 0x08
    KECCAK256 = 0x67


# 8-byte attestation tags
PENDING_TAG = bytes.fromhex('83dfe30d2ef90c8e')
BITCOIN_TAG = bytes.fromhex('0588960d73d71901')
LITECOIN_TAG = bytes.fromhex('06869a0d73d71b45')
ETHEREUM_TAG = bytes.fromhex('30fe8087b5c7ead7')


class Discriminant(IntEnum):
    """
    Explicit variant ids used to break ties between records with equal tags.

    Equal tags across variants only happen when an unknown record reuses a
    known tag. Values are unique across both families and the fallback
    sorts after every known variant.
    """

    # Operations
    OP_SHA1 = 0x02
    OP_RIPEMD160 = 0x03
    OP_SHA256 = 0x08
    OP_KECCAK256 = 0x67

    # Attestations
    PENDING = 0x101
    BITCOIN = 0x102
    LITECOIN = 0x103
    ETHEREUM = 0x104

    # Fallbacks, always last
    UNKNOWN = 0xFFFF


def tag_bytes(tag: int, size: int = 1) -> bytes:
    """Convert an integer tag to its fixed-width wire bytes."""
    return tag.to_bytes(size, 'big')
