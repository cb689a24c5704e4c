"""
Time Attestations

An attestation is the terminal node of a proof: a claim, checkable by some
outside party, that the digest it is attached to existed at a point in
time.

Wire form: TAG(8) ‖ varbytes(payload), payload at most 8192 bytes. The
payload is decoded from its own buffer and must be consumed exactly.

Ordering is total across variants: tag bytes first, then the variant's
DISCRIMINANT, then the variant's own fields. Two records with the same tag
but different variants (an UnknownAttestation that reuses a known tag) are
ordered by discriminant, which is a fixed number rather than a class name.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod

from .codec import StreamReader, StreamWriter
from .errors import InvalidContent, PayloadTooLarge
from .params import DEFAULT_PARAMS
from .registry import TagFamily, TaggedRecord
from .tags import (
    Discriminant,
    PENDING_TAG,
    BITCOIN_TAG,
    LITECOIN_TAG,
    ETHEREUM_TAG,
)

logger = logging.getLogger(__name__)

ATTESTATIONS = TagFamily(
    'attestation',
    tag_size=DEFAULT_PARAMS.attestation_tag_size,
    max_payload=DEFAULT_PARAMS.attestation_max_payload,
)


class TimeAttestation(TaggedRecord, ABC):
    """Base class for every attestation."""

    __slots__ = ()

    FAMILY = ATTESTATIONS

    TAG: bytes
    DISCRIMINANT: int

    TAG_SIZE = DEFAULT_PARAMS.attestation_tag_size
    MAX_PAYLOAD_SIZE = DEFAULT_PARAMS.attestation_max_payload

    def tag(self) -> bytes:
        return self.TAG

    def wire_tag(self) -> bytes:
        return self.tag()

    @abstractmethod
    def serialize_payload(self, writer: StreamWriter) -> None:
        """Write the variant's payload, without tag or length prefix."""
        pass

    def serialize(self, writer: StreamWriter) -> None:
        ATTESTATIONS.encode(self, writer)

    @staticmethod
    def deserialize(reader: StreamReader) -> 'TimeAttestation':
        """Read one attestation record of any variant."""
        return ATTESTATIONS.decode(reader)

    def _sort_key(self) -> tuple:
        return (self.tag(), int(self.DISCRIMINANT)) + self._fields()

    @abstractmethod
    def _fields(self) -> tuple:
        pass


@ATTESTATIONS.register
class PendingAttestation(TimeAttestation):
    """
    Pending attestation.

    The commitment was submitted to a remote calendar, and the URI says
    where to ask for the completed timestamp later. Nothing but the URI is
    recorded: calendars promise to keep commitments indefinitely, so the
    current status is always one request away.

    URIs are restricted byte by byte to A-Z a-z 0-9 - . _ / : and to
    1000 bytes. Multi-byte UTF-8 sequences are rejected because their bytes
    fall outside that set.
    """

    __slots__ = ('_uri',)

    TAG = PENDING_TAG
    DISCRIMINANT = Discriminant.PENDING

    MAX_URI_LENGTH = DEFAULT_PARAMS.pending_max_uri_length
    ALLOWED_URI_CHARS = frozenset(DEFAULT_PARAMS.pending_allowed_uri_chars)

    def __init__(self, uri):
        if isinstance(uri, str):
            uri = uri.encode('utf-8')
        uri = bytes(uri)
        if not self.check_uri(uri):
            raise InvalidContent(
                f"Invalid pending attestation URI: {uri[:64]!r}",
                tag=self.TAG,
            )
        self._init_field('_uri', uri)

    @property
    def uri(self) -> bytes:
        return self._uri

    @classmethod
    def check_uri(cls, uri: bytes) -> bool:
        """True iff uri is short enough and uses only allowed bytes."""
        if len(uri) > cls.MAX_URI_LENGTH:
            return False
        return all(b in cls.ALLOWED_URI_CHARS for b in uri)

    @classmethod
    def deserialize_payload(cls, reader: StreamReader) -> 'PendingAttestation':
        uri = reader.read_varbytes(cls.MAX_URI_LENGTH)
        if not cls.check_uri(uri):
            logger.warning("Rejecting pending attestation with invalid URI %r", uri)
            raise InvalidContent(f"Invalid pending attestation URI: {uri!r}")
        return cls(uri)

    def serialize_payload(self, writer: StreamWriter) -> None:
        writer.write_varbytes(self._uri)

    def _fields(self) -> tuple:
        return (self._uri,)

    def __repr__(self) -> str:
        return f"PendingAttestation({self._uri.decode('ascii')!r})"


class BlockHeaderAttestation(TimeAttestation):
    """
    Digest is the merkle root of the block at `height` on some chain.

    Payload: varint(height). Checking the claim against chain data belongs
    to a verifier outside this package.
    """

    __slots__ = ('_height',)

    CHAIN = ''

    def __init__(self, height: int):
        if isinstance(height, bool) or not isinstance(height, int):
            raise TypeError(f"height must be an int, got {type(height).__name__}")
        if height < 0:
            raise ValueError(f"height must be non-negative, got {height}")
        self._init_field('_height', height)

    @property
    def height(self) -> int:
        return self._height

    @classmethod
    def deserialize_payload(cls, reader: StreamReader) -> 'BlockHeaderAttestation':
        return cls(reader.read_varint())

    def serialize_payload(self, writer: StreamWriter) -> None:
        writer.write_varint(self._height)

    def _fields(self) -> tuple:
        return (self._height,)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._height!r})"


@ATTESTATIONS.register
class BitcoinBlockHeaderAttestation(BlockHeaderAttestation):
    __slots__ = ()

    TAG = BITCOIN_TAG
    DISCRIMINANT = Discriminant.BITCOIN
    CHAIN = 'bitcoin'


@ATTESTATIONS.register
class LitecoinBlockHeaderAttestation(BlockHeaderAttestation):
    __slots__ = ()

    TAG = LITECOIN_TAG
    DISCRIMINANT = Discriminant.LITECOIN
    CHAIN = 'litecoin'


@ATTESTATIONS.register
class EthereumBlockHeaderAttestation(BlockHeaderAttestation):
    __slots__ = ()

    TAG = ETHEREUM_TAG
    DISCRIMINANT = Discriminant.ETHEREUM
    CHAIN = 'ethereum'


@ATTESTATIONS.register_unknown
class UnknownAttestation(TimeAttestation):
    """
    Attestation with a tag this build does not recognize.

    Tag and payload are kept verbatim so the record re-serializes
    byte-for-byte. Registered tags are refused, since such a record would
    decode back as the registered variant.
    """

    __slots__ = ('_tag', '_payload')

    DISCRIMINANT = Discriminant.UNKNOWN

    def __init__(self, tag: bytes, payload: bytes):
        tag = bytes(tag)
        if tag in ATTESTATIONS:
            raise ValueError(f"Tag {tag.hex()} belongs to a registered attestation")
        self._init_unchecked(tag, payload)

    @classmethod
    def _with_known_tag(cls, tag: bytes, payload: bytes) -> 'UnknownAttestation':
        """
        Build a fallback that shadows a registered tag.

        Decoding never yields one; it exists to check ordering between
        colliding variants.
        """
        self = object.__new__(cls)
        self._init_unchecked(bytes(tag), payload)
        return self

    def _init_unchecked(self, tag: bytes, payload: bytes) -> None:
        payload = bytes(payload)
        if len(tag) != self.TAG_SIZE:
            raise ValueError(f"Attestation tag must be {self.TAG_SIZE} bytes, got {len(tag)}")
        if len(payload) > self.MAX_PAYLOAD_SIZE:
            raise PayloadTooLarge(len(payload), self.MAX_PAYLOAD_SIZE)
        self._init_field('_tag', tag)
        self._init_field('_payload', payload)

    @classmethod
    def from_raw(cls, tag: bytes, payload: bytes) -> 'UnknownAttestation':
        return cls(tag, payload)

    def tag(self) -> bytes:
        return self._tag

    @property
    def payload(self) -> bytes:
        return self._payload

    def serialize_payload(self, writer: StreamWriter) -> None:
        writer.write_bytes(self._payload)

    def _fields(self) -> tuple:
        return (self._payload,)

    def __repr__(self) -> str:
        return f"UnknownAttestation({self._tag!r}, {self._payload!r})"


ATTESTATIONS.seal()
