"""
Operations

An operation is a pure byte-to-byte transform on the path from a document
digest to an attestation. The digest operations here carry no state:
every apply() builds its hash state from scratch, so one instance can be
shared freely between threads.

Wire form: the 1-byte tag alone. Unknown tags decode to UnknownOperation,
which serializes back to the same byte but cannot be applied.
"""

from __future__ import annotations
from abc import ABC, abstractmethod

from .codec import StreamReader, StreamWriter
from .errors import UnsupportedOperation
from .params import DEFAULT_PARAMS
from .primitives import keccak256, ripemd160, sha1, sha256
from .registry import TagFamily, TaggedRecord
from .tags import Discriminant, OpTag, tag_bytes

# Operation records are the bare tag; a variant that ever needs arguments
# gets a framed family of its own rather than changing this one.
OPERATION_MAX_PAYLOAD = None

OPERATIONS = TagFamily(
    'operation',
    tag_size=DEFAULT_PARAMS.op_tag_size,
    max_payload=OPERATION_MAX_PAYLOAD,
)


class Operation(TaggedRecord, ABC):
    """Base class for every operation."""

    __slots__ = ()

    FAMILY = OPERATIONS

    TAG: int
    TAG_NAME: str
    DIGEST_LENGTH: int
    DISCRIMINANT: int

    def tag(self) -> int:
        return self.TAG

    def name(self) -> str:
        return self.TAG_NAME

    def digest_length(self) -> int:
        return self.DIGEST_LENGTH

    @abstractmethod
    def apply(self, msg: bytes) -> bytes:
        """Run the operation on msg."""
        pass

    def __call__(self, msg: bytes) -> bytes:
        return self.apply(msg)

    # Serialization

    def wire_tag(self) -> bytes:
        return tag_bytes(self.tag(), OPERATIONS.tag_size)

    def serialize_payload(self, writer: StreamWriter) -> None:
        pass

    @classmethod
    def deserialize_payload(cls, reader: StreamReader) -> 'Operation':
        return cls()

    def serialize(self, writer: StreamWriter) -> None:
        OPERATIONS.encode(self, writer)

    @staticmethod
    def deserialize(reader: StreamReader) -> 'Operation':
        return OPERATIONS.decode(reader)

    def _sort_key(self) -> tuple:
        return (self.tag(), int(self.DISCRIMINANT))

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __str__(self) -> str:
        return self.name()


class CryptOperation(Operation):
    """
    Digest operation: apply() returns exactly DIGEST_LENGTH bytes.

    Subclasses set HASH to a function from primitives.
    """

    __slots__ = ()

    HASH = None

    def apply(self, msg: bytes) -> bytes:
        return type(self).HASH(bytes(msg))


@OPERATIONS.register
class OpSHA1(CryptOperation):
    """
    SHA1 operation.

    SHA1 is broken for collisions; kept so existing proofs still verify.
    """

    __slots__ = ()

    TAG = OpTag.SHA1
    TAG_NAME = 'sha1'
    DIGEST_LENGTH = 20
    DISCRIMINANT = Discriminant.OP_SHA1
    HASH = staticmethod(sha1)


@OPERATIONS.register
class OpRIPEMD160(CryptOperation):
    __slots__ = ()

    TAG = OpTag.RIPEMD160
    TAG_NAME = 'ripemd160'
    DIGEST_LENGTH = 20
    DISCRIMINANT = Discriminant.OP_RIPEMD160
    HASH = staticmethod(ripemd160)


@OPERATIONS.register
class OpSHA256(CryptOperation):
    __slots__ = ()

    TAG = OpTag.SHA256
    TAG_NAME = 'sha256'
    DIGEST_LENGTH = 32
    DISCRIMINANT = Discriminant.OP_SHA256
    HASH = staticmethod(sha256)


@OPERATIONS.register
class OpKECCAK256(CryptOperation):
    """Keccak-256 with original Keccak padding; differs from SHA3-256."""

    __slots__ = ()

    TAG = OpTag.KECCAK256
    TAG_NAME = 'keccak256'
    DIGEST_LENGTH = 32
    DISCRIMINANT = Discriminant.OP_KECCAK256
    HASH = staticmethod(keccak256)


@OPERATIONS.register_unknown
class UnknownOperation(Operation):
    """
    Placeholder for an operation tag this build does not implement.

    It round-trips and sorts like any other operation; apply() raises.
    Registered tags are refused, since they decode as the registered
    operation.
    """

    __slots__ = ('_tag',)

    DISCRIMINANT = Discriminant.UNKNOWN

    def __init__(self, tag: int):
        if not 0 <= tag <= 0xFF:
            raise ValueError(f"Operation tag out of range: {tag}")
        if tag in OPERATIONS:
            raise ValueError(f"Tag 0x{tag:02x} belongs to a registered operation")
        self._init_field('_tag', int(tag))

    @classmethod
    def _with_known_tag(cls, tag: int) -> 'UnknownOperation':
        """Build a fallback that shadows a registered tag, for ordering checks."""
        self = object.__new__(cls)
        self._init_field('_tag', int(tag))
        return self

    @classmethod
    def from_raw(cls, tag: bytes, payload: bytes) -> 'UnknownOperation':
        return cls(tag[0])

    def tag(self) -> int:
        return self._tag

    def name(self) -> str:
        return f"unknown_0x{self._tag:02x}"

    def digest_length(self) -> int:
        raise UnsupportedOperation(self._tag)

    def apply(self, msg: bytes) -> bytes:
        raise UnsupportedOperation(self._tag)

    def __repr__(self) -> str:
        return f"UnknownOperation(0x{self._tag:02x})"


OPERATIONS.seal()
