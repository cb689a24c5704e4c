"""
Tagged Dispatch Registry

A TagFamily maps fixed-width tags to the classes that decode them. Tags
this build does not know are not errors: they decode to the family's
fallback class, which keeps tag and payload verbatim so the record can be
re-serialized byte-for-byte.

Record layout:
    framed family:    TAG(tag_size) ‖ varbytes(payload)
    unframed family:  TAG(tag_size)

Registration happens at import time. The defining module calls seal()
once its classes are in place, after which the tables cannot change.
"""

from __future__ import annotations
import logging
from typing import Callable, Dict, Optional, Type

from .codec import StreamReader, StreamWriter
from .errors import InvalidContent
from .tags import tag_bytes

logger = logging.getLogger(__name__)


class TagFamily:
    """
    Decoder table for one record family.

    Registered classes provide:
        TAG                    int or bytes, the wire tag
        DISCRIMINANT           int, stable tie-breaker for ordering
        deserialize_payload()  classmethod(reader) -> instance
        wire_tag()             bytes
        serialize_payload()    (writer) -> None

    The fallback class provides from_raw(tag, payload) instead of TAG.
    """

    def __init__(self, name: str, tag_size: int, max_payload: Optional[int]):
        """
        Args:
            name: Family name, used in messages.
            tag_size: Width of every tag in bytes.
            max_payload: Generic payload bound, or None if records in this
                family are the bare tag.
        """
        self.name = name
        self.tag_size = tag_size
        self.max_payload = max_payload
        self._decoders: Dict[bytes, Type] = {}
        self._discriminants: Dict[int, Type] = {}
        self._unknown: Optional[Callable[[bytes, bytes], object]] = None
        self._sealed = False

    def seal(self) -> None:
        """Refuse any further registration."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def _check_open(self) -> None:
        if self._sealed:
            raise RuntimeError(f"The {self.name} registry is sealed")

    @property
    def framed(self) -> bool:
        return self.max_payload is not None

    def _key(self, tag) -> bytes:
        if isinstance(tag, int):
            return tag_bytes(tag, self.tag_size)
        return bytes(tag)

    def register(self, cls: Type) -> Type:
        """Class decorator adding cls under cls.TAG."""
        self._check_open()
        key = self._key(cls.TAG)
        if len(key) != self.tag_size:
            raise ValueError(
                f"{self.name} tags are {self.tag_size} bytes, "
                f"{cls.__name__} has {len(key)}"
            )
        if key in self._decoders:
            raise ValueError(
                f"Duplicate {self.name} tag {key.hex()}: "
                f"{cls.__name__} and {self._decoders[key].__name__}"
            )
        self._claim_discriminant(cls)
        self._decoders[key] = cls
        return cls

    def register_unknown(self, cls: Type) -> Type:
        """Class decorator installing cls as the fallback for unknown tags."""
        self._check_open()
        if self._unknown is not None:
            raise ValueError(f"{self.name} already has an unknown fallback")
        self._claim_discriminant(cls)
        self._unknown = cls.from_raw
        return cls

    def _claim_discriminant(self, cls: Type) -> None:
        d = int(cls.DISCRIMINANT)
        if d in self._discriminants:
            raise ValueError(
                f"Duplicate {self.name} discriminant {d}: "
                f"{cls.__name__} and {self._discriminants[d].__name__}"
            )
        self._discriminants[d] = cls

    def is_known(self, tag) -> bool:
        return self._key(tag) in self._decoders

    __contains__ = is_known

    def known_tags(self):
        """Registered tags in wire order."""
        return sorted(self._decoders)

    def decode(self, reader: StreamReader):
        """
        Read one record.

        1. Read the fixed-width tag.
        2. Read the varbytes payload bounded by max_payload (framed only).
        3. Dispatch to the registered class, or build the fallback.

        Codec errors and variant errors propagate unchanged; InvalidContent
        gets the raw tag and payload attached if the variant did not set them.
        """
        tag = reader.read_bytes(self.tag_size)
        payload = reader.read_varbytes(self.max_payload) if self.framed else b''

        cls = self._decoders.get(tag)
        if cls is None:
            if self._unknown is None:
                raise ValueError(f"No fallback registered for {self.name}")
            logger.debug(
                "Unknown %s tag %s, keeping %d payload bytes verbatim",
                self.name, tag.hex(), len(payload)
            )
            return self._unknown(tag, payload)

        sub = StreamReader(payload)
        try:
            value = cls.deserialize_payload(sub)
        except InvalidContent as exc:
            if exc.tag is None:
                exc.tag = tag
                exc.payload = payload
            raise
        sub.assert_eof()
        return value

    def encode(self, value, writer: StreamWriter) -> None:
        """
        Write one record: tag, then the payload serialized into a fresh
        buffer so its length can be written first.
        """
        tag = value.wire_tag()
        if len(tag) != self.tag_size:
            raise ValueError(
                f"{self.name} tags are {self.tag_size} bytes, got {len(tag)}"
            )
        writer.write_bytes(tag)
        if not self.framed:
            return
        sub = StreamWriter()
        value.serialize_payload(sub)
        writer.write_varbytes(sub.getvalue())


class TaggedRecord:
    """
    Ordering, equality and hashing shared by both record families.

    Subclasses return a tuple from _sort_key() whose first two items are the
    wire tag and the class DISCRIMINANT. Any two records of one family are
    therefore comparable, whatever their variants, and the order does not
    depend on Python class names.
    """

    __slots__ = ()

    FAMILY: TagFamily

    def _sort_key(self) -> tuple:
        raise NotImplementedError

    def _same_family(self, other) -> bool:
        return isinstance(other, TaggedRecord) and other.FAMILY is self.FAMILY

    def compare_to(self, other: 'TaggedRecord') -> int:
        """Return -1, 0 or 1."""
        if not self._same_family(other):
            raise TypeError(
                f"Cannot compare {type(self).__name__} with {type(other).__name__}"
            )
        a, b = self._sort_key(), other._sort_key()
        return (a > b) - (a < b)

    def __eq__(self, other: object) -> bool:
        if not self._same_family(other):
            return NotImplemented
        return self._sort_key() == other._sort_key()

    def __lt__(self, other):
        if not self._same_family(other):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other):
        if not self._same_family(other):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other):
        if not self._same_family(other):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other):
        if not self._same_family(other):
            return NotImplemented
        return self._sort_key() >= other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def _init_field(self, name: str, value) -> None:
        object.__setattr__(self, name, value)
