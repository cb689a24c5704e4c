"""Tests for ProtocolParams."""

import dataclasses

import pytest

from otsproto.codec import StreamReader, encode_varint
from otsproto.errors import MalformedVarint
from otsproto.params import ProtocolParams, DEFAULT_PARAMS
from otsproto.attestations import TimeAttestation, PendingAttestation
from otsproto.ops import OPERATIONS


class TestProtocolParams:

    def test_defaults_match_wire_contract(self):
        assert DEFAULT_PARAMS.op_tag_size == 1
        assert DEFAULT_PARAMS.attestation_tag_size == 8
        assert DEFAULT_PARAMS.attestation_max_payload == 8192
        assert DEFAULT_PARAMS.pending_max_uri_length == 1000
        assert DEFAULT_PARAMS.varint_max_value == 2**64 - 1

    def test_families_use_defaults(self):
        assert TimeAttestation.FAMILY.max_payload == DEFAULT_PARAMS.attestation_max_payload
        assert TimeAttestation.FAMILY.tag_size == DEFAULT_PARAMS.attestation_tag_size
        assert PendingAttestation.MAX_URI_LENGTH == DEFAULT_PARAMS.pending_max_uri_length
        assert PendingAttestation.ALLOWED_URI_CHARS == frozenset(
            DEFAULT_PARAMS.pending_allowed_uri_chars
        )
        assert OPERATIONS.tag_size == DEFAULT_PARAMS.op_tag_size

    def test_reader_honours_varint_width(self):
        narrow = ProtocolParams(varint_max_bits=8)
        assert narrow.varint_max_value == 255
        assert StreamReader(encode_varint(255), narrow).read_varint() == 255
        with pytest.raises(MalformedVarint):
            StreamReader(encode_varint(256), narrow).read_varint()

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_PARAMS.attestation_max_payload = 1

    def test_hashable(self):
        assert hash(ProtocolParams()) == hash(DEFAULT_PARAMS)
