"""Pytest configuration and fixtures."""

import struct

import bson
import pytest


def length_prefix(size: int) -> bytes:
    """Encode a BSON length prefix (little-endian int32)."""
    return struct.pack("<i", size)


@pytest.fixture
def single_document_bytes():
    """One BSON document equivalent to {"a": 1}."""
    return bson.encode({"a": 1})


@pytest.fixture
def two_document_bytes():
    """Two concatenated BSON documents."""
    return (
        bson.encode({"id": 1, "name": "first"})
        + bson.encode({"id": 2, "name": "second"})
    )


@pytest.fixture
def quoted_key_bytes():
    """A document whose key text includes literal double quotes."""
    return bson.encode({'"foo"': "bar", "plain": {'"nested"': True}})


@pytest.fixture
def zero_size_bytes():
    """A buffer whose first document declares size 0."""
    return length_prefix(0) + b"\x00" * 8


@pytest.fixture
def truncated_tail_bytes():
    """A valid document followed by a prefix that overruns the buffer."""
    return bson.encode({"ok": True}) + length_prefix(1000) + b"\x00" * 10


@pytest.fixture
def bad_terminator_bytes():
    """A correctly framed document whose trailing byte is not zero."""
    raw = bytearray(bson.encode({"a": 1}))
    raw[-1] = 1
    return bytes(raw)
