"""Tests for data models."""

import pytest

from bsonverter.models import (
    ArrayValue,
    ConversionFailure,
    ConversionSuccess,
    DateTimeValue,
    DocumentRange,
    InputBuffer,
    Int32Value,
    Int64Value,
    ObjectValue,
    ValueKind,
)
from bsonverter.types import ErrorType


class TestInputBuffer:
    """Tests for InputBuffer class."""

    def test_valid_buffer(self):
        buffer = InputBuffer(name="data.bson", data=b"\x05\x00\x00\x00\x00")

        assert len(buffer) == 5
        assert not buffer.is_empty()
        assert buffer.get_size_kb() == 5 / 1024

    def test_empty_buffer(self):
        assert InputBuffer(name="empty.bson", data=b"").is_empty()

    def test_bytearray_is_copied(self):
        """Mutable inputs are frozen into bytes."""
        raw = bytearray(b"\x01\x02")
        buffer = InputBuffer(name="x.bson", data=raw)
        raw[0] = 0xFF

        assert isinstance(buffer.data, bytes)
        assert buffer.data == b"\x01\x02"

    def test_name_must_be_string(self):
        with pytest.raises(TypeError):
            InputBuffer(name=None, data=b"")


class TestDocumentRange:
    """Tests for DocumentRange class."""

    def test_slice(self):
        document_range = DocumentRange(offset=2, size=3)

        assert document_range.end == 5
        assert document_range.slice(b"abcdefg") == b"cde"

    def test_invalid_range(self):
        with pytest.raises(ValueError, match="offset"):
            DocumentRange(offset=-1, size=5)
        with pytest.raises(ValueError, match="size"):
            DocumentRange(offset=0, size=0)


class TestValues:
    """Tests for value variants."""

    def test_integer_ranges(self):
        with pytest.raises(ValueError):
            Int32Value(2 ** 31)
        with pytest.raises(ValueError):
            Int64Value(2 ** 63)
        assert Int64Value(2 ** 63 - 1).value == 2 ** 63 - 1

    def test_kinds(self):
        assert Int32Value(1).kind == ValueKind.INT32
        assert ObjectValue().kind == ValueKind.OBJECT
        assert ValueKind.ARRAY.is_container
        assert ValueKind.OBJECT.is_container
        assert not ValueKind.INT64.is_container

    def test_container_lengths(self):
        assert len(ArrayValue([Int32Value(1), Int32Value(2)])) == 2
        assert len(ObjectValue({"a": Int32Value(1)})) == 1

    def test_datetime_conversion(self):
        assert DateTimeValue(0).as_datetime().year == 1970
        assert DateTimeValue(2 ** 62).as_datetime() is None


class TestConversionResults:
    """Tests for ConversionSuccess and ConversionFailure."""

    def test_success(self):
        result = ConversionSuccess(
            original_name="data.bson",
            output_text="{}",
            output_name="data.json",
            document_count=1,
        )

        assert result.success
        assert result.warnings == []
        assert result.to_dict() == {
            "originalName": "data.bson",
            "outputText": "{}",
            "outputName": "data.json",
            "documentCount": 1,
            "warnings": [],
        }

    def test_failure(self):
        result = ConversionFailure(
            original_name="data.bson",
            error_message="data.bson is empty.",
            error_type=ErrorType.EMPTY_INPUT,
        )

        assert not result.success
        assert result.to_dict()["errorType"] == "empty_input"
        assert "outputText" not in result.to_dict()
