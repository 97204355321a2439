"""Data models for bsonverter."""

from .input_buffer import InputBuffer, DocumentRange
from .conversion_result import ConversionSuccess, ConversionFailure, ConversionResult
from .value import (
    ValueKind,
    Value,
    NullValue,
    BoolValue,
    Int32Value,
    Int64Value,
    DoubleValue,
    StringValue,
    BinaryValue,
    TimestampValue,
    DateTimeValue,
    ObjectIdValue,
    Decimal128Value,
    RegexValue,
    CodeValue,
    MinKeyValue,
    MaxKeyValue,
    ArrayValue,
    ObjectValue,
)

__all__ = [
    "InputBuffer",
    "DocumentRange",
    "ConversionSuccess",
    "ConversionFailure",
    "ConversionResult",
    "ValueKind",
    "Value",
    "NullValue",
    "BoolValue",
    "Int32Value",
    "Int64Value",
    "DoubleValue",
    "StringValue",
    "BinaryValue",
    "TimestampValue",
    "DateTimeValue",
    "ObjectIdValue",
    "Decimal128Value",
    "RegexValue",
    "CodeValue",
    "MinKeyValue",
    "MaxKeyValue",
    "ArrayValue",
    "ObjectValue",
]
