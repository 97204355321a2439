"""JSON text encoding of decoded value trees."""

import base64
import json
import logging
import math
from typing import Any, Callable, Dict, Optional, Sequence

from .models import (
    ArrayValue,
    BinaryValue,
    BoolValue,
    CodeValue,
    DateTimeValue,
    Decimal128Value,
    DoubleValue,
    Int32Value,
    Int64Value,
    ObjectIdValue,
    ObjectValue,
    RegexValue,
    StringValue,
    TimestampValue,
    Value,
    ValueKind,
)

# Years that Extended JSON renders as ISO-8601 strings.
_ISO_DATE_MIN_YEAR = 1970
_ISO_DATE_MAX_YEAR = 9999


class TextEncoder:
    """
    Serializes value trees to indented JSON.

    Int32 and finite doubles become JSON numbers. Int64 always becomes a
    decimal string so consumers that parse numbers as IEEE doubles keep the
    exact value. BSON types without a JSON counterpart are written as
    MongoDB Extended JSON ``$``-tagged objects.
    """

    def __init__(self, indent: Optional[int] = 2, logger: Optional[logging.Logger] = None):
        """
        Initialize the text encoder.

        Args:
            indent: Spaces per indentation level (None for compact output)
            logger: Optional logger instance
        """
        self.indent = indent
        self.logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[ValueKind, Callable[[Any], Any]] = {
            ValueKind.NULL: lambda v: None,
            ValueKind.BOOL: self._encode_bool,
            ValueKind.INT32: self._encode_int32,
            ValueKind.INT64: self._encode_int64,
            ValueKind.DOUBLE: self._encode_double,
            ValueKind.STRING: self._encode_string,
            ValueKind.BINARY: self._encode_binary,
            ValueKind.TIMESTAMP: self._encode_timestamp,
            ValueKind.DATETIME: self._encode_datetime,
            ValueKind.OBJECT_ID: self._encode_object_id,
            ValueKind.DECIMAL128: self._encode_decimal128,
            ValueKind.REGEX: self._encode_regex,
            ValueKind.CODE: self._encode_code,
            ValueKind.MIN_KEY: lambda v: {"$minKey": 1},
            ValueKind.MAX_KEY: lambda v: {"$maxKey": 1},
            ValueKind.ARRAY: self._encode_array,
            ValueKind.OBJECT: self._encode_object,
        }

    @property
    def supported_kinds(self):
        return frozenset(self._handlers)

    def encode(self, values: Sequence[Value]) -> str:
        """
        Encode decoded documents as JSON text.

        Args:
            values: Documents decoded from one buffer

        Returns:
            JSON of the single document when there is exactly one,
            otherwise JSON of an array holding all of them in order
        """
        if len(values) == 1:
            root = self.to_json_compatible(values[0])
        else:
            root = [self.to_json_compatible(value) for value in values]

        return json.dumps(root, indent=self.indent, ensure_ascii=False, allow_nan=False)

    def to_json_compatible(self, value: Value) -> Any:
        """
        Convert a value tree into plain ``json``-serializable objects.

        Raises:
            TypeError: If the value kind has no encoding
        """
        handler = self._handlers.get(getattr(value, "kind", None))
        if handler is None:
            raise TypeError(f"No JSON encoding for value of type {type(value).__name__}")
        return handler(value)

    def _encode_bool(self, value: BoolValue) -> bool:
        return value.value

    def _encode_int32(self, value: Int32Value) -> int:
        return value.value

    def _encode_int64(self, value: Int64Value) -> str:
        return str(value.value)

    def _encode_double(self, value: DoubleValue) -> Any:
        if math.isnan(value.value):
            return {"$numberDouble": "NaN"}
        if math.isinf(value.value):
            return {"$numberDouble": "Infinity" if value.value > 0 else "-Infinity"}
        return value.value

    def _encode_string(self, value: StringValue) -> str:
        return value.value

    def _encode_binary(self, value: BinaryValue) -> Dict[str, Any]:
        return {
            "$binary": {
                "base64": base64.b64encode(value.data).decode("ascii"),
                "subType": format(value.subtype, "02x"),
            }
        }

    def _encode_timestamp(self, value: TimestampValue) -> Dict[str, Any]:
        return {"$timestamp": {"t": value.time, "i": value.inc}}

    def _encode_datetime(self, value: DateTimeValue) -> Dict[str, Any]:
        dt = value.as_datetime()
        if dt is None or not _ISO_DATE_MIN_YEAR <= dt.year <= _ISO_DATE_MAX_YEAR:
            return {"$date": {"$numberLong": str(value.millis)}}
        return {"$date": dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"}

    def _encode_object_id(self, value: ObjectIdValue) -> Dict[str, Any]:
        return {"$oid": value.hex}

    def _encode_decimal128(self, value: Decimal128Value) -> Dict[str, Any]:
        return {"$numberDecimal": value.value}

    def _encode_regex(self, value: RegexValue) -> Dict[str, Any]:
        return {
            "$regularExpression": {
                "pattern": value.pattern,
                "options": "".join(sorted(value.options)),
            }
        }

    def _encode_code(self, value: CodeValue) -> Dict[str, Any]:
        encoded = {"$code": value.code}
        if value.scope is not None:
            encoded["$scope"] = self._encode_object(value.scope)
        return encoded

    def _encode_array(self, value: ArrayValue) -> list:
        return [self.to_json_compatible(item) for item in value.items]

    def _encode_object(self, value: ObjectValue) -> Dict[str, Any]:
        return {key: self.to_json_compatible(child) for key, child in value.fields.items()}
