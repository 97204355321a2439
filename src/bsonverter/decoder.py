"""BSON document decoding into tagged value trees."""

import datetime
import logging
import re
import uuid
from typing import Any, Optional

import bson
from bson.binary import Binary
from bson.code import Code
from bson.codec_options import CodecOptions, DatetimeConversion
from bson.datetime_ms import DatetimeMS
from bson.dbref import DBRef
from bson.decimal128 import Decimal128
from bson.errors import BSONError
from bson.int64 import Int64
from bson.max_key import MaxKey
from bson.min_key import MinKey
from bson.objectid import ObjectId
from bson.regex import Regex
from bson.timestamp import Timestamp

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
    MaxKeyValue,
    MinKeyValue,
    NullValue,
    ObjectIdValue,
    ObjectValue,
    RegexValue,
    StringValue,
    TimestampValue,
    Value,
)
from .models.value import INT32_MAX, INT32_MIN
from .types import DecodeError, DocumentDecoderInterface

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)

_REGEX_FLAG_CHARS = (
    (re.IGNORECASE, "i"),
    (re.LOCALE, "l"),
    (re.MULTILINE, "m"),
    (re.DOTALL, "s"),
    (re.UNICODE, "u"),
    (re.VERBOSE, "x"),
)

DEFAULT_CODEC_OPTIONS = CodecOptions(
    tz_aware=True,
    tzinfo=datetime.timezone.utc,
    datetime_conversion=DatetimeConversion.DATETIME_AUTO,
)


def regex_flags_to_options(flags: int) -> str:
    """Render ``re`` flag bits as a sorted BSON regex options string."""
    return "".join(sorted(char for flag, char in _REGEX_FLAG_CHARS if flags & flag))


def to_value(obj: Any) -> Value:
    """
    Convert a tree produced by ``bson.decode`` into tagged values.

    Args:
        obj: Python object returned by the codec

    Returns:
        Equivalent Value tree

    Raises:
        TypeError: If the object is of a type the codec should never produce
    """
    # Order matters: bool is an int, Int64 is an int, Code is a str,
    # Binary is bytes and DBRef is not a dict.
    if obj is None:
        return NullValue()
    if isinstance(obj, bool):
        return BoolValue(obj)
    if isinstance(obj, Int64):
        return Int64Value(int(obj))
    if isinstance(obj, int):
        if INT32_MIN <= obj <= INT32_MAX:
            return Int32Value(obj)
        return Int64Value(obj)
    if isinstance(obj, float):
        return DoubleValue(obj)
    if isinstance(obj, Code):
        scope = None
        if obj.scope is not None:
            scope = ObjectValue({key: to_value(val) for key, val in obj.scope.items()})
        return CodeValue(str(obj), scope)
    if isinstance(obj, str):
        return StringValue(obj)
    if isinstance(obj, Binary):
        return BinaryValue(bytes(obj), obj.subtype)
    if isinstance(obj, bytes):
        return BinaryValue(obj, 0)
    if isinstance(obj, uuid.UUID):
        return BinaryValue(obj.bytes, 4)
    if isinstance(obj, Timestamp):
        return TimestampValue(obj.time, obj.inc)
    if isinstance(obj, datetime.datetime):
        if obj.tzinfo is None:
            obj = obj.replace(tzinfo=datetime.timezone.utc)
        return DateTimeValue((obj - _EPOCH) // datetime.timedelta(milliseconds=1))
    if isinstance(obj, DatetimeMS):
        return DateTimeValue(int(obj))
    if isinstance(obj, ObjectId):
        return ObjectIdValue(str(obj))
    if isinstance(obj, Decimal128):
        return Decimal128Value(str(obj))
    if isinstance(obj, Regex):
        flags = obj.flags if isinstance(obj.flags, int) else 0
        return RegexValue(str(obj.pattern), regex_flags_to_options(flags))
    if isinstance(obj, MinKey):
        return MinKeyValue()
    if isinstance(obj, MaxKey):
        return MaxKeyValue()
    if isinstance(obj, DBRef):
        return to_value(dict(obj.as_doc()))
    if isinstance(obj, dict):
        return ObjectValue({key: to_value(val) for key, val in obj.items()})
    if isinstance(obj, (list, tuple)):
        return ArrayValue([to_value(item) for item in obj])

    raise TypeError(f"Unsupported decoded type: {type(obj).__name__}")


class DocumentDecoder(DocumentDecoderInterface):
    """
    Decodes single framed BSON documents.

    The binary parsing itself is done by the ``bson`` package; this class
    turns codec failures into DecodeError and the result into Value trees.
    """

    def __init__(self, codec_options: Optional[CodecOptions] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialize the document decoder.

        Args:
            codec_options: Options passed to ``bson.decode``
            logger: Optional logger instance
        """
        self.codec_options = codec_options or DEFAULT_CODEC_OPTIONS
        self.logger = logger or logging.getLogger(__name__)

    def decode(self, raw: bytes, name: str = "<buffer>", index: int = 0) -> Value:
        """
        Decode one raw document.

        Args:
            raw: Bytes of exactly one document, length prefix included
            name: Name of the originating buffer
            index: Position of the document within its buffer

        Returns:
            Decoded document as a Value tree (an ObjectValue)

        Raises:
            DecodeError: If the codec rejects the document
        """
        try:
            document = bson.decode(bytes(raw), codec_options=self.codec_options)
        except (BSONError, ValueError, OverflowError) as e:
            self.logger.debug(f"Codec rejected document #{index} in {name}: {e}")
            raise DecodeError(
                f"Failed to decode BSON document #{index} in {name}: {e}",
                context={"name": name, "index": index, "cause": str(e)},
            ) from e

        try:
            return to_value(document)
        except TypeError as e:
            raise DecodeError(
                f"Failed to decode BSON document #{index} in {name}: {e}",
                context={"name": name, "index": index, "cause": str(e)},
            ) from e
