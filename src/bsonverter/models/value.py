"""Tagged value tree for decoded BSON documents."""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union


class ValueKind(Enum):
    """Enumeration of value variants a decoded document can contain."""
    NULL = "null"
    BOOL = "bool"
    INT32 = "int32"
    INT64 = "int64"
    DOUBLE = "double"
    STRING = "string"
    BINARY = "binary"
    TIMESTAMP = "timestamp"
    DATETIME = "datetime"
    OBJECT_ID = "objectId"
    DECIMAL128 = "decimal128"
    REGEX = "regex"
    CODE = "code"
    MIN_KEY = "minKey"
    MAX_KEY = "maxKey"
    ARRAY = "array"
    OBJECT = "object"

    @property
    def is_container(self) -> bool:
        return self in (ValueKind.ARRAY, ValueKind.OBJECT)


INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class NullValue:
    kind = ValueKind.NULL


@dataclass(frozen=True)
class BoolValue:
    value: bool
    kind = ValueKind.BOOL


@dataclass(frozen=True)
class Int32Value:
    value: int
    kind = ValueKind.INT32

    def __post_init__(self):
        if not INT32_MIN <= self.value <= INT32_MAX:
            raise ValueError(f"int32 value out of range: {self.value}")


@dataclass(frozen=True)
class Int64Value:
    value: int
    kind = ValueKind.INT64

    def __post_init__(self):
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"int64 value out of range: {self.value}")


@dataclass(frozen=True)
class DoubleValue:
    value: float
    kind = ValueKind.DOUBLE


@dataclass(frozen=True)
class StringValue:
    value: str
    kind = ValueKind.STRING


@dataclass(frozen=True)
class BinaryValue:
    """Binary blob with its BSON subtype byte."""
    data: bytes
    subtype: int = 0
    kind = ValueKind.BINARY


@dataclass(frozen=True)
class TimestampValue:
    """Internal MongoDB timestamp: seconds since epoch plus an ordinal."""
    time: int
    inc: int
    kind = ValueKind.TIMESTAMP


@dataclass(frozen=True)
class DateTimeValue:
    """UTC datetime stored as milliseconds since the Unix epoch."""
    millis: int
    kind = ValueKind.DATETIME

    def as_datetime(self) -> Optional[datetime.datetime]:
        """Return an aware datetime, or None when outside datetime's range."""
        epoch = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
        try:
            return epoch + datetime.timedelta(milliseconds=self.millis)
        except OverflowError:
            return None


@dataclass(frozen=True)
class ObjectIdValue:
    hex: str
    kind = ValueKind.OBJECT_ID


@dataclass(frozen=True)
class Decimal128Value:
    value: str
    kind = ValueKind.DECIMAL128


@dataclass(frozen=True)
class RegexValue:
    pattern: str
    options: str = ""
    kind = ValueKind.REGEX


@dataclass(frozen=True)
class CodeValue:
    code: str
    scope: Optional["ObjectValue"] = None
    kind = ValueKind.CODE


@dataclass(frozen=True)
class MinKeyValue:
    kind = ValueKind.MIN_KEY


@dataclass(frozen=True)
class MaxKeyValue:
    kind = ValueKind.MAX_KEY


@dataclass
class ArrayValue:
    """Ordered sequence of values."""
    items: List["Value"] = field(default_factory=list)
    kind = ValueKind.ARRAY

    def __len__(self) -> int:
        return len(self.items)


@dataclass
class ObjectValue:
    """
    Mapping from field name to value.

    Field order is the order the fields were read from the document.
    """
    fields: Dict[str, "Value"] = field(default_factory=dict)
    kind = ValueKind.OBJECT

    def __len__(self) -> int:
        return len(self.fields)


Value = Union[
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
]
