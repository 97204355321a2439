"""
bsonverter - BSON to JSON conversion.

Converts legacy binary document-store files (concatenated BSON
documents) into indented, human-readable JSON text.
"""

from .converter import BSONConverter
from .models import InputBuffer, ConversionSuccess, ConversionFailure, ConversionResult
from .types import (
    ErrorType,
    ProcessingError,
    EmptyInputError,
    FramingError,
    DecodeError,
    EmptyResultError,
)

__version__ = "1.0.0"
__all__ = [
    "BSONConverter",
    "InputBuffer",
    "ConversionSuccess",
    "ConversionFailure",
    "ConversionResult",
    "ErrorType",
    "ProcessingError",
    "EmptyInputError",
    "FramingError",
    "DecodeError",
    "EmptyResultError",
]
