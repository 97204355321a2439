"""Core type definitions for bsonverter."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

if TYPE_CHECKING:
    from .models import ConversionResult, DocumentRange, InputBuffer, Value


class ErrorType(Enum):
    """Enumeration of error types."""
    EMPTY_INPUT = "empty_input"
    FRAMING = "framing"
    DECODE = "decode"
    EMPTY_RESULT = "empty_result"
    UNSUPPORTED_TYPE = "unsupported_type"
    UNEXPECTED = "unexpected"


@dataclass
class ValidationError:
    """Validation error details."""
    type: ErrorType
    message: str
    location: Optional[str] = None


@dataclass
class ValidationResult:
    """Result of input validation."""
    is_valid: bool
    errors: List[ValidationError]
    warnings: List[str]


@dataclass
class ErrorResponse:
    """Response for error handling."""
    can_recover: bool
    suggested_action: str
    partial_results: Optional[Any] = None


class ProcessingError(Exception):
    """Base exception for everything that can fail while converting a buffer."""

    error_type = ErrorType.UNEXPECTED

    def __init__(self, message: str, error_type: Optional[ErrorType] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        if error_type is not None:
            self.error_type = error_type
        self.context = context or {}


class EmptyInputError(ProcessingError):
    """The input buffer holds zero bytes."""
    error_type = ErrorType.EMPTY_INPUT


class FramingError(ProcessingError):
    """A length prefix is non-positive or overruns the buffer."""
    error_type = ErrorType.FRAMING


class DecodeError(ProcessingError):
    """The BSON codec rejected a framed document."""
    error_type = ErrorType.DECODE


class EmptyResultError(ProcessingError):
    """Framing succeeded on a non-empty buffer but located no documents."""
    error_type = ErrorType.EMPTY_RESULT


# Abstract base classes for interfaces

class BSONConverterInterface(ABC):
    """Abstract interface for the batch converter."""

    @abstractmethod
    async def convert_all(self, inputs: Sequence[Any]) -> List["ConversionResult"]:
        """Convert every named buffer, returning one result per buffer in order."""
        pass

    @abstractmethod
    def convert_buffer(self, buffer: "InputBuffer") -> "ConversionResult":
        """Convert a single named buffer."""
        pass


class DocumentFramerInterface(ABC):
    """Abstract interface for document framing."""

    @abstractmethod
    def frame(self, data: bytes, name: str = "<buffer>") -> List["DocumentRange"]:
        """Locate the documents contained in a buffer."""
        pass


class DocumentDecoderInterface(ABC):
    """Abstract interface for document decoding."""

    @abstractmethod
    def decode(self, raw: bytes, name: str = "<buffer>", index: int = 0) -> "Value":
        """Decode one raw document into a value tree."""
        pass


class ErrorHandlerInterface(ABC):
    """Abstract interface for error handling."""

    @abstractmethod
    def validate_input(self, buffer: "InputBuffer") -> ValidationResult:
        """Validate an input buffer."""
        pass

    @abstractmethod
    def handle_processing_error(self, error: ProcessingError) -> ErrorResponse:
        """Handle processing errors."""
        pass
