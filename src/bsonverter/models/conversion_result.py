"""Per-buffer conversion result models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from ..types import ErrorType


@dataclass(frozen=True)
class ConversionSuccess:
    """Successful conversion of one input buffer to JSON text."""

    original_name: str
    output_text: str
    output_name: str
    document_count: int
    warnings: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a plain dictionary."""
        return {
            "originalName": self.original_name,
            "outputText": self.output_text,
            "outputName": self.output_name,
            "documentCount": self.document_count,
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class ConversionFailure:
    """Failed conversion of one input buffer."""

    original_name: str
    error_message: str
    error_type: ErrorType

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to a plain dictionary."""
        return {
            "originalName": self.original_name,
            "errorMessage": self.error_message,
            "errorType": self.error_type.value,
        }


ConversionResult = Union[ConversionSuccess, ConversionFailure]
