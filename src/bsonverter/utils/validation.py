"""Validation utilities for input buffers."""

from typing import Iterable, List

from ..models import InputBuffer
from ..types import ErrorType, ValidationError, ValidationResult
from .naming import SUPPORTED_EXTENSIONS, has_supported_extension

# BSON's smallest document: length prefix plus the terminating zero byte.
MIN_DOCUMENT_SIZE = 5


class ValidationUtils:
    """Utility class for validating inputs before conversion."""

    @staticmethod
    def validate_input_buffer(buffer: InputBuffer) -> ValidationResult:
        """
        Validate an input buffer.

        Args:
            buffer: InputBuffer to validate

        Returns:
            ValidationResult with validation details
        """
        errors = []
        warnings = []

        if buffer.is_empty():
            errors.append(ValidationError(
                type=ErrorType.EMPTY_INPUT,
                message=f"{buffer.name} is empty.",
                location="input"
            ))
            return ValidationResult(is_valid=False, errors=errors, warnings=warnings)

        if len(buffer) < MIN_DOCUMENT_SIZE:
            warnings.append(f"{buffer.name} is only {len(buffer)} bytes, "
                            f"smaller than the smallest BSON document.")

        if not has_supported_extension(buffer.name):
            warnings.append(f"{buffer.name} does not have a "
                            f"{' or '.join(SUPPORTED_EXTENSIONS)} extension.")

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=warnings
        )

    @staticmethod
    def validate_file_names(names: Iterable[str]) -> ValidationResult:
        """
        Check that every selected file has a supported extension.

        Args:
            names: File names to check

        Returns:
            ValidationResult with one error per unsupported name
        """
        errors: List[ValidationError] = []
        for name in names:
            if not has_supported_extension(name):
                errors.append(ValidationError(
                    type=ErrorType.UNSUPPORTED_TYPE,
                    message=f"Unsupported file type: {name}. "
                            f"Please ensure all selected files are .db or .bson files.",
                    location=name
                ))

        return ValidationResult(
            is_valid=len(errors) == 0,
            errors=errors,
            warnings=[]
        )
