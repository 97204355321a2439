"""Error handling implementation for bsonverter."""

import logging
from typing import Optional

from .models import ConversionFailure, InputBuffer
from .types import (
    ErrorHandlerInterface,
    ErrorResponse,
    ErrorType,
    ProcessingError,
    ValidationError,
    ValidationResult,
)
from .utils.validation import ValidationUtils


class ErrorHandler(ErrorHandlerInterface):
    """
    Error handler for conversion operations.

    Validates incoming buffers, turns processing errors into per-buffer
    failure results and logs them. Nothing is retried: a corrupt or
    undecodable buffer stays corrupt.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the error handler.

        Args:
            logger: Optional logger instance for error reporting
        """
        self.logger = logger or logging.getLogger(__name__)

    def validate_input(self, buffer: InputBuffer) -> ValidationResult:
        """
        Validate an input buffer before framing.

        Args:
            buffer: InputBuffer to validate

        Returns:
            ValidationResult with validation details
        """
        try:
            return ValidationUtils.validate_input_buffer(buffer)
        except Exception as e:
            self.logger.error(f"Unexpected error during input validation: {e}")
            return ValidationResult(
                is_valid=False,
                errors=[ValidationError(
                    type=ErrorType.UNEXPECTED,
                    message=f"Validation failed with unexpected error: {str(e)}",
                    location="input"
                )],
                warnings=[]
            )

    def handle_processing_error(self, error: ProcessingError) -> ErrorResponse:
        """
        Describe how a caller can react to a processing error.

        Args:
            error: ProcessingError to handle

        Returns:
            ErrorResponse with a suggested action
        """
        self.logger.error(f"Processing error: {error.error_type.value} - {error}")

        if error.error_type == ErrorType.EMPTY_INPUT:
            action = "Select a non-empty .db or .bson file."
        elif error.error_type == ErrorType.FRAMING:
            action = ("The file is truncated or corrupt. Re-export it from the source "
                      "database, or enable partial conversion to keep the documents "
                      "located before the corrupt offset.")
        elif error.error_type == ErrorType.DECODE:
            action = "A document in the file is malformed. Re-export it from the source database."
        elif error.error_type == ErrorType.EMPTY_RESULT:
            action = "The file holds no complete BSON document. Check that it is a BSON dump."
        else:
            action = "Unknown error type. Please check logs and retry."

        return ErrorResponse(
            can_recover=False,
            suggested_action=action,
            partial_results=error.context.get("ranges") or None
        )

    def to_failure(self, name: str, error: Exception) -> ConversionFailure:
        """
        Convert an exception raised while converting a buffer to a failure result.

        Args:
            name: Name of the buffer being converted
            error: Exception that aborted the conversion

        Returns:
            ConversionFailure naming the buffer and the cause
        """
        if isinstance(error, ProcessingError):
            response = self.handle_processing_error(error)
            self.logger.info(f"Suggested action for {name}: {response.suggested_action}")
            return ConversionFailure(
                original_name=name,
                error_message=str(error),
                error_type=error.error_type
            )

        self.logger.exception(f"Unexpected error converting {name}: {error}")
        cause = str(error) or type(error).__name__
        return ConversionFailure(
            original_name=name,
            error_message=f"An unexpected error occurred during conversion of {name}: {cause}",
            error_type=ErrorType.UNEXPECTED
        )
