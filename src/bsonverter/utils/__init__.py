"""Utility functions for bsonverter."""

from .naming import output_name_for, has_supported_extension, SUPPORTED_EXTENSIONS
from .validation import ValidationUtils

__all__ = ["output_name_for", "has_supported_extension", "SUPPORTED_EXTENSIONS", "ValidationUtils"]
