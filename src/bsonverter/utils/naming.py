"""Naming conventions for converted output."""

import re
from pathlib import PurePath
from typing import Tuple

SUPPORTED_EXTENSIONS: Tuple[str, ...] = (".db", ".bson")
OUTPUT_EXTENSION = ".json"

_SOURCE_SUFFIX = re.compile(r"\.(db|bson)$", re.IGNORECASE)


def output_name_for(original_name: str) -> str:
    """
    Derive the JSON output name for an input name.

    A trailing ``.db`` or ``.bson`` (any case) is replaced with ``.json``;
    any other name gets ``.json`` appended.
    """
    if _SOURCE_SUFFIX.search(original_name):
        return _SOURCE_SUFFIX.sub(OUTPUT_EXTENSION, original_name)
    return original_name + OUTPUT_EXTENSION


def has_supported_extension(name: str) -> bool:
    """Check whether a file name ends in one of the supported extensions."""
    return PurePath(name).suffix.lower() in SUPPORTED_EXTENSIONS
