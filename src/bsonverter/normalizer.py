"""Repair of quote-wrapped object keys in decoded documents."""

import logging
from typing import Optional

from .models import ArrayValue, ObjectValue, Value

QUOTE = '"'


def strip_key_quotes(key: str) -> str:
    """Remove exactly one pair of surrounding double quotes from a key."""
    if len(key) >= 2 and key[0] == QUOTE and key[-1] == QUOTE:
        return key[1:-1]
    return key


class KeyNormalizer:
    """
    Rewrites object keys whose text is wrapped in literal double quotes.

    Some producers of legacy document files store certain keys as ``"foo"``
    with the quote characters included. The rewrite is purely syntactic, so
    a key that was intentionally quote-wrapped loses its quotes too. When
    stripping makes two keys equal, the later field wins.
    """

    def __init__(self, enabled: bool = True, logger: Optional[logging.Logger] = None):
        """
        Initialize the key normalizer.

        Args:
            enabled: When False, values are returned untouched
            logger: Optional logger instance
        """
        self.enabled = enabled
        self.logger = logger or logging.getLogger(__name__)

    def normalize(self, value: Value) -> Value:
        """
        Return a copy of the tree with quote-wrapped keys repaired.

        Args:
            value: Decoded value tree

        Returns:
            Normalized value tree; scalars are returned as-is
        """
        if not self.enabled:
            return value
        return self._normalize(value)

    def _normalize(self, value: Value) -> Value:
        if not value.kind.is_container:
            return value

        if isinstance(value, ArrayValue):
            return ArrayValue([self._normalize(item) for item in value.items])

        if isinstance(value, ObjectValue):
            fields = {}
            for key, child in value.fields.items():
                new_key = strip_key_quotes(key)
                if new_key != key and new_key in fields:
                    self.logger.debug(f"Key {key!r} collides with {new_key!r} after stripping quotes")
                fields[new_key] = self._normalize(child)
            return ObjectValue(fields)

        raise TypeError(f"Unhandled container kind: {value.kind}")
