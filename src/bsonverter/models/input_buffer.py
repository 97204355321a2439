"""Input buffer and framed document range models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class InputBuffer:
    """
    A named, immutable byte buffer handed to the converter.

    The name is used for messages and to derive the output name; the
    bytes are expected to hold zero or more concatenated BSON documents.
    """

    name: str
    data: bytes

    def __post_init__(self):
        """Validate and freeze the buffer after initialization."""
        if not isinstance(self.name, str):
            raise TypeError("name must be a string")
        if not isinstance(self.data, bytes):
            # bytearray / memoryview inputs are copied so later caller
            # mutation cannot leak into a running conversion
            object.__setattr__(self, "data", bytes(self.data))

    def __len__(self) -> int:
        return len(self.data)

    def is_empty(self) -> bool:
        """Check whether the buffer holds no bytes at all."""
        return len(self.data) == 0

    def get_size_kb(self) -> float:
        """Get buffer size in kilobytes."""
        return len(self.data) / 1024


@dataclass(frozen=True)
class DocumentRange:
    """Location of one framed document inside a buffer."""

    offset: int
    size: int

    def __post_init__(self):
        if self.offset < 0:
            raise ValueError("offset must be non-negative")
        if self.size <= 0:
            raise ValueError("size must be positive")

    @property
    def end(self) -> int:
        return self.offset + self.size

    def slice(self, data: bytes) -> bytes:
        """Return the raw document bytes from the enclosing buffer."""
        return data[self.offset:self.end]
