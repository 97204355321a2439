"""Length-prefix framing of concatenated BSON documents."""

import logging
import struct
from typing import List, Optional

from .models import DocumentRange
from .types import DocumentFramerInterface, EmptyInputError, FramingError

_INT32_LE = struct.Struct("<i")

# Every BSON document starts with its total length as a signed int32.
LENGTH_PREFIX_SIZE = _INT32_LE.size


class DocumentFramer(DocumentFramerInterface):
    """
    Walks a byte buffer and locates each embedded document.

    Each document declares its own total length in a 4-byte little-endian
    prefix. A prefix that is non-positive or that runs past the end of the
    buffer makes the whole buffer unusable; fewer than four trailing bytes
    are ignored.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the document framer.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)

    def frame(self, data: bytes, name: str = "<buffer>") -> List[DocumentRange]:
        """
        Locate every document in a buffer.

        Args:
            data: Buffer holding concatenated documents
            name: Buffer name used in error messages

        Returns:
            Ranges of the located documents, in buffer order

        Raises:
            EmptyInputError: If the buffer is empty
            FramingError: If a length prefix is invalid. The ranges located
                before the corrupt prefix are kept in ``error.context``.
        """
        if len(data) == 0:
            raise EmptyInputError(f"{name} is empty.")

        ranges: List[DocumentRange] = []
        total = len(data)
        offset = 0

        while offset < total:
            remaining = total - offset
            if remaining < LENGTH_PREFIX_SIZE:
                self.logger.debug(
                    f"Ignoring {remaining} trailing bytes at offset {offset} in {name}"
                )
                break

            (size,) = _INT32_LE.unpack_from(data, offset)

            if size <= 0 or size > remaining:
                raise FramingError(
                    f"Invalid BSON document size in {name}. File may be corrupt. "
                    f"(declared size {size} at offset {offset}, {remaining} bytes remaining)",
                    context={
                        "ranges": ranges,
                        "offset": offset,
                        "declared_size": size,
                        "remaining": remaining,
                    },
                )

            ranges.append(DocumentRange(offset=offset, size=size))
            offset += size

        self.logger.debug(f"Framed {len(ranges)} documents in {name} ({total} bytes)")
        return ranges
