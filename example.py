#!/usr/bin/env python3
"""
Example usage of bsonverter.

This script builds a small BSON dump in memory, converts it together
with an empty and a corrupt buffer, and prints each result.
"""

import asyncio
import datetime
import struct

import bson
from bson.int64 import Int64
from bson.objectid import ObjectId

from bsonverter import BSONConverter, InputBuffer


async def main():
    """Main example function."""
    print("bsonverter Example")
    print("=" * 50)

    users = [
        {
            "_id": ObjectId(),
            "name": "Alice Johnson",
            '"email"': "alice@example.com",
            "visits": Int64(9007199254740993),
            "joined": datetime.datetime(2021, 3, 4, tzinfo=datetime.timezone.utc),
        },
        {
            "_id": ObjectId(),
            "name": "Bob Smith",
            '"email"': "bob@example.com",
            "visits": Int64(12),
            "joined": datetime.datetime(2022, 7, 1, tzinfo=datetime.timezone.utc),
        },
    ]
    dump = b"".join(bson.encode(user) for user in users)
    corrupt = bson.encode({"ok": True}) + struct.pack("<i", 4096) + b"\x00" * 8

    inputs = [
        InputBuffer("users.bson", dump),
        InputBuffer("empty.db", b""),
        InputBuffer("corrupt.bson", corrupt),
    ]

    with BSONConverter() as converter:
        results = await converter.convert_all(inputs)

    for result in results:
        print(f"\n{result.original_name}:")
        if result.success:
            print(f"  -> {result.output_name} ({result.document_count} documents)")
            print(result.output_text)
        else:
            print(f"  failed ({result.error_type.value}): {result.error_message}")


if __name__ == "__main__":
    asyncio.run(main())
