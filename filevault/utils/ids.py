"""
Utility functions for generating identifiers.

Public file ids are short base62 strings; storage keys combine the owner,
a nanosecond timestamp and a random UUID so two uploads never share a key.
"""
import secrets
import string
import time
import uuid


# Base62 character set: [0-9a-zA-Z]
BASE62_CHARS = string.digits + string.ascii_letters


def b62encode(num: int) -> str:
    """
    Encode a number to base62 string.

    Examples:
        >>> b62encode(12345)
        '3d7'
    """
    if num == 0:
        return BASE62_CHARS[0]

    base = len(BASE62_CHARS)
    encoded = []

    while num > 0:
        num, remainder = divmod(num, base)
        encoded.append(BASE62_CHARS[remainder])

    return "".join(reversed(encoded))


def generate_short_id(length: int = 12) -> str:
    """
    Generate a short, URL-safe ID using base62 encoding.

    Args:
        length: Length of the output string (default: 12 characters)

    Returns:
        Identifier using [0-9a-zA-Z] characters

    Notes:
        - 12 characters provides ~71 bits of entropy
        - Uses base62 encoding [0-9a-zA-Z] for URL safety
    """
    encoded = b62encode(int.from_bytes(uuid.uuid4().bytes, byteorder="big"))

    if len(encoded) < length:
        padding = "".join(secrets.choice(BASE62_CHARS) for _ in range(length - len(encoded)))
        return encoded + padding

    return encoded[:length]


def generate_storage_key(owner_id: int) -> str:
    """
    Generate a blob storage key for a new upload.

    Format: ``<owner_id>/<time_ns as hex>-<uuid4 hex>``

    Examples:
        >>> generate_storage_key(7)  # doctest: +SKIP
        '7/17f2a9c3d4e5b600-3b1f0c9e8a7d4f2e9c1b0a6d5e4f3a2b'
    """
    return f"{owner_id}/{time.time_ns():x}-{uuid.uuid4().hex}"
