"""
Tolerant base64 decoding for wallet payloads.

Wallet adapters differ in alphabet and padding; inputs are normalized to the
standard alphabet with padding before strict decoding.
"""

import base64
import binascii

from huissier.domain.exceptions import DecodeError


def normalize_base64(value: str) -> str:
    """
    Normalize URL-safe or unpadded base64 to standard padded base64.

    Args:
        value: Base64 text in any common variant

    Returns:
        Standard alphabet, padded base64 text
    """
    normalized = value.strip().replace("-", "+").replace("_", "/")
    padding = -len(normalized) % 4
    return normalized + "=" * padding


def decode_base64(value: str, field: str) -> bytes:
    """
    Decode base64 field strictly after normalization.

    Args:
        value: Encoded value
        field: Field name reported in DecodeError

    Returns:
        Decoded bytes

    Raises:
        DecodeError: If value is empty or not valid base64
    """
    if not isinstance(value, str) or not value.strip():
        raise DecodeError(field, "value is empty")

    try:
        return base64.b64decode(normalize_base64(value), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(field, f"invalid base64: {e}") from e
