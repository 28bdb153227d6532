"""
Text codecs used on the wire: base64url, base58 and compact JSON.

These are pure encodings and work before ready().
"""

import base64
import binascii
import json
import re
from typing import Any, Union

import base58

from .types import InvalidEnvelopeError, InvalidKeyError

_B64URL_PATTERN = re.compile(r"^[A-Za-z0-9_-]*={0,2}\Z")


def compact_json(data: Any) -> str:
    """Serialize to JSON without whitespace, leaving non-ASCII text unescaped."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def b64url_encode(data: Union[bytes, str], pad: bool = True) -> str:
    """
    Encode bytes with the URL-safe base64 alphabet.

    Args:
        data: Bytes to encode (str is UTF-8 encoded first)
        pad: Keep trailing "=" padding (envelope fields) or strip it
            (signature fields)

    Returns:
        ASCII text
    """
    if isinstance(data, str):
        data = data.encode("utf-8")

    encoded = base64.urlsafe_b64encode(data).decode("ascii")
    if not pad:
        encoded = encoded.rstrip("=")
    return encoded


def b64url_decode(text: Union[str, bytes]) -> bytes:
    """
    Decode URL-safe base64, with or without "=" padding.

    The input is right-padded with "=" to a multiple of 4 characters
    before decoding. Only the URL-safe alphabet is accepted.

    Raises:
        InvalidEnvelopeError: If text is not valid base64url
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("ascii")
        except UnicodeDecodeError as e:
            raise InvalidEnvelopeError(f"Invalid base64url input: {e}") from e
    if not isinstance(text, str):
        raise InvalidEnvelopeError(f"Expected base64url text, got {type(text).__name__}")

    while len(text) % 4 != 0:
        text += "="
    if not _B64URL_PATTERN.match(text):
        raise InvalidEnvelopeError(f"Invalid base64url input: {text!r}")

    try:
        return base64.urlsafe_b64decode(text)
    except binascii.Error as e:
        raise InvalidEnvelopeError(f"Invalid base64url input: {e}") from e


def b64url_decode_str(text: Union[str, bytes]) -> str:
    """Decode base64url to UTF-8 text."""
    data = b64url_decode(text)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEnvelopeError(f"Decoded data is not UTF-8: {e}") from e


def b58_encode(data: bytes) -> str:
    """Encode bytes as base58 text (Bitcoin alphabet)."""
    return base58.b58encode(data).decode("ascii")


def b58_decode(text: Union[str, bytes]) -> bytes:
    """
    Decode base58 text to bytes.

    Raises:
        InvalidKeyError: If text contains characters outside the alphabet
    """
    try:
        return base58.b58decode(text)
    except ValueError as e:
        raise InvalidKeyError(f"Invalid base58 input: {e}") from e
