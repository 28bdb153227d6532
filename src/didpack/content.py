"""Content encryption bound to the protected header."""

from typing import Optional, Tuple, Union

from .primitives import Primitives, resolve
from .types import (
    CHACHA_NONCE_SIZE,
    CONTENT_KEY_SIZE,
    XCHACHA_NONCE_SIZE,
    InvalidEnvelopeError,
    InvalidKeyError,
)


def _as_bytes(data: Union[str, bytes]) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def encode_plaintext(message: Union[str, bytes]) -> bytes:
    """
    Encode a message for encryption.

    Unpacking always yields text, so bytes must already be valid UTF-8.

    Raises:
        ValueError: If bytes are not valid UTF-8
    """
    if isinstance(message, str):
        return message.encode("utf-8")
    data = bytes(message)
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValueError(f"Message bytes are not valid UTF-8: {e}") from e
    return data


def encrypt_plaintext(
    plaintext: Union[str, bytes],
    aad: Union[str, bytes],
    key: bytes,
    primitives: Optional[Primitives] = None,
) -> Tuple[bytes, bytes, bytes]:
    """
    Encrypt a message with XChaCha20-Poly1305.

    Args:
        plaintext: Message (str is UTF-8 encoded; bytes must be UTF-8)
        aad: Associated data, the encoded protected header
        key: 32-byte content key
        primitives: Primitive capability (defaults to the process-wide one)

    Returns:
        Tuple of (ciphertext, tag, nonce)

    Raises:
        ValueError: If plaintext bytes are not valid UTF-8
    """
    sodium = resolve(primitives)
    data = encode_plaintext(plaintext)
    if len(key) != CONTENT_KEY_SIZE:
        raise InvalidKeyError(f"Content key must be {CONTENT_KEY_SIZE} bytes, got {len(key)}")

    nonce = sodium.random_bytes(sodium.aead_nonce_size)
    ciphertext, tag = sodium.aead_encrypt(data, _as_bytes(aad), nonce, key)
    return ciphertext, tag, nonce


def decrypt_plaintext(
    ciphertext: bytes,
    tag: bytes,
    aad: Union[str, bytes],
    nonce: bytes,
    key: bytes,
    primitives: Optional[Primitives] = None,
) -> str:
    """
    Decrypt and authenticate a message.

    A 24-byte nonce selects XChaCha20-Poly1305; a 12-byte nonce selects
    IETF ChaCha20-Poly1305 as written by older packers.

    Returns:
        The UTF-8 plaintext

    Raises:
        AuthenticationFailedError: If the tag does not verify
        InvalidEnvelopeError: If the nonce length is unknown
    """
    sodium = resolve(primitives)
    if len(key) != CONTENT_KEY_SIZE:
        raise InvalidKeyError(f"Content key must be {CONTENT_KEY_SIZE} bytes, got {len(key)}")

    if len(nonce) == XCHACHA_NONCE_SIZE:
        plaintext = sodium.aead_decrypt(ciphertext, tag, _as_bytes(aad), nonce, key)
    elif len(nonce) == CHACHA_NONCE_SIZE:
        plaintext = sodium.chacha20poly1305_decrypt(ciphertext, tag, _as_bytes(aad), nonce, key)
    else:
        raise InvalidEnvelopeError(f"Unsupported nonce length: {len(nonce)} bytes")

    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEnvelopeError(f"Decrypted message is not UTF-8: {e}") from e
